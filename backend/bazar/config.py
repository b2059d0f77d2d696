from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./bazar.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 3000
    FRONTEND_ORIGINS: List[str] = ["*"]
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    RESET_DB: bool = False
    # legacy clients expect a bare [] when listing products fails
    MASK_LIST_ERRORS: bool = False
    ORPHAN_SWEEP_SECONDS: int = 600
    ORPHAN_GRACE_SECONDS: int = 3600
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
