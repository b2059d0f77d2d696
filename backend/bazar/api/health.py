import os

from fastapi import APIRouter, Depends

from bazar.api.deps import get_gateway, get_uploads
from bazar.repositories.gateway import PersistenceGateway
from bazar.services.upload_service import UploadService

router = APIRouter()


@router.get("/health", tags=["health"])
def health(
    gateway: PersistenceGateway = Depends(get_gateway),
    uploads: UploadService = Depends(get_uploads),
):
    db_ok = gateway.ping()
    uploads_ok = os.path.isdir(uploads.upload_dir) and os.access(uploads.upload_dir, os.W_OK)

    return {
        "status": "ok" if db_ok and uploads_ok else "degraded",
        "db": db_ok,
        "uploads": uploads_ok,
    }
