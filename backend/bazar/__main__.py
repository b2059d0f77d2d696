import sys

import uvicorn

from bazar.config import settings
from bazar.main import app


def main():
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
    # lifespan shutdown records whether the database closed cleanly
    if getattr(app.state, "shutdown_failed", False):
        sys.exit(1)


if __name__ == "__main__":
    main()
