from fastapi import Request

from bazar.repositories.gateway import PersistenceGateway
from bazar.services.upload_service import UploadService


def get_gateway(request: Request) -> PersistenceGateway:
    """Gateway built once in the app lifespan."""
    return request.app.state.gateway


def get_uploads(request: Request) -> UploadService:
    return request.app.state.uploads
