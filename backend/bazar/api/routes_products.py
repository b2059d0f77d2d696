import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse

from bazar.api.deps import get_gateway, get_uploads
from bazar.config import settings
from bazar.repositories.gateway import PersistenceGateway
from bazar.services.exceptions import NotFoundError, PersistenceError
from bazar.services.product_service import ProductService
from bazar.services.upload_service import UploadService
from bazar.services.validation import parse_id, parse_paging

log = logging.getLogger("bazar.api.products")

router = APIRouter(prefix="/produtos", tags=["products"])


@router.post("", status_code=201, summary="Create product")
def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    gateway: PersistenceGateway = Depends(get_gateway),
    uploads: UploadService = Depends(get_uploads),
):
    svc = ProductService(gateway, uploads)
    # browsers send an empty part when no file was picked
    has_photo = photo is not None and bool(photo.filename)
    product = svc.create(
        name,
        price,
        description=description,
        photo_stream=photo.file if has_photo else None,
        photo_filename=photo.filename if has_photo else None,
        photo_content_type=photo.content_type if has_photo else None,
    )
    return product.to_json()


@router.get("", summary="List products")
def list_products(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="active | inactive"),
    gateway: PersistenceGateway = Depends(get_gateway),
    uploads: UploadService = Depends(get_uploads),
):
    page, limit, offset = parse_paging(page, limit)
    svc = ProductService(gateway, uploads)
    try:
        items = svc.list(status=status, limit=limit, offset=offset)
    except PersistenceError as e:
        if not settings.MASK_LIST_ERRORS:
            raise
        log.error("Listing products failed, answering []: %s", e)
        return JSONResponse(status_code=500, content=[])
    return [p.to_json() for p in items]


@router.delete("/{product_id}", summary="Delete product and its sales")
def delete_product(
    product_id: str,
    gateway: PersistenceGateway = Depends(get_gateway),
    uploads: UploadService = Depends(get_uploads),
):
    pid = parse_id(product_id)
    if pid is None:
        # an id that cannot exist names no product
        raise NotFoundError("product not found")
    ProductService(gateway, uploads).delete(pid)
    return {"message": "product deleted"}
