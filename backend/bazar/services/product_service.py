import logging
from typing import BinaryIO, List, Optional

from bazar.repositories.gateway import PersistenceGateway, utcnow
from bazar.schemas.product_schema import ProductOut
from bazar.services.exceptions import NotFoundError, ValidationError
from bazar.services.upload_service import UploadService
from bazar.services.validation import to_number, validate_product, validate_status

log = logging.getLogger("bazar.products")


class ProductService:
    def __init__(self, gateway: PersistenceGateway, uploads: UploadService):
        self.gateway = gateway
        self.uploads = uploads

    def create(
        self,
        name,
        price,
        description=None,
        photo_stream: Optional[BinaryIO] = None,
        photo_filename: Optional[str] = None,
        photo_content_type: Optional[str] = None,
    ) -> ProductOut:
        """
        Validate, store the photo (if any), then insert with status "active".

        Once a photo is on disk, any later failure removes it before the
        error propagates.
        """
        errors = validate_product(name, price, description)
        if errors:
            raise ValidationError("invalid product data", errors=errors)

        photo = None
        if photo_stream is not None:
            photo = self.uploads.save(photo_stream, photo_filename, photo_content_type)

        try:
            name = name.strip()
            description = (description or "").strip() or None
            price = to_number(price)
            created_at = utcnow()
            product_id = self.gateway.insert_product(
                name, description, price, photo, "active", created_at=created_at
            )
        except Exception:
            self.uploads.discard(photo)
            raise

        log.info("Created product %s (%s)", product_id, name)
        return ProductOut(
            id=product_id,
            name=name,
            description=description,
            price=price,
            photo=photo,
            status="active",
            created_at=created_at,
        )

    def list(self, status: Optional[str] = None, limit: int = 10, offset: int = 0) -> List[ProductOut]:
        status = validate_status(status)
        rows = self.gateway.list_products(status=status, limit=limit, offset=offset)
        return [ProductOut.model_validate(r) for r in rows]

    def delete(self, product_id: int):
        product = self.gateway.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("product not found")
        if self.gateway.delete_product(product_id) == 0:
            # removed by someone else between lookup and delete
            raise NotFoundError("product not found")
        if product.get("photo"):
            self.uploads.discard(product["photo"])
        log.info("Deleted product %s", product_id)
