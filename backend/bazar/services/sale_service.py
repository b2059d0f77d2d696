import logging
import math

from bazar.repositories.gateway import PersistenceGateway, utcnow
from bazar.schemas.sale_schema import Pagination, SaleListItem, SaleOut, SalePage
from bazar.services.exceptions import ConflictError, NotFoundError
from bazar.services.validation import validate_sale

log = logging.getLogger("bazar.sales")


class SaleService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def create(self, product_id, quantity, total) -> SaleOut:
        validate_sale(product_id, quantity, total)

        product = self.gateway.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("product not found")
        if product["status"] != "active":
            raise ConflictError("product is not active")

        sale_date = utcnow()
        sale_id = self.gateway.insert_sale(product_id, quantity, float(total), sale_date=sale_date)
        log.info("Registered sale %s for product %s (qty=%s)", sale_id, product_id, quantity)
        return SaleOut(
            id=sale_id,
            product_id=product_id,
            quantity=quantity,
            total=float(total),
            sale_date=sale_date,
        )

    def list(self, page: int, limit: int, offset: int) -> SalePage:
        total = self.gateway.count_sales()
        rows = self.gateway.list_sales(limit=limit, offset=offset)
        return SalePage(
            data=[SaleListItem.model_validate(r) for r in rows],
            pagination=Pagination(
                total=total, page=page, limit=limit, pages=math.ceil(total / limit)
            ),
        )
