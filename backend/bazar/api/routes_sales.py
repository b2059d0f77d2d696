from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from bazar.api.deps import get_gateway
from bazar.repositories.gateway import PersistenceGateway
from bazar.services.exceptions import ValidationError
from bazar.services.sale_service import SaleService
from bazar.services.validation import parse_paging

router = APIRouter(prefix="/vendas", tags=["sales"])


@router.post("", status_code=201, summary="Register sale")
def create_sale(payload: Any = Body(None), gateway: PersistenceGateway = Depends(get_gateway)):
    """
    payload: { "productId": 1, "quantity": 2, "total": 19.8 }
    """
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    sale = SaleService(gateway).create(
        payload.get("productId"), payload.get("quantity"), payload.get("total")
    )
    return sale.to_json()


@router.get("", summary="List sales")
def list_sales(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    page, limit, offset = parse_paging(page, limit)
    return SaleService(gateway).list(page, limit, offset).to_json()
