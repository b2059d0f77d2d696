# backend/bazar/schemas/sale_schema.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

_camel = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

class SaleOut(BaseModel):
    model_config = _camel
    id: int
    product_id: int
    quantity: int
    total: float
    sale_date: datetime

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class SaleListItem(SaleOut):
    # product columns joined in for the listing
    name: str
    photo: Optional[str] = None

class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

class SalePage(BaseModel):
    data: List[SaleListItem]
    pagination: Pagination

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
