# backend/bazar/schemas/product_schema.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

class ProductOut(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )
    id: int
    name: str
    description: Optional[str] = None
    price: float
    photo: Optional[str] = None
    status: str
    created_at: datetime

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
