from sqlalchemy import CheckConstraint, Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from bazar.db import Base

PRODUCT_STATUSES = ("active", "inactive")


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint(
            "status IN ('active', 'inactive')", name="ck_products_status_enum"
        ),
        Index("ix_products_status_created_at", "status", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    photo = Column(String(512), nullable=True)
    status = Column(String(16), nullable=False, default="active")
    created_at = Column(DateTime, nullable=False, index=True)

    sales = relationship(
        "Sale", back_populates="product", passive_deletes=True
    )

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
