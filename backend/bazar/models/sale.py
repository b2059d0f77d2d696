from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from bazar.db import Base


class Sale(Base):
    __tablename__ = "sales"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),
        CheckConstraint("total >= 0", name="ck_sales_total_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    total = Column(Float, nullable=False)
    sale_date = Column(DateTime, nullable=False, index=True)

    product = relationship("Product", back_populates="sales")
