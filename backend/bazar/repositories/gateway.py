import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from sqlalchemy import bindparam, delete, func, insert, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from bazar.models.product import Product
from bazar.models.sale import Sale
from bazar.services.exceptions import PersistenceError

log = logging.getLogger("bazar.gateway")

# OverflowError: ints past 64 bits are refused by the sqlite3 driver itself
DB_ERRORS = (SQLAlchemyError, OverflowError)

products = Product.__table__
sales = Sale.__table__


def utcnow() -> datetime:
    # stored naive; SQLite drops the offset anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PersistenceGateway:
    """
    Sole owner of reads and writes against the products and sales tables.

    Statements are built once here, with bound parameters only, and reused by
    every request; close() releases them together with the engine's pool.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._closed = False
        self._statements = self._prepare()

    def _prepare(self) -> Dict[str, object]:
        newest_products = (products.c.created_at.desc(), products.c.id.desc())
        return {
            "insert_product": insert(products).values(
                name=bindparam("name"),
                description=bindparam("description"),
                price=bindparam("price"),
                photo=bindparam("photo"),
                status=bindparam("status"),
                created_at=bindparam("created_at"),
            ),
            "list_products": select(products)
            .order_by(*newest_products)
            .limit(bindparam("limit"))
            .offset(bindparam("offset")),
            "list_products_by_status": select(products)
            .where(products.c.status == bindparam("status"))
            .order_by(*newest_products)
            .limit(bindparam("limit"))
            .offset(bindparam("offset")),
            "get_product": select(products).where(products.c.id == bindparam("id")),
            "delete_product": delete(products).where(products.c.id == bindparam("id")),
            "insert_sale": insert(sales).values(
                product_id=bindparam("product_id"),
                quantity=bindparam("quantity"),
                total=bindparam("total"),
                sale_date=bindparam("sale_date"),
            ),
            "list_sales": select(
                sales,
                products.c.name.label("name"),
                products.c.photo.label("photo"),
            )
            .select_from(sales.join(products, sales.c.product_id == products.c.id))
            .order_by(sales.c.sale_date.desc(), sales.c.id.desc())
            .limit(bindparam("limit"))
            .offset(bindparam("offset")),
            "count_sales": select(func.count()).select_from(sales),
            "list_photos": select(products.c.photo).where(products.c.photo.is_not(None)),
            "ping": text("SELECT 1"),
        }

    def _stmt(self, name: str):
        if self._closed:
            raise PersistenceError("persistence gateway is closed")
        return self._statements[name]

    def _fail(self, action: str, exc: Exception) -> PersistenceError:
        log.error("%s failed: %s", action, exc)
        return PersistenceError(f"error {action}: {exc}")

    # --- products ---

    def insert_product(
        self,
        name: str,
        description: Optional[str],
        price: float,
        photo: Optional[str],
        status: str = "active",
        created_at: Optional[datetime] = None,
    ) -> int:
        params = {
            "name": name,
            "description": description,
            "price": price,
            "photo": photo,
            "status": status,
            "created_at": created_at or utcnow(),
        }
        try:
            with self.engine.begin() as conn:
                result = conn.execute(self._stmt("insert_product"), params)
                return result.inserted_primary_key[0]
        except DB_ERRORS as e:
            raise self._fail("creating product", e)

    def list_products(
        self, status: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[dict]:
        params = {"limit": limit, "offset": offset}
        if status:
            stmt = self._stmt("list_products_by_status")
            params["status"] = status
        else:
            stmt = self._stmt("list_products")
        try:
            with self.engine.connect() as conn:
                return [dict(r) for r in conn.execute(stmt, params).mappings()]
        except DB_ERRORS as e:
            raise self._fail("listing products", e)

    def get_product_by_id(self, product_id: int) -> Optional[dict]:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(self._stmt("get_product"), {"id": product_id}).mappings().first()
        except DB_ERRORS as e:
            raise self._fail("loading product", e)
        return dict(row) if row else None

    def delete_product(self, product_id: int) -> int:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(self._stmt("delete_product"), {"id": product_id})
                return result.rowcount
        except DB_ERRORS as e:
            raise self._fail("deleting product", e)

    def list_photos(self) -> Set[str]:
        try:
            with self.engine.connect() as conn:
                return {r[0] for r in conn.execute(self._stmt("list_photos"))}
        except DB_ERRORS as e:
            raise self._fail("listing photos", e)

    # --- sales ---

    def insert_sale(
        self,
        product_id: int,
        quantity: int,
        total: float,
        sale_date: Optional[datetime] = None,
    ) -> int:
        params = {
            "product_id": product_id,
            "quantity": quantity,
            "total": total,
            "sale_date": sale_date or utcnow(),
        }
        try:
            with self.engine.begin() as conn:
                result = conn.execute(self._stmt("insert_sale"), params)
                return result.inserted_primary_key[0]
        except DB_ERRORS as e:
            raise self._fail("registering sale", e)

    def list_sales(self, limit: int = 10, offset: int = 0) -> List[dict]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    self._stmt("list_sales"), {"limit": limit, "offset": offset}
                ).mappings()
                return [dict(r) for r in rows]
        except DB_ERRORS as e:
            raise self._fail("listing sales", e)

    def count_sales(self) -> int:
        try:
            with self.engine.connect() as conn:
                return conn.execute(self._stmt("count_sales")).scalar() or 0
        except DB_ERRORS as e:
            raise self._fail("counting sales", e)

    # --- lifecycle ---

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(self._stmt("ping"))
            return True
        except (SQLAlchemyError, PersistenceError):
            return False

    def close(self):
        """Drop the prepared statements and dispose of the connection pool."""
        if self._closed:
            return
        self._statements.clear()
        self._closed = True
        self.engine.dispose()
        log.info("Database connection closed.")
