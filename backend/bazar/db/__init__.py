import importlib
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base

from bazar.config import settings

log = logging.getLogger("bazar.db")

DATABASE_URL = settings.DATABASE_URL


def make_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # handlers run in the threadpool, connections hop threads
        connect_args["check_same_thread"] = False
    eng = create_engine(url, future=True, echo=False, connect_args=connect_args)

    if eng.dialect.name == "sqlite":

        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_conn, conn_record):
            # sales rely on ON DELETE CASCADE, which SQLite ignores unless asked
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

    return eng


engine = make_engine(DATABASE_URL)
Base = declarative_base()

MODEL_MODULES = [
    "bazar.models.product",
    "bazar.models.sale",
]


def init_db(reset: bool = False, bind=None):
    """
    Create the products and sales tables (and their indices) if missing.

    With reset=True every table is dropped first, which is what the tests and
    RESET_DB=1 use to start from an empty store.
    """
    bind = bind or engine
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.warning("Resetting database at %s", bind.url)
        Base.metadata.drop_all(bind=bind)

    Base.metadata.create_all(bind=bind)
    log.info("Database initialized (%s)", ", ".join(sorted(Base.metadata.tables)))
