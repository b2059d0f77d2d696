import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from bazar.api.health import router as health_router
from bazar.api.routes_products import router as products_router
from bazar.api.routes_sales import router as sales_router
from bazar.config import settings
from bazar.db import engine, init_db
from bazar.repositories.gateway import PersistenceGateway
from bazar.services.exceptions import BazarError, ValidationError
from bazar.services.orphan_service import OrphanSweeper
from bazar.services.upload_service import UploadService

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
log = logging.getLogger("bazar")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    init_db(reset=settings.RESET_DB)
    uploads = UploadService(settings.UPLOAD_DIR, max_bytes=settings.MAX_UPLOAD_BYTES)
    uploads.ensure_dir()
    gateway = PersistenceGateway(engine)
    app.state.uploads = uploads
    app.state.gateway = gateway
    app.state.shutdown_failed = False

    # scheduler for removing uploads no product points at
    scheduler = None
    if settings.ORPHAN_SWEEP_SECONDS > 0:
        sweeper = OrphanSweeper(gateway, uploads, grace_seconds=settings.ORPHAN_GRACE_SECONDS)

        def sweep_job():
            try:
                sweeper.sweep()
            except BazarError as e:
                log.error("Orphan sweep failed: %s", e)

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            sweep_job, "interval", seconds=settings.ORPHAN_SWEEP_SECONDS, id="sweep_orphan_uploads"
        )
        scheduler.start()

    log.info("Bazar backend ready (uploads in %s)", uploads.upload_dir)
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        try:
            gateway.close()
        except Exception:
            log.exception("Error closing database")
            app.state.shutdown_failed = True


app = FastAPI(title="Bazar - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BazarError)
async def bazar_error_handler(request: Request, exc: BazarError):
    if isinstance(exc, ValidationError) and exc.errors:
        content = {"errors": exc.errors}
    else:
        content = {"error": exc.message}
    if exc.status_code >= 500:
        log.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    else:
        log.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = "invalid request"
    if first.get("msg"):
        message += (f" ({where})" if where else "") + ": " + first["msg"]
    log.info("%s %s -> 400: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.error(
        "%s %s -> 500: unhandled %s", request.method, request.url.path,
        type(exc).__name__, exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "internal server error"})


app.include_router(health_router, tags=["health"])

app.include_router(products_router)

app.include_router(sales_router)

app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)
