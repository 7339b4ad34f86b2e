import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fieldtrack.core.logging import configure_logging
from fieldtrack.models import (  # noqa: F401
    component,
    job,
    local_storage,
    material_catalog,
    notification,
    photo,
    time_entry,
    worker,
)
from fieldtrack.routers.auth import router as auth_router
from fieldtrack.routers.jobs import router as jobs_router
from fieldtrack.routers.materials_catalog import router as materials_catalog_router
from fieldtrack.routers.notifications import router as notifications_router
from fieldtrack.routers.time_entries import router as time_entries_router
from fieldtrack.routers.timers import router as timers_router
from fieldtrack.routers.workers import router as workers_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("FieldTrack service starting")
    yield


app = FastAPI(
    title="FieldTrack",
    lifespan=lifespan,
)


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(auth_router)
app.include_router(jobs_router)
app.include_router(workers_router)
app.include_router(timers_router)
app.include_router(time_entries_router)
app.include_router(notifications_router)
app.include_router(materials_catalog_router)


@app.get("/")
def root():
    return {"status": "FieldTrack running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": "1.0.0",
    }
