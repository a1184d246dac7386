import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.api import debug_router, playlists_router
from app.core.config import ARCHIVE_REAPER_ENABLED, LOG_LEVEL
from app.core.db import dispose_engine, request_path_var
from app.core.errors import register_exception_handlers
from app.services.archive_reaper import start_archive_reaper

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    reaper_stop = start_archive_reaper() if ARCHIVE_REAPER_ENABLED else None
    try:
        yield
    finally:
        if reaper_stop is not None:
            reaper_stop.set()
        dispose_engine()


app = FastAPI(title="Playlist Service", lifespan=lifespan)
register_exception_handlers(app)


@app.middleware("http")
async def request_path_context_middleware(request: Request, call_next):
    token = request_path_var.set(request.url.path)
    try:
        response = await call_next(request)
    finally:
        request_path_var.reset(token)
    return response


@app.middleware("http")
async def request_tracing_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    method = request.method
    path = request.url.path
    logger.info("REQ_START %s %s %s", request_id, method, path)
    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as err:
        logger.error("REQ_ERR %s %s %s %s", request_id, method, path, err)
        raise
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "REQ_END %s %s %s %s %.2fms",
        request_id,
        method,
        path,
        response.status_code,
        elapsed_ms,
    )
    return response

app.include_router(debug_router)
app.include_router(playlists_router, prefix="/playlists")


@app.get("/health")
def health():
    return {"ok": True}
