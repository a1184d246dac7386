from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.core import db as db_module
from app.core.debug_tools import require_debug_tools

router = APIRouter(
    prefix="/api/debug",
    tags=["debug"],
    dependencies=[Depends(require_debug_tools)],
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/db-ping")
def db_ping():
    if db_module.SessionLocal is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": "Database session not configured"},
        )

    session = db_module.SessionLocal()
    try:
        session.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": str(exc)},
        )
    finally:
        session.close()

    return {"ok": True, "ts": _now_iso()}


@router.get("/db-pool")
def db_pool():
    engine = db_module.engine
    if engine is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": "Database engine not configured"},
        )

    checked_out = None
    if hasattr(engine.pool, "checkedout"):
        checked_out = engine.pool.checkedout()

    return {"ok": True, "pool_status": engine.pool.status(), "checked_out": checked_out, "ts": _now_iso()}

