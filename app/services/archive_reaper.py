from __future__ import annotations

import logging
import os
import threading

from app.core import db as db_module
from app.services.playlists import purge_expired_playlists

logger = logging.getLogger(__name__)


def _resolve_interval_seconds() -> int:
    raw_value = os.getenv("ARCHIVE_REAPER_INTERVAL_SECONDS", "3600")
    try:
        interval = int(raw_value)
    except (TypeError, ValueError):
        interval = 3600
    return min(max(interval, 60), 86400)


def run_archive_reaper_once() -> int:
    if db_module.SessionLocal is None:
        return 0
    db = db_module.SessionLocal()
    try:
        return purge_expired_playlists(db)
    finally:
        db.close()


def _run_reaper_loop(stop_event: threading.Event) -> None:
    interval_seconds = _resolve_interval_seconds()
    while not stop_event.is_set():
        try:
            run_archive_reaper_once()
        except Exception:
            logger.exception("archive_reaper_failed")
        stop_event.wait(interval_seconds)


def start_archive_reaper() -> threading.Event:
    """Purge expired archived playlists periodically until the returned event is set."""
    stop_event = threading.Event()
    thread = threading.Thread(
        target=_run_reaper_loop, args=(stop_event,), name="archive-reaper", daemon=True
    )
    thread.start()
    logger.info("Archive reaper started, interval=%ss", _resolve_interval_seconds())
    return stop_event
