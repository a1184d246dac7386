from __future__ import annotations

import logging
import sys

from app.core import db as db_module
from app.core.config import PLAYLIST_RESTORE_WINDOW_DAYS
from app.services.archive_reaper import run_archive_reaper_once

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger("purge_expired_playlists")


def main() -> int:
    if db_module.SessionLocal is None:
        print("PURGE: DATABASE_URL not configured")
        return 1
    try:
        purged = run_archive_reaper_once()
    except Exception:
        logger.exception("PURGE: failed")
        return 1
    print(f"PURGE: removed {purged} playlists archived more than {PLAYLIST_RESTORE_WINDOW_DAYS} days ago")
    return 0


if __name__ == "__main__":
    sys.exit(main())
