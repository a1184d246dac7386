import os

from dotenv import load_dotenv

load_dotenv()

DB_APPLICATION_NAME = "playlist-service"

AUTH_USER_HEADER = os.getenv("AUTH_USER_HEADER", "X-User-Id")

PLAYLIST_SONGS_PAGE_SIZE = int(os.getenv("PLAYLIST_SONGS_PAGE_SIZE", "10"))
PLAYLIST_RESTORE_WINDOW_DAYS = int(os.getenv("PLAYLIST_RESTORE_WINDOW_DAYS", "90"))

PLAYLIST_NAME_MAX_LENGTH = 100
PLAYLIST_DESCRIPTION_MAX_LENGTH = 500

ARCHIVE_REAPER_ENABLED = os.getenv("ARCHIVE_REAPER_ENABLED") == "1"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
