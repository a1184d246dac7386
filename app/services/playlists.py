"""Playlist lifecycle: create, read, update, archive, restore and purge.

A playlist moves Active -> Archived on archive, and back on restore while the
archive is younger than the grace window. A restore attempted after the window
deletes the playlist for good and fails with ``Expired``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import PLAYLIST_RESTORE_WINDOW_DAYS
from app.core.db import atomic
from app.core.errors import Expired, NotFound
from app.models.playlist import Playlist
from app.repositories import playlists as playlist_repo
from app.schemas.playlist import PlaylistIn

logger = logging.getLogger(__name__)


def _ensure_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_restore_window_expired(
    archived_at: datetime,
    now: datetime | None = None,
    *,
    window_days: int = PLAYLIST_RESTORE_WINDOW_DAYS,
) -> bool:
    elapsed = _ensure_utc(now) - _ensure_utc(archived_at)
    # Whole days, so any part of the day after the window still restores.
    return elapsed.days > window_days


def create_playlist(db: Session, user_id: str, payload: PlaylistIn) -> Playlist:
    with atomic(db):
        playlist = playlist_repo.create_playlist(
            db,
            user_id=user_id,
            name=payload.name,
            description=payload.description,
            private=payload.private,
        )
    db.refresh(playlist)
    logger.info("Playlist created: %s for user %s", playlist.id, user_id)
    return playlist


def list_active_playlists(db: Session, user_id: str) -> list[tuple[Playlist, int]]:
    return playlist_repo.list_playlists_with_song_counts(db, user_id, archived=False)


def list_archived_playlists(db: Session, user_id: str) -> list[tuple[Playlist, int]]:
    return playlist_repo.list_playlists_with_song_counts(db, user_id, archived=True)


def get_active_playlist(db: Session, user_id: str, playlist_id) -> Playlist:
    """Owner-scoped lookup of an active playlist.

    Wrong owner and archived both read as missing so that callers cannot discover
    playlists they do not own.
    """
    playlist = playlist_repo.get_playlist(db, playlist_id, user_id=user_id, is_archived=False)
    if playlist is None:
        raise NotFound()
    return playlist


def get_playlist_with_song_count(db: Session, user_id: str, playlist_id) -> tuple[Playlist, int]:
    playlist = get_active_playlist(db, user_id, playlist_id)
    return playlist, playlist_repo.count_playlist_songs(db, playlist.id)


def update_playlist(db: Session, user_id: str, playlist_id, payload: PlaylistIn) -> Playlist:
    with atomic(db):
        playlist = get_active_playlist(db, user_id, playlist_id)
        playlist.name = payload.name
        playlist.description = payload.description
        playlist.private = payload.private
        db.add(playlist)
    db.refresh(playlist)
    logger.info("Playlist updated: %s", playlist.id)
    return playlist


def archive_playlist(
    db: Session, user_id: str, playlist_id, *, now: datetime | None = None
) -> Playlist:
    with atomic(db):
        playlist = get_active_playlist(db, user_id, playlist_id)
        playlist.is_archived = True
        playlist.archived_at = _ensure_utc(now)
        db.add(playlist)
    logger.info("Playlist archived: %s for user %s", playlist.id, user_id)
    return playlist


def restore_playlist(
    db: Session, user_id: str, playlist_id, *, now: datetime | None = None
) -> Playlist:
    playlist = playlist_repo.get_playlist(db, playlist_id, user_id=user_id, is_archived=True)
    if playlist is None or playlist.archived_at is None:
        raise NotFound()

    archived_at = playlist.archived_at
    if is_restore_window_expired(archived_at, now):
        with atomic(db):
            db.delete(playlist)
        logger.info("Playlist %s purged on restore, archived at %s", playlist_id, archived_at)
        raise Expired()

    with atomic(db):
        playlist.is_archived = False
        playlist.archived_at = None
        db.add(playlist)
    logger.info("Playlist restored: %s for user %s", playlist.id, user_id)
    return playlist


def purge_expired_playlists(db: Session, *, now: datetime | None = None) -> int:
    cutoff = _ensure_utc(now) - timedelta(days=PLAYLIST_RESTORE_WINDOW_DAYS)
    candidates = playlist_repo.list_expired_archived_playlists(db, cutoff)
    expired = [
        playlist
        for playlist in candidates
        if playlist.archived_at is not None and is_restore_window_expired(playlist.archived_at, now)
    ]
    if not expired:
        return 0
    with atomic(db):
        for playlist in expired:
            db.delete(playlist)
    logger.info("Purged %s expired archived playlists", len(expired))
    return len(expired)
