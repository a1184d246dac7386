"""Playlist membership: adding, removing and listing songs.

A playlist's ``image`` and ``color`` follow its oldest remaining member (the
song's image and its album's color) and are both null while the playlist is
empty. Every mutation below re-establishes that within its own transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.config import PLAYLIST_SONGS_PAGE_SIZE
from app.core.db import atomic
from app.core.errors import Forbidden, MembershipNotFoundError, NotFound
from app.models.catalog import Song
from app.models.playlist import Playlist, PlaylistSong
from app.repositories import playlists as playlist_repo
from app.repositories.songs import get_song
from app.schemas.playlist import BulkSongsIn
from app.services.playlists import get_active_playlist

logger = logging.getLogger(__name__)

SONG_NOT_FOUND = "Song not found"


@dataclass(frozen=True)
class PlaylistSongsPage:
    items: list[PlaylistSong]
    next_cursor: object | None


def apply_cover(playlist: Playlist, song: Song | None) -> None:
    if song is None:
        playlist.image = None
        playlist.color = None
    else:
        playlist.image = song.image
        playlist.color = song.album.color if song.album else None


def add_song(db: Session, user_id: str, playlist_id, song_id) -> PlaylistSong:
    # Ownership only; archive state is not checked on this path.
    with atomic(db):
        playlist = playlist_repo.get_playlist(db, playlist_id, user_id=user_id, for_update=True)
        if playlist is None:
            raise NotFound()
        song = get_song(db, song_id)
        if song is None:
            raise NotFound(SONG_NOT_FOUND)

        if playlist_repo.count_playlist_songs(db, playlist.id) == 0:
            apply_cover(playlist, song)
            db.add(playlist)
        playlist_song = playlist_repo.add_playlist_song(db, playlist.id, song.id)

    logger.info("Song added to playlist %s: %s", playlist_id, song_id)
    return playlist_song


def add_songs_bulk(db: Session, user_id: str, payload: BulkSongsIn) -> list[PlaylistSong]:
    """Insert every listed song in one batch.

    Only the first listed song is checked for existence, and it alone sets the
    cover of an empty playlist. The batch keeps the listed order, so that song
    is also the oldest of the new members.
    """
    with atomic(db):
        playlist = playlist_repo.get_playlist(
            db, payload.playlist_id, user_id=user_id, is_archived=False, for_update=True
        )
        if playlist is None:
            raise NotFound()
        first_song = get_song(db, payload.song_ids[0])
        if first_song is None:
            raise NotFound(SONG_NOT_FOUND)

        if playlist_repo.count_playlist_songs(db, playlist.id) == 0:
            apply_cover(playlist, first_song)
            db.add(playlist)
        playlist_songs = playlist_repo.add_playlist_songs(
            db,
            playlist.id,
            payload.song_ids,
            added_at=datetime.now(timezone.utc),
        )

    logger.info("Added %s songs to playlist %s", len(payload.song_ids), payload.playlist_id)
    return playlist_songs


def remove_song(db: Session, playlist_id, song_id) -> None:
    with atomic(db):
        playlist = playlist_repo.get_playlist(db, playlist_id, for_update=True)
        oldest_song_ids = [
            row.song_id for row in playlist_repo.list_oldest_playlist_songs(db, playlist_id, limit=2)
        ]

        if playlist_repo.delete_playlist_song(db, playlist_id, song_id) == 0:
            raise MembershipNotFoundError(
                f"Song {song_id} is not a member of playlist {playlist_id}"
            )

        if playlist is not None and oldest_song_ids and oldest_song_ids[0] == song_id:
            if len(oldest_song_ids) == 2:
                next_song = get_song(db, oldest_song_ids[1])
                if next_song is not None:
                    apply_cover(playlist, next_song)
                    logger.info("Cover of playlist %s now from song %s", playlist_id, next_song.id)
            else:
                apply_cover(playlist, None)
            db.add(playlist)

    logger.info("Song removed from playlist %s: %s", playlist_id, song_id)


def list_existing_song_ids(db: Session, user_id: str, playlist_id) -> list:
    playlist = get_active_playlist(db, user_id, playlist_id)
    return playlist_repo.list_playlist_song_ids(db, playlist.id)


def list_songs_page(
    db: Session,
    user_id: str,
    playlist_id,
    cursor=None,
    *,
    page_size: int = PLAYLIST_SONGS_PAGE_SIZE,
) -> PlaylistSongsPage:
    """Newest-first page of members with song, album and artist detail.

    Readable by the owner, and by anyone when the playlist is public. Archived
    playlists are readable by nobody.
    """
    playlist = playlist_repo.get_playlist(db, playlist_id)
    if playlist is None:
        raise NotFound()
    if playlist.is_archived or (playlist.private and playlist.user_id != user_id):
        raise Forbidden()

    items = playlist_repo.list_playlist_songs_page(
        db, playlist.id, limit=page_size, cursor=cursor
    )
    next_cursor = items[-1].id if len(items) == page_size else None
    return PlaylistSongsPage(items=items, next_cursor=next_cursor)


def list_all_songs(db: Session, user_id: str, playlist_id) -> list[Song]:
    playlist = get_active_playlist(db, user_id, playlist_id)
    return [
        playlist_song.song
        for playlist_song in playlist_repo.list_all_playlist_songs(db, playlist.id)
    ]
