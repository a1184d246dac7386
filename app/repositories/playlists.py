from datetime import datetime, timedelta

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.catalog import Song
from app.models.playlist import Playlist, PlaylistSong

# Repository functions flush but never commit; the calling service owns the transaction.


def get_playlist(
    db: Session,
    playlist_id,
    *,
    user_id: str | None = None,
    is_archived: bool | None = None,
    for_update: bool = False,
) -> Playlist | None:
    query = select(Playlist).where(Playlist.id == playlist_id)
    if user_id is not None:
        query = query.where(Playlist.user_id == user_id)
    if is_archived is not None:
        query = query.where(Playlist.is_archived == is_archived)
    if for_update:
        query = query.with_for_update()
    return db.execute(query).scalar_one_or_none()


def count_playlist_songs(db: Session, playlist_id) -> int:
    return db.execute(
        select(func.count(PlaylistSong.id)).where(PlaylistSong.playlist_id == playlist_id)
    ).scalar_one()


def list_playlists_with_song_counts(
    db: Session, user_id: str, *, archived: bool
) -> list[tuple[Playlist, int]]:
    song_count = (
        select(func.count(PlaylistSong.id))
        .where(PlaylistSong.playlist_id == Playlist.id)
        .correlate(Playlist)
        .scalar_subquery()
    )
    order_by = Playlist.archived_at.desc() if archived else Playlist.created_at.desc()
    rows = db.execute(
        select(Playlist, song_count)
        .where(Playlist.user_id == user_id, Playlist.is_archived == archived)
        .order_by(order_by, Playlist.id.desc())
    ).all()
    return [(playlist, count) for playlist, count in rows]


def create_playlist(
    db: Session,
    *,
    user_id: str,
    name: str,
    description: str | None,
    private: bool,
) -> Playlist:
    playlist = Playlist(
        user_id=user_id,
        name=name,
        description=description,
        private=private,
        is_archived=False,
    )
    db.add(playlist)
    db.flush()
    return playlist


def list_oldest_playlist_songs(db: Session, playlist_id, *, limit: int = 2) -> list[PlaylistSong]:
    return db.execute(
        select(PlaylistSong)
        .where(PlaylistSong.playlist_id == playlist_id)
        .order_by(PlaylistSong.created_at.asc(), PlaylistSong.id.asc())
        .limit(limit)
    ).scalars().all()


def add_playlist_song(db: Session, playlist_id, song_id) -> PlaylistSong:
    playlist_song = PlaylistSong(playlist_id=playlist_id, song_id=song_id)
    db.add(playlist_song)
    db.flush()
    return playlist_song


def add_playlist_songs(
    db: Session, playlist_id, song_ids: list, *, added_at: datetime
) -> list[PlaylistSong]:
    # Stagger timestamps so the batch keeps the caller's order.
    playlist_songs = [
        PlaylistSong(
            playlist_id=playlist_id,
            song_id=song_id,
            created_at=added_at + timedelta(microseconds=index),
        )
        for index, song_id in enumerate(song_ids)
    ]
    db.add_all(playlist_songs)
    db.flush()
    return playlist_songs


def delete_playlist_song(db: Session, playlist_id, song_id) -> int:
    result = db.execute(
        delete(PlaylistSong).where(
            PlaylistSong.playlist_id == playlist_id,
            PlaylistSong.song_id == song_id,
        )
    )
    return result.rowcount


def list_playlist_song_ids(db: Session, playlist_id) -> list:
    return db.execute(
        select(PlaylistSong.song_id).where(PlaylistSong.playlist_id == playlist_id)
    ).scalars().all()


def _with_song_details(query):
    return query.options(
        joinedload(PlaylistSong.song).joinedload(Song.album),
        joinedload(PlaylistSong.song).selectinload(Song.artists),
    )


def list_playlist_songs_page(
    db: Session, playlist_id, *, limit: int, cursor=None
) -> list[PlaylistSong]:
    query = select(PlaylistSong).where(PlaylistSong.playlist_id == playlist_id)
    if cursor is not None:
        cursor_row = db.execute(
            select(PlaylistSong.created_at, PlaylistSong.id).where(
                PlaylistSong.id == cursor,
                PlaylistSong.playlist_id == playlist_id,
            )
        ).one_or_none()
        if cursor_row is None:
            return []
        cursor_created_at, cursor_id = cursor_row
        query = query.where(
            or_(
                PlaylistSong.created_at < cursor_created_at,
                and_(
                    PlaylistSong.created_at == cursor_created_at,
                    PlaylistSong.id < cursor_id,
                ),
            )
        )
    query = query.order_by(PlaylistSong.created_at.desc(), PlaylistSong.id.desc()).limit(limit)
    return db.execute(_with_song_details(query)).unique().scalars().all()


def list_all_playlist_songs(db: Session, playlist_id) -> list[PlaylistSong]:
    query = (
        select(PlaylistSong)
        .where(PlaylistSong.playlist_id == playlist_id)
        .order_by(PlaylistSong.created_at.desc(), PlaylistSong.id.desc())
    )
    return db.execute(_with_song_details(query)).unique().scalars().all()


def list_expired_archived_playlists(db: Session, cutoff: datetime) -> list[Playlist]:
    return db.execute(
        select(Playlist)
        .where(Playlist.is_archived.is_(True), Playlist.archived_at < cutoff)
        .order_by(Playlist.archived_at.asc())
    ).scalars().all()
