from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth import CurrentUser, require_current_user
from app.core.db import get_db
from app.core.errors import envelope
from app.schemas.playlist import (
    BulkSongsIn,
    PlaylistIn,
    PlaylistSongOut,
    PlaylistSongsPage,
    dump_playlist,
    dump_song,
)
from app.services import playlist_songs, playlists

router = APIRouter(tags=["playlists"])

SUCCESS = "Success"


@router.post("", status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistIn,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlist = playlists.create_playlist(db, user.user_id, payload)
    return envelope("Playlist created successfully", dump_playlist(playlist, song_count=0))


@router.get("")
def get_user_playlists(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    rows = playlists.list_active_playlists(db, user.user_id)
    return envelope(SUCCESS, [dump_playlist(playlist, count) for playlist, count in rows])


@router.post("/songs", status_code=status.HTTP_201_CREATED)
def add_playlist_songs_bulk(
    payload: BulkSongsIn,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlist_songs.add_songs_bulk(db, user.user_id, payload)
    return envelope("Songs added to playlist successfully")


@router.post("/archived")
def get_archived_playlists(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    rows = playlists.list_archived_playlists(db, user.user_id)
    return envelope(SUCCESS, [dump_playlist(playlist, count) for playlist, count in rows])


@router.get("/{playlist_id}/songs", response_model=PlaylistSongsPage)
def get_playlist_songs(
    playlist_id: UUID,
    cursor: UUID | None = Query(default=None),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    page = playlist_songs.list_songs_page(db, user.user_id, playlist_id, cursor)
    return PlaylistSongsPage(
        items=[PlaylistSongOut.model_validate(item) for item in page.items],
        next_cursor=page.next_cursor,
    )


@router.get("/{playlist_id}/all-songs")
def get_all_playlist_songs(
    playlist_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    songs = playlist_songs.list_all_songs(db, user.user_id, playlist_id)
    return envelope(SUCCESS, [dump_song(song) for song in songs])


@router.get("/{playlist_id}/existing-songs")
def get_playlist_existing_songs(
    playlist_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    song_ids = playlist_songs.list_existing_song_ids(db, user.user_id, playlist_id)
    return envelope(SUCCESS, [str(song_id) for song_id in song_ids])


@router.patch("/{playlist_id}/restore")
def restore_playlist(
    playlist_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlists.restore_playlist(db, user.user_id, playlist_id)
    return envelope("Playlist restored successfully")


@router.delete("/{playlist_id}/songs/{song_id}")
def remove_playlist_song(
    playlist_id: UUID,
    song_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlist_songs.remove_song(db, playlist_id, song_id)
    return envelope("Song removed from playlist successfully")


@router.post("/{playlist_id}/songs/{song_id}", status_code=status.HTTP_201_CREATED)
def add_playlist_song(
    playlist_id: UUID,
    song_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlist_songs.add_song(db, user.user_id, playlist_id, song_id)
    return envelope("Song added to playlist successfully")


@router.get("/{playlist_id}")
def get_user_playlist(
    playlist_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlist, song_count = playlists.get_playlist_with_song_count(db, user.user_id, playlist_id)
    return envelope(SUCCESS, dump_playlist(playlist, song_count))


@router.patch("/{playlist_id}")
def update_user_playlist(
    playlist_id: UUID,
    payload: PlaylistIn,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlists.update_playlist(db, user.user_id, playlist_id, payload)
    return envelope("Playlist updated successfully")


@router.delete("/{playlist_id}")
def delete_user_playlist(
    playlist_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    playlists.archive_playlist(db, user.user_id, playlist_id)
    return envelope("Playlist deleted successfully")
