from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, validator

from app.core.config import PLAYLIST_DESCRIPTION_MAX_LENGTH, PLAYLIST_NAME_MAX_LENGTH


class PlaylistIn(BaseModel):
    """Payload for both create and update; updates replace every field."""

    name: str = Field(..., max_length=PLAYLIST_NAME_MAX_LENGTH, examples=["Road Trip"])
    description: Optional[str] = Field(default=None, max_length=PLAYLIST_DESCRIPTION_MAX_LENGTH)
    private: StrictBool

    @validator("name", pre=True)
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @validator("name")
    def _require_name(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be empty")
        return value

    @validator("description")
    def _strip_description(cls, value: Optional[str]) -> Optional[str]:
        cleaned = (value or "").strip()
        return cleaned or None


class BulkSongsIn(BaseModel):
    playlist_id: UUID = Field(..., alias="playlistId")
    song_ids: list[UUID] = Field(..., alias="songIds", min_length=1)

    class Config:
        populate_by_name = True


class PlaylistOut(BaseModel):
    id: UUID
    user_id: str = Field(..., alias="userId")
    name: str
    description: str | None = None
    private: bool
    image: str | None = None
    color: str | None = None
    is_archived: bool = Field(..., alias="isArchived")
    archived_at: datetime | None = Field(default=None, alias="archivedAt")
    created_at: datetime = Field(..., alias="createdAt")
    song_count: int | None = Field(default=None, alias="songCount")

    class Config:
        from_attributes = True
        populate_by_name = True


class ArtistOut(BaseModel):
    id: UUID
    name: str
    image: str | None = None

    class Config:
        from_attributes = True


class AlbumOut(BaseModel):
    id: UUID
    title: str
    image: str | None = None
    color: str | None = None

    class Config:
        from_attributes = True


class SongOut(BaseModel):
    id: UUID
    title: str
    image: str | None = None
    duration: int | None = None
    album_id: UUID = Field(..., alias="albumId")
    album: AlbumOut
    artists: list[ArtistOut] = []

    class Config:
        from_attributes = True
        populate_by_name = True


class PlaylistSongOut(BaseModel):
    id: UUID
    playlist_id: UUID = Field(..., alias="playlistId")
    song_id: UUID = Field(..., alias="songId")
    created_at: datetime = Field(..., alias="createdAt")
    song: SongOut

    class Config:
        from_attributes = True
        populate_by_name = True


class PlaylistSongsPage(BaseModel):
    items: list[PlaylistSongOut]
    next_cursor: UUID | None = Field(default=None, alias="nextCursor")

    class Config:
        populate_by_name = True


def dump_playlist(playlist, song_count: int | None = None) -> dict[str, Any]:
    out = PlaylistOut.model_validate(playlist)
    if song_count is not None:
        out.song_count = song_count
    return out.model_dump(by_alias=True, mode="json")


def dump_song(song) -> dict[str, Any]:
    return SongOut.model_validate(song).model_dump(by_alias=True, mode="json")
