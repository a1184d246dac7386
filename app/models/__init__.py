from app.models.base import Base
from app.models.catalog import Album, Artist, Song, song_artists
from app.models.playlist import Playlist, PlaylistSong

__all__ = [
    "Album",
    "Artist",
    "Base",
    "Playlist",
    "PlaylistSong",
    "Song",
    "song_artists",
]
