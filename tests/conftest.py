from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.db import get_db
from app.main import app
from app.models import Album, Artist, Base, Song


@dataclass(frozen=True)
class SongRef:
    id: uuid.UUID
    image: str | None
    color: str | None


@pytest.fixture
def session_factory(tmp_path) -> sessionmaker:
    db_path = tmp_path / "playlists.db"
    engine = create_engine(
        f"sqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory) -> Session:
    with session_factory() as session:
        yield session


@pytest.fixture
def make_song(session_factory) -> Callable[..., SongRef]:
    """Create a catalog song with its own album and artist."""

    def _make_song(title: str, *, image: str | None = None, color: str | None = None) -> SongRef:
        with session_factory() as session:
            album = Album(title=f"{title} (album)", image=image, color=color)
            artist = Artist(name=f"{title} artist", image=None)
            song = Song(title=title, image=image, duration=180, album=album, artists=[artist])
            session.add(song)
            session.commit()
            return SongRef(id=song.id, image=song.image, color=album.color)

    return _make_song


@pytest.fixture
def client(session_factory) -> TestClient:
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
