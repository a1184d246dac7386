from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.models.catalog import Song


def get_song(db: Session, song_id) -> Song | None:
    return db.execute(
        select(Song).options(joinedload(Song.album)).where(Song.id == song_id)
    ).scalar_one_or_none()
