from sqlalchemy.orm import Session
from typing import List
import logging

from app.database import commit_or_fail
from app.exceptions import NotFoundError
from app.models.genre import Genre
from app.models.movie import MovieGenre
from app.schemas.genre import GenreCreate

logger = logging.getLogger(__name__)


class GenreService:
    """Service for genre operations"""

    @staticmethod
    def list_genres(db: Session) -> List[Genre]:
        return db.query(Genre).order_by(Genre.name).all()

    @staticmethod
    def get_genre(db: Session, genre_id: int) -> Genre:
        genre = db.query(Genre).filter(Genre.id == genre_id).first()
        if not genre:
            raise NotFoundError("Genre", genre_id)
        return genre

    @staticmethod
    def create_genre(db: Session, data: GenreCreate) -> Genre:
        genre = Genre(name=data.name)
        db.add(genre)
        commit_or_fail(db, "create genre")
        db.refresh(genre)
        logger.info(f"Created genre {genre.id} ({genre.name})")
        return genre

    @staticmethod
    def update_genre(db: Session, genre_id: int, data: GenreCreate) -> Genre:
        genre = GenreService.get_genre(db, genre_id)
        genre.name = data.name
        commit_or_fail(db, f"update genre {genre_id}")
        db.refresh(genre)
        return genre

    @staticmethod
    def delete_genre(db: Session, genre_id: int) -> None:
        """Delete a genre and its movie memberships; movies stay"""
        genre = GenreService.get_genre(db, genre_id)
        db.query(MovieGenre).filter(MovieGenre.genre_id == genre_id).delete(synchronize_session=False)
        db.delete(genre)
        commit_or_fail(db, f"delete genre {genre_id}")
        logger.info(f"Deleted genre {genre_id}")
