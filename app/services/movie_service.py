"""
Movie Service - orchestrates every movie write as one unit of work:
load, validate references, apply fields, store assets, reconcile
associations, commit.
"""
from sqlalchemy.orm import Session, selectinload
from datetime import date
from typing import Dict, List, Optional
import logging

from app.config import settings
from app.database import commit_or_fail
from app.exceptions import NotFoundError, StorageFailureError
from app.models.movie import Movie, MovieActor, MovieGenre
from app.schemas.movie import MovieCreate, MovieFilter, MoviePatch, MovieUpdate
from app.schemas.pagination import PaginationParams
from app.schemas.patch import PatchOperation
from app.services.asset_store import (
    MOVIES_CONTAINER,
    AssetStore,
    AssetUpload,
    discard_asset,
    save_asset,
)
from app.services.associations import AssociationManager
from app.services.movie_filters import apply_movie_filters
from app.services.pagination import Page, paginate
from app.services.patch_service import PatchService

logger = logging.getLogger(__name__)


class MovieService:
    """Service for movie catalog operations"""

    @staticmethod
    def _load_with_associations(db: Session, movie_id: int) -> Movie:
        movie = db.query(Movie).options(
            selectinload(Movie.cast).joinedload(MovieActor.actor),
            selectinload(Movie.genre_links).joinedload(MovieGenre.genre),
        ).filter(Movie.id == movie_id).first()

        if not movie:
            raise NotFoundError("Movie", movie_id)
        return movie

    @staticmethod
    def _validate_associations(db: Session, data: MovieCreate) -> None:
        """Reject dangling references before anything is written"""
        if data.actors is not None:
            AssociationManager.validate_cast(data.actors)
            AssociationManager.ensure_actors_exist(db, [entry.actor_id for entry in data.actors])
        if data.genre_ids is not None:
            AssociationManager.ensure_genres_exist(db, data.genre_ids)

    @staticmethod
    def _apply_fields(movie: Movie, data: MovieCreate) -> None:
        movie.title = data.title
        movie.in_theaters = data.in_theaters
        movie.release_date = data.release_date

    @staticmethod
    def _reconcile(movie: Movie, data: MovieCreate) -> None:
        # None means the list was not submitted: leave that association alone
        if data.actors is not None:
            AssociationManager.reconcile_cast(movie, data.actors)
        if data.genre_ids is not None:
            AssociationManager.reconcile_genres(movie, data.genre_ids)

    @staticmethod
    def _commit(db: Session, action: str, asset_store: AssetStore, new_poster: Optional[str]) -> None:
        try:
            commit_or_fail(db, action)
        except StorageFailureError:
            # The asset store is not transactional; undo the upload we just made
            discard_asset(asset_store, new_poster, MOVIES_CONTAINER)
            raise

    # ==================== READS ====================

    @staticmethod
    def get_index(db: Session, today: Optional[date] = None) -> Dict[str, List[Movie]]:
        """Homepage: next upcoming releases and movies in theaters"""
        today = today or date.today()
        limit = settings.HOMEPAGE_SECTION_SIZE

        upcoming = apply_movie_filters(
            db.query(Movie), MovieFilter(upcoming_releases=True), today
        ).order_by(Movie.release_date.asc()).limit(limit).all()

        in_theaters = apply_movie_filters(
            db.query(Movie), MovieFilter(in_theaters=True), today
        ).order_by(Movie.id).limit(limit).all()

        return {"upcoming_releases": upcoming, "in_theaters": in_theaters}

    @staticmethod
    def filter_movies(
        db: Session,
        criteria: MovieFilter,
        pagination: PaginationParams,
        today: Optional[date] = None,
    ) -> Page:
        query = apply_movie_filters(db.query(Movie), criteria, today).order_by(Movie.id)
        return paginate(query, pagination)

    @staticmethod
    def get_movie(db: Session, movie_id: int) -> Movie:
        return MovieService._load_with_associations(db, movie_id)

    # ==================== WRITES ====================

    @staticmethod
    def create_movie(
        db: Session,
        data: MovieCreate,
        poster: Optional[AssetUpload],
        asset_store: AssetStore,
    ) -> Movie:
        MovieService._validate_associations(db, data)

        movie = Movie()
        MovieService._apply_fields(movie, data)

        new_poster = None
        if poster is not None:
            new_poster = save_asset(asset_store, poster, MOVIES_CONTAINER)
            movie.poster = new_poster

        MovieService._reconcile(movie, data)
        db.add(movie)
        MovieService._commit(db, "create movie", asset_store, new_poster)

        logger.info(f"Created movie {movie.id} ({movie.title}) with {len(data.actors or [])} cast members")
        return MovieService._load_with_associations(db, movie.id)

    @staticmethod
    def update_movie(
        db: Session,
        movie_id: int,
        data: MovieUpdate,
        poster: Optional[AssetUpload],
        asset_store: AssetStore,
    ) -> Movie:
        """
        Full update of a movie.

        Existence and reference checks run before the poster is uploaded so
        a rejected request never leaves an orphaned file behind.
        """
        movie = MovieService._load_with_associations(db, movie_id)
        MovieService._validate_associations(db, data)

        MovieService._apply_fields(movie, data)

        new_poster = None
        old_poster = movie.poster
        if poster is not None:
            new_poster = save_asset(asset_store, poster, MOVIES_CONTAINER, old_poster)
            movie.poster = new_poster

        MovieService._reconcile(movie, data)
        MovieService._commit(db, f"update movie {movie_id}", asset_store, new_poster)
        if new_poster is not None:
            discard_asset(asset_store, old_poster, MOVIES_CONTAINER)

        logger.info(f"Updated movie {movie_id}")
        return MovieService._load_with_associations(db, movie_id)

    @staticmethod
    def patch_movie(db: Session, movie_id: int, operations: List[PatchOperation]) -> Movie:
        """Partial update of scalar fields; cast, genres and poster are untouched"""
        movie = MovieService._load_with_associations(db, movie_id)
        touched = PatchService.apply(movie, operations, MoviePatch)
        commit_or_fail(db, f"patch movie {movie_id}")

        logger.info(f"Patched movie {movie_id}: {sorted(touched)}")
        return MovieService._load_with_associations(db, movie_id)

    @staticmethod
    def delete_movie(db: Session, movie_id: int, asset_store: AssetStore) -> None:
        """Delete a movie with its associations; actors and genres stay"""
        movie = MovieService._load_with_associations(db, movie_id)
        poster = movie.poster

        db.delete(movie)
        commit_or_fail(db, f"delete movie {movie_id}")

        discard_asset(asset_store, poster, MOVIES_CONTAINER)
        logger.info(f"Deleted movie {movie_id}")
