"""
Ordered association manager for movie casts and genre sets.

Cast order is always re-derived from the submitted list: after any write the
stored cast_order values are exactly 0..N-1 in submission order.
"""
from collections import Counter
from itertools import groupby
from typing import Iterable, List
import logging

from sqlalchemy.orm import Session

from app.exceptions import InvalidReferenceError, ValidationFailedError
from app.models.actor import Actor
from app.models.genre import Genre
from app.models.movie import Movie, MovieActor, MovieGenre
from app.schemas.movie import CastEntry

logger = logging.getLogger(__name__)


class AssociationManager:
    """Validates and reconciles movie-actor and movie-genre associations"""

    @staticmethod
    def validate_cast(entries: List[CastEntry]) -> None:
        """An actor may appear only once per cast"""
        counts = Counter(entry.actor_id for entry in entries)
        duplicates = sorted(actor_id for actor_id, count in counts.items() if count > 1)
        if duplicates:
            raise ValidationFailedError(
                "Cast lists an actor more than once",
                [{"field": "actors", "message": f"Duplicate actor ID {actor_id}"} for actor_id in duplicates],
            )

    @staticmethod
    def ensure_actors_exist(db: Session, actor_ids: Iterable[int]) -> None:
        wanted = set(actor_ids)
        if not wanted:
            return
        found = {row[0] for row in db.query(Actor.id).filter(Actor.id.in_(wanted)).all()}
        if wanted - found:
            raise InvalidReferenceError("Actor", wanted - found)

    @staticmethod
    def ensure_genres_exist(db: Session, genre_ids: Iterable[int]) -> None:
        wanted = set(genre_ids)
        if not wanted:
            return
        found = {row[0] for row in db.query(Genre.id).filter(Genre.id.in_(wanted)).all()}
        if wanted - found:
            raise InvalidReferenceError("Genre", wanted - found)

    @staticmethod
    def reconcile_cast(movie: Movie, entries: List[CastEntry]) -> None:
        """
        Make the movie's cast match the submitted list.

        - actors no longer listed lose their association (delete-orphan)
        - newly listed actors get a fresh association
        - retained actors keep their row but always get the new position
          and character name
        """
        existing = {link.actor_id: link for link in movie.cast}
        reconciled = []
        for position, entry in enumerate(entries):
            link = existing.pop(entry.actor_id, None)
            if link is None:
                link = MovieActor(actor_id=entry.actor_id)
            link.character = entry.character
            link.cast_order = position
            reconciled.append(link)

        if existing:
            logger.debug(f"Removing actors {sorted(existing)} from movie {movie.id}")
        movie.cast = reconciled

    @staticmethod
    def reconcile_genres(movie: Movie, genre_ids: List[int]) -> None:
        """Set difference on genre membership; repeated IDs collapse"""
        existing = {link.genre_id: link for link in movie.genre_links}
        wanted = list(dict.fromkeys(genre_ids))
        movie.genre_links = [existing.get(genre_id) or MovieGenre(genre_id=genre_id) for genre_id in wanted]

    @staticmethod
    def compact_cast_order(db: Session, movie_ids: Iterable[int]) -> None:
        """Renumber the remaining cast of each movie to a dense 0..N-1 sequence"""
        movie_ids = set(movie_ids)
        if not movie_ids:
            return
        links = db.query(MovieActor).filter(
            MovieActor.movie_id.in_(movie_ids)
        ).order_by(MovieActor.movie_id, MovieActor.cast_order).all()

        for _, group in groupby(links, key=lambda link: link.movie_id):
            for position, link in enumerate(group):
                link.cast_order = position
