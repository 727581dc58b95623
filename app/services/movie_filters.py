"""
Filter composer for the movie catalog.

Builds predicates only; executing, ordering and paginating the query is
left to the caller.
"""
from datetime import date
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Query

from app.models.movie import Movie, MovieGenre
from app.schemas.movie import MovieFilter


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_movie_predicates(criteria: MovieFilter, today: date) -> List:
    """Translate present criteria into SQL predicates; absent ones add nothing"""
    predicates = []

    title = (criteria.title or "").strip()
    if title:
        predicates.append(Movie.title.ilike(_like_pattern(title), escape="\\"))

    if criteria.in_theaters:
        predicates.append(Movie.in_theaters == True)  # noqa: E712

    if criteria.upcoming_releases:
        predicates.append(Movie.release_date > today)

    if criteria.genre_id:
        predicates.append(Movie.genre_links.any(MovieGenre.genre_id == criteria.genre_id))

    return predicates


def apply_movie_filters(query: Query, criteria: MovieFilter, today: Optional[date] = None) -> Query:
    predicates = build_movie_predicates(criteria, today or date.today())
    if predicates:
        query = query.filter(and_(*predicates))
    return query
