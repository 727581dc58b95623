from datetime import date, timedelta

import pytest
from sqlalchemy import and_

from app.models.genre import Genre
from app.models.movie import Movie, MovieGenre
from app.schemas.movie import MovieFilter
from app.services.movie_filters import apply_movie_filters, build_movie_predicates

TODAY = date(2024, 6, 15)


@pytest.fixture
def catalog(db_session):
    drama = Genre(name="Drama")
    comedy = Genre(name="Comedy")
    db_session.add_all([drama, comedy])
    db_session.commit()

    movies = {
        "dark": Movie(title="The Dark Night", in_theaters=True, release_date=TODAY - timedelta(days=30)),
        "dawn": Movie(title="Dark Dawn", in_theaters=False, release_date=TODAY + timedelta(days=10)),
        "laugh": Movie(title="Laugh Out", in_theaters=True, release_date=TODAY + timedelta(days=1)),
        "today": Movie(title="Released Today", in_theaters=True, release_date=TODAY),
        "percent": Movie(title="100% Fun", in_theaters=False, release_date=None),
    }
    movies["dark"].genre_links = [MovieGenre(genre_id=drama.id)]
    movies["dawn"].genre_links = [MovieGenre(genre_id=drama.id), MovieGenre(genre_id=comedy.id)]
    movies["laugh"].genre_links = [MovieGenre(genre_id=comedy.id)]
    db_session.add_all(movies.values())
    db_session.commit()
    return {"drama": drama, "comedy": comedy, **movies}


def titles(db_session, criteria):
    query = apply_movie_filters(db_session.query(Movie), criteria, TODAY).order_by(Movie.id)
    return {movie.title for movie in query.all()}


def test_no_criteria_means_no_constraint(db_session, catalog):
    assert build_movie_predicates(MovieFilter(), TODAY) == []
    assert len(titles(db_session, MovieFilter())) == 5


def test_title_is_case_insensitive_substring(db_session, catalog):
    assert titles(db_session, MovieFilter(title="dARk")) == {"The Dark Night", "Dark Dawn"}


def test_title_wildcards_are_literal(db_session, catalog):
    assert titles(db_session, MovieFilter(title="0%")) == {"100% Fun"}
    assert titles(db_session, MovieFilter(title="_")) == set()


def test_blank_title_is_ignored(db_session, catalog):
    assert len(titles(db_session, MovieFilter(title="   "))) == 5


def test_in_theaters_flag(db_session, catalog):
    assert titles(db_session, MovieFilter(in_theaters=True)) == {"The Dark Night", "Laugh Out", "Released Today"}
    assert len(titles(db_session, MovieFilter(in_theaters=False))) == 5


def test_upcoming_is_strictly_after_today(db_session, catalog):
    assert titles(db_session, MovieFilter(upcoming_releases=True)) == {"Dark Dawn", "Laugh Out"}


def test_genre_membership(db_session, catalog):
    assert titles(db_session, MovieFilter(genre_id=catalog["comedy"].id)) == {"Dark Dawn", "Laugh Out"}


def test_zero_genre_means_any(db_session, catalog):
    assert len(titles(db_session, MovieFilter(genre_id=0))) == 5


def test_criteria_combine_conjunctively(db_session, catalog):
    criteria = MovieFilter(title="dark", genre_id=catalog["comedy"].id, upcoming_releases=True)

    assert titles(db_session, criteria) == {"Dark Dawn"}


def test_predicate_order_does_not_matter(db_session, catalog):
    title_pred, genre_pred = build_movie_predicates(
        MovieFilter(title="dark", genre_id=catalog["drama"].id), TODAY
    )

    forward = db_session.query(Movie).filter(title_pred).filter(genre_pred).all()
    backward = db_session.query(Movie).filter(genre_pred).filter(title_pred).all()
    combined = db_session.query(Movie).filter(and_(genre_pred, title_pred)).all()

    assert {m.id for m in forward} == {m.id for m in backward} == {m.id for m in combined}
    assert {m.title for m in forward} == {"The Dark Night", "Dark Dawn"}
