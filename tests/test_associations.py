import pytest

from app.exceptions import InvalidReferenceError, ValidationFailedError
from app.models.actor import Actor
from app.models.genre import Genre
from app.models.movie import Movie, MovieActor, MovieGenre
from app.schemas.movie import CastEntry
from app.services.associations import AssociationManager


def cast_of(*actor_ids):
    return [CastEntry(actor_id=actor_id, character=f"Role {actor_id}") for actor_id in actor_ids]


def orders(movie):
    return {link.actor_id: link.cast_order for link in movie.cast}


def create_actors(session, *names):
    actors = [Actor(name=name) for name in names]
    session.add_all(actors)
    session.commit()
    return actors


def create_genres(session, *names):
    genres = [Genre(name=name) for name in names]
    session.add_all(genres)
    session.commit()
    return genres


# ==================== CAST RECONCILIATION ====================

def test_new_cast_takes_submission_order():
    movie = Movie(title="Fresh")

    AssociationManager.reconcile_cast(movie, cast_of(10, 20, 30))

    assert orders(movie) == {10: 0, 20: 1, 30: 2}


def test_empty_cast_is_allowed_on_create():
    movie = Movie(title="No cast")

    AssociationManager.reconcile_cast(movie, [])

    assert movie.cast == []


def test_reorder_drops_missing_actor_and_rewrites_positions():
    movie = Movie(title="Reordered")
    AssociationManager.reconcile_cast(movie, cast_of(1, 2, 3))
    kept_link = next(link for link in movie.cast if link.actor_id == 3)

    AssociationManager.reconcile_cast(movie, cast_of(3, 1))

    assert orders(movie) == {3: 0, 1: 1}
    # Retained actors keep the same association row
    assert any(link is kept_link for link in movie.cast)


def test_unchanged_position_is_still_rewritten():
    movie = Movie(title="Stale")
    movie.cast = [
        MovieActor(actor_id=1, cast_order=7),
        MovieActor(actor_id=2, cast_order=3),
    ]

    AssociationManager.reconcile_cast(movie, cast_of(1, 2))

    assert orders(movie) == {1: 0, 2: 1}


def test_character_name_follows_latest_submission():
    movie = Movie(title="Renamed")
    AssociationManager.reconcile_cast(movie, [CastEntry(actor_id=1, character="Old")])

    AssociationManager.reconcile_cast(movie, [CastEntry(actor_id=1, character="New")])

    assert movie.cast[0].character == "New"


def test_duplicate_actor_in_cast_is_rejected():
    with pytest.raises(ValidationFailedError) as exc_info:
        AssociationManager.validate_cast(cast_of(4, 5, 4))

    assert exc_info.value.status_code == 422
    assert "4" in exc_info.value.details[0]["message"]


# ==================== GENRE RECONCILIATION ====================

def test_genre_reconciliation_is_set_difference():
    movie = Movie(title="Genres")
    AssociationManager.reconcile_genres(movie, [1, 2])
    kept_link = next(link for link in movie.genre_links if link.genre_id == 2)

    AssociationManager.reconcile_genres(movie, [2, 3, 3])

    assert sorted(link.genre_id for link in movie.genre_links) == [2, 3]
    assert any(link is kept_link for link in movie.genre_links)


# ==================== REFERENCE CHECKS ====================

def test_missing_actor_reference_is_reported(db_session):
    ana, = create_actors(db_session, "Ana")

    with pytest.raises(InvalidReferenceError) as exc_info:
        AssociationManager.ensure_actors_exist(db_session, [ana.id, 404, 405])

    assert exc_info.value.status_code == 400
    assert exc_info.value.details["missing_ids"] == [404, 405]


def test_missing_genre_reference_is_reported(db_session):
    drama, = create_genres(db_session, "Drama")

    AssociationManager.ensure_genres_exist(db_session, [drama.id])
    with pytest.raises(InvalidReferenceError):
        AssociationManager.ensure_genres_exist(db_session, [drama.id, 99])


def test_empty_reference_lists_need_no_lookup(db_session):
    AssociationManager.ensure_actors_exist(db_session, [])
    AssociationManager.ensure_genres_exist(db_session, [])


# ==================== PERSISTED RECONCILIATION ====================

def test_recast_persists_dense_order(db_session):
    ana, bob = create_actors(db_session, "Ana", "Bob")
    movie = Movie(title="Scenario")
    AssociationManager.reconcile_cast(movie, cast_of(bob.id, ana.id))
    db_session.add(movie)
    db_session.commit()

    rows = db_session.query(MovieActor).filter(MovieActor.movie_id == movie.id).all()
    assert {row.actor_id: row.cast_order for row in rows} == {bob.id: 0, ana.id: 1}

    AssociationManager.reconcile_cast(movie, cast_of(ana.id))
    db_session.commit()

    rows = db_session.query(MovieActor).filter(MovieActor.movie_id == movie.id).all()
    assert {row.actor_id: row.cast_order for row in rows} == {ana.id: 0}
    # Bob the actor is still in the catalog
    assert db_session.get(Actor, bob.id) is not None


def test_compact_cast_order_closes_gaps(db_session):
    a, b, c = create_actors(db_session, "A", "B", "C")
    movie = Movie(title="Gaps")
    AssociationManager.reconcile_cast(movie, cast_of(a.id, b.id, c.id))
    db_session.add(movie)
    db_session.commit()

    db_session.query(MovieActor).filter(MovieActor.actor_id == b.id).delete(synchronize_session=False)
    AssociationManager.compact_cast_order(db_session, [movie.id])
    db_session.commit()

    rows = db_session.query(MovieActor).order_by(MovieActor.cast_order).all()
    assert [(row.actor_id, row.cast_order) for row in rows] == [(a.id, 0), (c.id, 1)]


def test_movie_genre_rows_removed_with_movie(db_session):
    drama, comedy = create_genres(db_session, "Drama", "Comedy")
    movie = Movie(title="Doomed")
    AssociationManager.reconcile_genres(movie, [drama.id, comedy.id])
    db_session.add(movie)
    db_session.commit()

    db_session.delete(movie)
    db_session.commit()

    assert db_session.query(MovieGenre).count() == 0
    assert db_session.query(Genre).count() == 2
