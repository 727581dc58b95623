"""
Import all models to ensure they are registered with SQLAlchemy
"""
from app.models.genre import Genre
from app.models.actor import Actor
from app.models.movie import Movie, MovieActor, MovieGenre

__all__ = [
    "Genre",
    "Actor",
    "Movie",
    "MovieActor",
    "MovieGenre",
]
