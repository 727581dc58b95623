from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from typing import List, Optional
from app.database import Base


class Movie(Base):
    """
    Movie model - owns its cast and genre associations.
    Deleting a movie removes the association rows, never the actors or genres.
    """
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(300), nullable=False)
    in_theaters = Column(Boolean, default=False, nullable=False)
    release_date = Column(Date, nullable=True, index=True)
    poster = Column(String, nullable=True)  # Asset reference (URL)

    # Owned associations
    cast = relationship(
        "MovieActor",
        back_populates="movie",
        cascade="all, delete-orphan",
        order_by="MovieActor.cast_order",
    )
    genre_links = relationship(
        "MovieGenre",
        back_populates="movie",
        cascade="all, delete-orphan",
    )

    @property
    def actors(self) -> List["MovieActor"]:
        """Cast sorted by billing order"""
        return sorted(self.cast, key=lambda link: link.cast_order)

    @property
    def genres(self) -> list:
        """Genre rows referenced by this movie"""
        return [link.genre for link in self.genre_links if link.genre is not None]

    def __repr__(self):
        return f"<Movie(id={self.id}, title={self.title})>"


class MovieActor(Base):
    """
    Movie-Actor join entity: foreign identities plus character and order.
    The actor edge is read-only from the movie's point of view.
    """
    __tablename__ = "movies_actors"

    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True)
    actor_id = Column(Integer, ForeignKey("actors.id", ondelete="CASCADE"), primary_key=True, index=True)
    character = Column(String(100), nullable=True)
    cast_order = Column(Integer, nullable=False, default=0)

    movie = relationship("Movie", back_populates="cast")
    actor = relationship("Actor", lazy="joined")

    __table_args__ = (
        CheckConstraint("cast_order >= 0", name="ck_movies_actors_order_nonneg"),
    )

    @property
    def name(self) -> Optional[str]:
        """Actor name for detail views"""
        return self.actor.name if self.actor else None

    def __repr__(self):
        return f"<MovieActor(movie_id={self.movie_id}, actor_id={self.actor_id}, order={self.cast_order})>"


class MovieGenre(Base):
    """Movie-Genre join entity, plain set membership"""
    __tablename__ = "movies_genres"

    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True)
    genre_id = Column(Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, index=True)

    movie = relationship("Movie", back_populates="genre_links")
    genre = relationship("Genre", lazy="joined")

    def __repr__(self):
        return f"<MovieGenre(movie_id={self.movie_id}, genre_id={self.genre_id})>"
