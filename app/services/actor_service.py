from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.database import commit_or_fail
from app.exceptions import NotFoundError, StorageFailureError
from app.models.actor import Actor
from app.models.movie import MovieActor
from app.schemas.actor import ActorCreate, ActorPatch
from app.schemas.pagination import PaginationParams
from app.schemas.patch import PatchOperation
from app.services.asset_store import (
    ACTORS_CONTAINER,
    AssetStore,
    AssetUpload,
    discard_asset,
    save_asset,
)
from app.services.associations import AssociationManager
from app.services.pagination import Page, paginate
from app.services.patch_service import PatchService

logger = logging.getLogger(__name__)


class ActorService:
    """Service for actor operations"""

    @staticmethod
    def list_actors(db: Session, pagination: PaginationParams) -> Page:
        return paginate(db.query(Actor).order_by(Actor.id), pagination)

    @staticmethod
    def get_actor(db: Session, actor_id: int) -> Actor:
        actor = db.query(Actor).filter(Actor.id == actor_id).first()
        if not actor:
            raise NotFoundError("Actor", actor_id)
        return actor

    @staticmethod
    def create_actor(
        db: Session,
        data: ActorCreate,
        photo: Optional[AssetUpload],
        asset_store: AssetStore,
    ) -> Actor:
        actor = Actor(name=data.name, birth_date=data.birth_date)

        new_photo = None
        if photo is not None:
            new_photo = save_asset(asset_store, photo, ACTORS_CONTAINER)
            actor.photo = new_photo

        db.add(actor)
        try:
            commit_or_fail(db, "create actor")
        except StorageFailureError:
            discard_asset(asset_store, new_photo, ACTORS_CONTAINER)
            raise

        db.refresh(actor)
        logger.info(f"Created actor {actor.id} ({actor.name})")
        return actor

    @staticmethod
    def update_actor(
        db: Session,
        actor_id: int,
        data: ActorCreate,
        photo: Optional[AssetUpload],
        asset_store: AssetStore,
    ) -> Actor:
        """Full update; the photo is only replaced when a new one is uploaded"""
        actor = ActorService.get_actor(db, actor_id)

        actor.name = data.name
        actor.birth_date = data.birth_date

        new_photo = None
        old_photo = actor.photo
        if photo is not None:
            new_photo = save_asset(asset_store, photo, ACTORS_CONTAINER, old_photo)
            actor.photo = new_photo

        try:
            commit_or_fail(db, f"update actor {actor_id}")
        except StorageFailureError:
            discard_asset(asset_store, new_photo, ACTORS_CONTAINER)
            raise
        if new_photo is not None:
            discard_asset(asset_store, old_photo, ACTORS_CONTAINER)

        db.refresh(actor)
        return actor

    @staticmethod
    def patch_actor(db: Session, actor_id: int, operations: List[PatchOperation]) -> Actor:
        actor = ActorService.get_actor(db, actor_id)
        touched = PatchService.apply(actor, operations, ActorPatch)
        commit_or_fail(db, f"patch actor {actor_id}")
        db.refresh(actor)
        logger.info(f"Patched actor {actor_id}: {sorted(touched)}")
        return actor

    @staticmethod
    def delete_actor(db: Session, actor_id: int, asset_store: AssetStore) -> None:
        """
        Delete an actor, drop them from every cast and close the gaps
        left in those casts' billing order.
        """
        actor = ActorService.get_actor(db, actor_id)
        photo = actor.photo

        affected_movies = [
            row[0] for row in db.query(MovieActor.movie_id).filter(MovieActor.actor_id == actor_id).all()
        ]
        db.query(MovieActor).filter(MovieActor.actor_id == actor_id).delete(synchronize_session=False)
        AssociationManager.compact_cast_order(db, affected_movies)
        db.delete(actor)
        commit_or_fail(db, f"delete actor {actor_id}")

        discard_asset(asset_store, photo, ACTORS_CONTAINER)
        logger.info(f"Deleted actor {actor_id} (removed from {len(affected_movies)} casts)")
