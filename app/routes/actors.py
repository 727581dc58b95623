from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config import settings
from app.database import get_db
from app.schemas.actor import ActorCreate, ActorResponse
from app.schemas.pagination import PaginationParams
from app.schemas.patch import PatchOperation
from app.schemas.validation import validate_model
from app.services.actor_service import ActorService
from app.services.asset_store import AssetStore, AssetUpload, get_asset_store
from app.services.pagination import set_pagination_headers
from app.utils.forms import form_payload

router = APIRouter(prefix="/api/actors", tags=["Actors"])


@router.get("/", response_model=List[ActorResponse])
def list_actors(
    response: Response,
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, description=f"Items per page (max {settings.MAX_PAGE_SIZE})"),
    db: Session = Depends(get_db)
):
    """
    Get actors, one page at a time

    Total count is returned in the X-Total-Count header.
    """
    result = ActorService.list_actors(db, PaginationParams(page=page, page_size=page_size))
    set_pagination_headers(response, result)
    return result.items


@router.get("/{actor_id}", response_model=ActorResponse)
def get_actor(actor_id: int, db: Session = Depends(get_db)):
    return ActorService.get_actor(db, actor_id)


@router.post("/", response_model=ActorResponse, status_code=status.HTTP_201_CREATED)
def create_actor(
    name: Optional[str] = Form(None),
    birth_date: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store)
):
    """
    Create an actor (multipart form)

    - **name**: Actor name (required)
    - **birth_date**: YYYY-MM-DD (optional)
    - **photo**: Image file (optional)
    """
    data = validate_model(ActorCreate, form_payload(name=name, birth_date=birth_date))
    return ActorService.create_actor(db, data, AssetUpload.from_upload(photo, "photo"), asset_store)


@router.put("/{actor_id}", response_model=ActorResponse)
def update_actor(
    actor_id: int,
    name: Optional[str] = Form(None),
    birth_date: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store)
):
    """Replace an actor's fields; the photo changes only when a new file is sent"""
    data = validate_model(ActorCreate, form_payload(name=name, birth_date=birth_date))
    return ActorService.update_actor(db, actor_id, data, AssetUpload.from_upload(photo, "photo"), asset_store)


@router.patch("/{actor_id}", response_model=ActorResponse)
def patch_actor(actor_id: int, operations: List[PatchOperation], db: Session = Depends(get_db)):
    """
    Apply a JSON Patch document

    Patchable paths: /name, /birth_date
    """
    return ActorService.patch_actor(db, actor_id, operations)


@router.delete("/{actor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_actor(
    actor_id: int,
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store)
):
    """Delete an actor and remove them from every cast"""
    ActorService.delete_actor(db, actor_id, asset_store)
    return None
