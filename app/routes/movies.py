from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config import settings
from app.database import get_db
from app.schemas.movie import (
    MovieCreate,
    MovieDetailResponse,
    MovieFilter,
    MovieIndexResponse,
    MovieResponse,
    MovieUpdate,
)
from app.schemas.pagination import PaginationParams
from app.schemas.patch import PatchOperation
from app.schemas.validation import validate_model
from app.services.asset_store import AssetStore, AssetUpload, get_asset_store
from app.services.movie_service import MovieService
from app.services.pagination import set_pagination_headers
from app.utils.forms import form_payload, parse_json_list

router = APIRouter(prefix="/api/movies", tags=["Movies"])


def _movie_payload(
    title: Optional[str],
    in_theaters: Optional[str],
    release_date: Optional[str],
    genre_ids: Optional[str],
    actors: Optional[str],
) -> dict:
    payload = form_payload(title=title, in_theaters=in_theaters, release_date=release_date)
    # Absent list fields stay absent so the service leaves those associations alone
    genre_list = parse_json_list(genre_ids, "genre_ids")
    if genre_list is not None:
        payload["genre_ids"] = genre_list
    actor_list = parse_json_list(actors, "actors")
    if actor_list is not None:
        payload["actors"] = actor_list
    return payload


# ============================================
# Listing & Filtering
# ============================================

@router.get("/", response_model=MovieIndexResponse)
def get_homepage(db: Session = Depends(get_db)):
    """
    Homepage sections

    - **upcoming_releases**: next releases after today, soonest first
    - **in_theaters**: movies currently showing
    """
    return MovieService.get_index(db)


@router.get("/filter", response_model=List[MovieResponse])
def filter_movies(
    response: Response,
    title: Optional[str] = Query(None, description="Case-insensitive title substring"),
    in_theaters: Optional[bool] = Query(None, description="Only movies currently showing"),
    upcoming_releases: Optional[bool] = Query(None, description="Only movies released after today"),
    genre_id: Optional[int] = Query(None, description="Only movies in this genre (0 = any)"),
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, description=f"Items per page (max {settings.MAX_PAGE_SIZE})"),
    db: Session = Depends(get_db)
):
    """
    Filter the catalog; every given criterion must match

    Total count is returned in the X-Total-Count header.
    """
    criteria = MovieFilter(
        title=title,
        in_theaters=in_theaters,
        upcoming_releases=upcoming_releases,
        genre_id=genre_id,
    )
    result = MovieService.filter_movies(db, criteria, PaginationParams(page=page, page_size=page_size))
    set_pagination_headers(response, result)
    return result.items


# ============================================
# Movie CRUD
# ============================================

@router.get("/{movie_id}", response_model=MovieDetailResponse)
def get_movie(movie_id: int, db: Session = Depends(get_db)):
    """Movie details with genres and cast in billing order"""
    return MovieService.get_movie(db, movie_id)


@router.post("/", response_model=MovieDetailResponse, status_code=status.HTTP_201_CREATED)
def create_movie(
    title: Optional[str] = Form(None),
    in_theaters: Optional[str] = Form(None),
    release_date: Optional[str] = Form(None),
    genre_ids: Optional[str] = Form(None, description="JSON array of genre IDs"),
    actors: Optional[str] = Form(None, description='JSON array of {"actor_id", "character"}'),
    poster: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store)
):
    """
    Create a movie (multipart form)

    - **title**: Movie title (required)
    - **in_theaters**: true/false
    - **release_date**: YYYY-MM-DD
    - **genre_ids**: e.g. `[1, 3]`
    - **actors**: e.g. `[{"actor_id": 2, "character": "Hero"}]`, billing order = list order
    - **poster**: Image file (optional)
    """
    payload = _movie_payload(title, in_theaters, release_date, genre_ids, actors)
    data = validate_model(MovieCreate, payload)
    return MovieService.create_movie(db, data, AssetUpload.from_upload(poster, "poster"), asset_store)


@router.put("/{movie_id}", response_model=MovieDetailResponse)
def update_movie(
    movie_id: int,
    title: Optional[str] = Form(None),
    in_theaters: Optional[str] = Form(None),
    release_date: Optional[str] = Form(None),
    genre_ids: Optional[str] = Form(None, description="JSON array; omit to keep current genres"),
    actors: Optional[str] = Form(None, description="JSON array; omit to keep current cast"),
    poster: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store)
):
    """
    Update a movie (multipart form)

    Omitted **genre_ids** / **actors** leave the associations as they are;
    an explicit `[]` clears them. The poster is replaced only when a new
    file is uploaded.
    """
    payload = _movie_payload(title, in_theaters, release_date, genre_ids, actors)
    data = validate_model(MovieUpdate, payload)
    return MovieService.update_movie(db, movie_id, data, AssetUpload.from_upload(poster, "poster"), asset_store)


@router.patch("/{movie_id}", response_model=MovieDetailResponse)
def patch_movie(movie_id: int, operations: List[PatchOperation], db: Session = Depends(get_db)):
    """
    Apply a JSON Patch document

    Patchable paths: /title, /in_theaters, /release_date
    """
    return MovieService.patch_movie(db, movie_id, operations)


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_movie(
    movie_id: int,
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store)
):
    """Delete a movie; its actors and genres are kept"""
    MovieService.delete_movie(db, movie_id, asset_store)
    return None
