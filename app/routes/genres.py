from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.schemas.genre import GenreCreate, GenreResponse
from app.services.genre_service import GenreService

router = APIRouter(prefix="/api/genres", tags=["Genres"])


@router.get("/", response_model=List[GenreResponse])
def list_genres(db: Session = Depends(get_db)):
    """Get all genres, alphabetically"""
    return GenreService.list_genres(db)


@router.get("/{genre_id}", response_model=GenreResponse)
def get_genre(genre_id: int, db: Session = Depends(get_db)):
    return GenreService.get_genre(db, genre_id)


@router.post("/", response_model=GenreResponse, status_code=status.HTTP_201_CREATED)
def create_genre(genre_data: GenreCreate, db: Session = Depends(get_db)):
    """
    Create a genre

    - **name**: Genre name (1-40 characters)
    """
    return GenreService.create_genre(db, genre_data)


@router.put("/{genre_id}", response_model=GenreResponse)
def update_genre(genre_id: int, genre_data: GenreCreate, db: Session = Depends(get_db)):
    return GenreService.update_genre(db, genre_id, genre_data)


@router.delete("/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_genre(genre_id: int, db: Session = Depends(get_db)):
    """Delete a genre; movies keep existing without it"""
    GenreService.delete_genre(db, genre_id)
    return None
