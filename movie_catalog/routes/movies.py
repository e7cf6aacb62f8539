"""
Movie Routes - catalog CRUD and voting

Reads are public. Creating, updating and deleting need the manageMovies
capability (admins); voting needs voteMovies (users).
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from movie_catalog.database import get_db
from movie_catalog.models.user import User
from movie_catalog.schemas.movie import (
    MovieCreate,
    MovieUpdate,
    MovieFilter,
    MovieResponse,
    MoviePage
)
from movie_catalog.services.movie_service import MovieService
from movie_catalog.utils.dependencies import require_rights
from movie_catalog.utils.pagination import PageOptions
from movie_catalog.utils.roles import MANAGE_MOVIES, VOTE_MOVIES

router = APIRouter(prefix="/v1/movies", tags=["Movies"])


def get_voter(user: User) -> str:
    """Votes are keyed by user name"""
    return str(user.user_name)


# ============================================
# Catalog management (admins)
# ============================================

@router.post(
    "",
    response_model=MovieResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_rights(MANAGE_MOVIES))]
)
def create_movie(movie_data: MovieCreate, db: Session = Depends(get_db)):
    """
    Create a movie. Only admins can create movies.

    - **title**: alphanumeric, 3-30 chars, must be unique
    - **watchUrl**: valid URL, must be unique
    """
    return MovieService.create_movie(db, movie_data)


@router.get("", response_model=MoviePage)
def get_movies(
    title: Optional[str] = Query(None, description="Exact title"),
    description: Optional[str] = Query(None, description="Substring of the description"),
    artists: Optional[str] = Query(None, description="Substring of the artists"),
    genres: Optional[str] = Query(None, description="Substring of the genres"),
    total_vote: Optional[int] = Query(None, alias="totalVote", description="Exact vote count"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="field:desc/asc pairs, e.g. totalVote:desc"),
    limit: Optional[int] = Query(None, description="Maximum number of movies (default 10)"),
    page: Optional[int] = Query(None, description="Page number (default 1)"),
    db: Session = Depends(get_db)
):
    """
    Everyone can filter, sort and page through the catalog.
    Without sortBy, movies come back in creation order.
    """
    filters = MovieFilter(
        title=title,
        description=description,
        artists=artists,
        genres=genres,
        total_vote=total_vote
    )
    options = PageOptions.from_query(sort_by, limit, page)
    try:
        return MovieService.query_movies(db, filters, options)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# ============================================
# Voting (users)
# ============================================

@router.patch("/vote/{movie_id}", response_model=MovieResponse)
def vote_movie(
    movie_id: int = Path(..., description="Movie ID"),
    current_user: User = Depends(require_rights(VOTE_MOVIES)),
    db: Session = Depends(get_db)
):
    """Add the current user's vote. Each user can vote once per movie."""
    return MovieService.vote_movie_by_id(db, movie_id, get_voter(current_user))


@router.patch("/unvote/{movie_id}", response_model=MovieResponse)
def unvote_movie(
    movie_id: int = Path(..., description="Movie ID"),
    current_user: User = Depends(require_rights(VOTE_MOVIES)),
    db: Session = Depends(get_db)
):
    """Withdraw the current user's vote"""
    return MovieService.unvote_movie_by_id(db, movie_id, get_voter(current_user))


# ============================================
# Single movie
# ============================================

@router.get("/{movie_id}", response_model=MovieResponse)
def get_movie(movie_id: int = Path(..., description="Movie ID"), db: Session = Depends(get_db)):
    """Play/fetch a movie. Each call adds one to totalViews."""
    return MovieService.get_movie_by_id(db, movie_id)


@router.patch(
    "/{movie_id}",
    response_model=MovieResponse,
    dependencies=[Depends(require_rights(MANAGE_MOVIES))]
)
def update_movie(
    update_data: MovieUpdate,
    movie_id: int = Path(..., description="Movie ID"),
    db: Session = Depends(get_db)
):
    """Update a movie. Only admins can update movies; omitted fields are left unchanged."""
    return MovieService.update_movie_by_id(db, movie_id, update_data)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_rights(MANAGE_MOVIES))]
)
def delete_movie(movie_id: int = Path(..., description="Movie ID"), db: Session = Depends(get_db)):
    """Delete a movie. Only admins can delete movies."""
    MovieService.delete_movie_by_id(db, movie_id)
    return None
