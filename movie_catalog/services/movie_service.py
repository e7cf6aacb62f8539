"""
Movie Service - catalog business logic

Owns the catalog invariants:
- title and watch_url are unique across all movies
- a voter appears at most once per movie, and total_vote == len(users_vote)
- every successful get_movie_by_id adds exactly one view

Counters are changed with single UPDATE ... SET col = col + n statements,
and a double vote is stopped by the (movie_id, voter) unique constraint,
so concurrent requests cannot lose updates or vote twice.
"""

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, Optional
import logging

from movie_catalog.models.movie import Movie, MovieVote
from movie_catalog.schemas.movie import MovieCreate, MovieUpdate, MovieFilter
from movie_catalog.utils.exceptions import (
    AlreadyVoted,
    DuplicateTitle,
    DuplicateWatchUrl,
    MovieNotFound,
    NotVoted,
)
from movie_catalog.utils.pagination import PageOptions, paginate

logger = logging.getLogger(__name__)

# sortBy field name -> column
MOVIE_SORT_FIELDS = {
    "id": Movie.id,
    "title": Movie.title,
    "description": Movie.description,
    "duration": Movie.duration,
    "artists": Movie.artists,
    "genres": Movie.genres,
    "watchUrl": Movie.watch_url,
    "totalVote": Movie.total_vote,
    "totalViews": Movie.total_views,
    "createdAt": Movie.created_at,
    "updatedAt": Movie.updated_at,
}

# Filters matched by case-insensitive substring
TEXT_FILTERS = (
    ("description", Movie.description),
    ("artists", Movie.artists),
    ("genres", Movie.genres),
)


class MovieService:
    """Service for movie catalog operations"""

    # ==================== LOOKUPS ====================

    @staticmethod
    def is_title_taken(db: Session, title: str, exclude_movie_id: Optional[int] = None) -> bool:
        """Check whether another movie already uses this title"""
        query = db.query(Movie.id).filter(Movie.title == title)
        if exclude_movie_id is not None:
            query = query.filter(Movie.id != exclude_movie_id)
        return query.first() is not None

    @staticmethod
    def is_watch_url_taken(db: Session, watch_url: str, exclude_movie_id: Optional[int] = None) -> bool:
        """Check whether another movie already uses this watch url"""
        query = db.query(Movie.id).filter(Movie.watch_url == watch_url)
        if exclude_movie_id is not None:
            query = query.filter(Movie.id != exclude_movie_id)
        return query.first() is not None

    @staticmethod
    def has_voted(db: Session, movie_id: int, voter: str) -> bool:
        return db.query(MovieVote.id).filter(
            MovieVote.movie_id == movie_id,
            MovieVote.voter == voter
        ).first() is not None

    @staticmethod
    def get_movie_by_title(db: Session, title: str) -> Optional[Movie]:
        return db.query(Movie).filter(Movie.title == title).first()

    @staticmethod
    def _get_movie_or_404(db: Session, movie_id: int) -> Movie:
        """Plain read, no view counting"""
        movie = db.get(Movie, movie_id)
        if not movie:
            raise MovieNotFound()
        return movie

    @staticmethod
    def _commit_unique(
        db: Session,
        title: Optional[str],
        watch_url: Optional[str],
        exclude_movie_id: Optional[int] = None
    ) -> None:
        """
        Commit, turning a unique-constraint violation into the matching
        catalog error. Covers writes that raced past the pre-checks.
        """
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if title and MovieService.is_title_taken(db, title, exclude_movie_id):
                raise DuplicateTitle()
            if watch_url and MovieService.is_watch_url_taken(db, watch_url, exclude_movie_id):
                raise DuplicateWatchUrl()
            raise

    # ==================== CRUD ====================

    @staticmethod
    def create_movie(db: Session, movie_data: MovieCreate) -> Movie:
        """
        Create a movie with zeroed counters

        Raises:
            DuplicateTitle: if the title is already taken
            DuplicateWatchUrl: if the watch url is already taken
        """
        watch_url = str(movie_data.watch_url)

        if MovieService.is_title_taken(db, movie_data.title):
            logger.info(f"Rejected movie create: title {movie_data.title!r} already taken")
            raise DuplicateTitle()
        if MovieService.is_watch_url_taken(db, watch_url):
            logger.info(f"Rejected movie create: watch url {watch_url!r} already taken")
            raise DuplicateWatchUrl()

        movie = Movie(
            title=movie_data.title,
            description=movie_data.description,
            duration=movie_data.duration,
            artists=movie_data.artists,
            genres=movie_data.genres,
            watch_url=watch_url,
            total_vote=0,
            total_views=0
        )
        db.add(movie)
        MovieService._commit_unique(db, movie_data.title, watch_url)
        db.refresh(movie)

        logger.info(f"Created movie {movie.id} ({movie.title})")
        return movie

    @staticmethod
    def query_movies(db: Session, filters: MovieFilter, options: PageOptions) -> Dict[str, Any]:
        """
        Filter, sort and paginate the catalog

        Args:
            db: Database session
            filters: title/totalVote exact match, description/artists/genres substring
            options: sortBy, limit and page

        Returns:
            Page dict: results, page, limit, total_pages, total_results

        Raises:
            ValueError: if sortBy names a field that cannot be sorted on
        """
        query = db.query(Movie).options(selectinload(Movie.votes))

        if filters.title is not None:
            query = query.filter(Movie.title == filters.title)
        if filters.total_vote is not None:
            query = query.filter(Movie.total_vote == filters.total_vote)
        for field, column in TEXT_FILTERS:
            value = getattr(filters, field)
            if value:
                query = query.filter(column.icontains(value, autoescape=True))

        return paginate(
            query,
            options,
            sortable=MOVIE_SORT_FIELDS,
            default_order=[Movie.created_at.asc()],
            tie_breaker=Movie.id
        )

    @staticmethod
    def get_movie_by_id(db: Session, movie_id: int) -> Movie:
        """
        Fetch a movie for viewing. Every successful call counts one view.

        Raises:
            MovieNotFound: if no movie has this id
        """
        updated = db.query(Movie).filter(Movie.id == movie_id).update(
            {Movie.total_views: Movie.total_views + 1},
            synchronize_session=False
        )
        if not updated:
            db.rollback()
            raise MovieNotFound()
        db.commit()

        movie = db.get(Movie, movie_id)
        if not movie:
            # Deleted between the view update and the reload
            raise MovieNotFound()
        db.refresh(movie)
        return movie

    @staticmethod
    def update_movie_by_id(db: Session, movie_id: int, update_data: MovieUpdate) -> Movie:
        """
        Apply a partial update; fields that were not sent stay unchanged

        Raises:
            MovieNotFound: if no movie has this id
            DuplicateTitle: if another movie holds the new title
            DuplicateWatchUrl: if another movie holds the new watch url
        """
        movie = MovieService._get_movie_or_404(db, movie_id)
        changes = update_data.changes()

        title = changes.get("title")
        if title and MovieService.is_title_taken(db, title, movie_id):
            logger.info(f"Rejected update of movie {movie_id}: title {title!r} already taken")
            raise DuplicateTitle("Movie Title already taken")

        watch_url = changes.get("watch_url")
        if watch_url and MovieService.is_watch_url_taken(db, watch_url, movie_id):
            logger.info(f"Rejected update of movie {movie_id}: watch url {watch_url!r} already taken")
            raise DuplicateWatchUrl()

        for field, value in changes.items():
            setattr(movie, field, value)

        MovieService._commit_unique(db, title, watch_url, movie_id)
        db.refresh(movie)

        logger.info(f"Updated movie {movie_id}: {', '.join(sorted(changes))}")
        return movie

    @staticmethod
    def delete_movie_by_id(db: Session, movie_id: int) -> None:
        """
        Permanently remove a movie and its votes

        Raises:
            MovieNotFound: if no movie has this id
        """
        movie = MovieService._get_movie_or_404(db, movie_id)
        db.delete(movie)
        db.commit()
        logger.info(f"Deleted movie {movie_id}")

    # ==================== VOTING ====================

    @staticmethod
    def vote_movie_by_id(db: Session, movie_id: int, voter: str) -> Movie:
        """
        Record one vote for the voter and bump total_vote

        Raises:
            MovieNotFound: if no movie has this id
            AlreadyVoted: if the voter has already voted for this movie
        """
        movie = MovieService._get_movie_or_404(db, movie_id)

        if MovieService.has_voted(db, movie_id, voter):
            raise AlreadyVoted()

        db.add(MovieVote(movie_id=movie_id, voter=voter))
        try:
            db.flush()
        except IntegrityError:
            # A concurrent request inserted the same vote first
            db.rollback()
            logger.info(f"Concurrent duplicate vote by {voter} on movie {movie_id} rejected")
            raise AlreadyVoted()

        db.query(Movie).filter(Movie.id == movie_id).update(
            {Movie.total_vote: Movie.total_vote + 1},
            synchronize_session=False
        )
        db.commit()
        db.refresh(movie)

        logger.info(f"{voter} voted for movie {movie_id}")
        return movie

    @staticmethod
    def unvote_movie_by_id(db: Session, movie_id: int, voter: str) -> Movie:
        """
        Withdraw the voter's vote and decrement total_vote

        Raises:
            MovieNotFound: if no movie has this id
            NotVoted: if the voter has no vote on this movie
        """
        movie = MovieService._get_movie_or_404(db, movie_id)

        removed = db.query(MovieVote).filter(
            MovieVote.movie_id == movie_id,
            MovieVote.voter == voter
        ).delete(synchronize_session=False)
        if not removed:
            db.rollback()
            raise NotVoted()

        db.query(Movie).filter(Movie.id == movie_id).update(
            {Movie.total_vote: Movie.total_vote - 1},
            synchronize_session=False
        )
        db.commit()
        db.refresh(movie)

        logger.info(f"{voter} removed vote from movie {movie_id}")
        return movie
