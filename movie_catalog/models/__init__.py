"""
Import all models to ensure they are registered with SQLAlchemy
"""
from movie_catalog.models.user import User
from movie_catalog.models.movie import Movie, MovieVote

__all__ = [
    "User",
    "Movie",
    "MovieVote"
]
