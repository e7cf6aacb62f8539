from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from typing import List
from movie_catalog.database import Base


class Movie(Base):
    """
    Movie catalog entry with its vote and view counters.
    total_vote always equals the number of rows in votes.
    """
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # Minutes
    artists = Column(String(255), nullable=False)
    genres = Column(String(255), nullable=False)
    watch_url = Column(String(2083), unique=True, nullable=False)
    total_vote = Column(Integer, nullable=False, default=0, server_default="0")
    total_views = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    votes = relationship(
        "MovieVote",
        back_populates="movie",
        order_by="MovieVote.id",
        cascade="all, delete-orphan",
    )

    @property
    def users_vote(self) -> List[str]:
        """Voter user names in the order they voted"""
        return [vote.voter for vote in self.votes]

    def __repr__(self):
        return f"<Movie(id={self.id}, title={self.title}, total_vote={self.total_vote})>"


class MovieVote(Base):
    """
    One row per (movie, voter). The unique constraint is what makes a
    concurrent double vote fail at insert time.
    """
    __tablename__ = "movie_votes"

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    voter = Column(String(30), nullable=False)
    voted_at = Column(DateTime(timezone=True), server_default=func.now())

    movie = relationship("Movie", back_populates="votes")

    # Ensure one vote per user per movie
    __table_args__ = (
        UniqueConstraint("movie_id", "voter", name="unique_movie_voter"),
    )

    def __repr__(self):
        return f"<MovieVote(movie_id={self.movie_id}, voter={self.voter})>"
