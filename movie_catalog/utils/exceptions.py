"""
Typed catalog errors.

Each one is an HTTPException, so services raise them the same way they
raise any HTTP error and the app-level handler renders {"detail": ...}.
Tests and scripts can still catch them by type.
"""
from typing import Optional
from fastapi import HTTPException, status


class CatalogError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.detail)


class MovieNotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Movie not found"


class DuplicateTitle(CatalogError):
    detail = "Title already taken"


class DuplicateWatchUrl(CatalogError):
    detail = "Watch url already taken"


class AlreadyVoted(CatalogError):
    detail = "User already voted"


class NotVoted(CatalogError):
    detail = "User has not voted"
