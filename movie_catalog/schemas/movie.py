"""
Movie Schemas - Pydantic models for movie request/response validation
JSON keys are camelCase (watchUrl, totalVote, ...); Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional

from movie_catalog.schemas.validation import SafeStringMixin

TITLE_PATTERN = r'^[a-zA-Z0-9]+$'


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class MovieCreate(CamelModel, SafeStringMixin):
    """Schema for creating a movie"""
    title: str = Field(..., min_length=3, max_length=30, pattern=TITLE_PATTERN, description="Must be unique")
    description: str = Field(..., min_length=3, max_length=300)
    duration: int = Field(..., description="Duration in minutes")
    artists: str = Field(..., min_length=3, max_length=100)
    genres: str = Field(..., min_length=3, max_length=30)
    watch_url: HttpUrl = Field(..., description="Must be unique")

    @field_validator('description', 'artists', 'genres')
    @classmethod
    def clean_fields(cls, v):
        return cls.clean_text(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Transformers",
                "description": "An ancient struggle between two Cybertronian races, the heroic Autobots and the evil Decepticons.",
                "duration": 60,
                "artists": "Shia LaBeouf, Megan Fox, Josh Duhamel",
                "genres": "Action, Adventure",
                "watchUrl": "https://www.vidio.com/premier/5461/transformers"
            }
        }
    )


class MovieUpdate(CamelModel, SafeStringMixin):
    """Schema for partially updating a movie; at least one field is required"""
    title: Optional[str] = Field(None, min_length=3, max_length=30, pattern=TITLE_PATTERN)
    description: Optional[str] = Field(None, min_length=3, max_length=300)
    duration: Optional[int] = None
    artists: Optional[str] = Field(None, min_length=3, max_length=100)
    genres: Optional[str] = Field(None, min_length=3, max_length=30)
    watch_url: Optional[HttpUrl] = None

    @field_validator('description', 'artists', 'genres')
    @classmethod
    def clean_fields(cls, v):
        return cls.clean_text(v) if v is not None else v

    @model_validator(mode='after')
    def check_not_empty(self):
        if not self.changes():
            raise ValueError('At least one field must be provided')
        return self

    def changes(self) -> dict:
        """Fields the client actually sent, with URLs as plain strings"""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        if 'watch_url' in data:
            data['watch_url'] = str(data['watch_url'])
        return data


class MovieFilter(CamelModel, SafeStringMixin):
    """List filters: title and totalVote match exactly, text fields by substring"""
    title: Optional[str] = None
    description: Optional[str] = None
    artists: Optional[str] = None
    genres: Optional[str] = None
    total_vote: Optional[int] = None

    @field_validator('description', 'artists', 'genres')
    @classmethod
    def match_stored_form(cls, v):
        # Stored text went through bleach, so compare against the same form
        return cls.sanitize_html(v) if v is not None else v


class MovieResponse(CamelModel):
    """Schema for movie response (matches database model)"""
    id: int
    title: str
    description: str
    duration: int
    artists: str
    genres: str
    watch_url: str
    total_vote: int
    total_views: int
    users_vote: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MoviePage(CamelModel):
    """One page of movies"""
    results: List[MovieResponse]
    page: int
    limit: int
    total_pages: int
    total_results: int

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "results": [],
                "page": 1,
                "limit": 10,
                "totalPages": 1,
                "totalResults": 1
            }
        }
    )
