from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Wire format is camelCase; Python attributes stay snake_case.
_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Matches the article_tags.name column width.
TagName = Annotated[str, Field(min_length=1, max_length=100)]


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=10)
    author: str = Field(min_length=1, max_length=200)
    tags: list[TagName] = []
    is_published: bool = True
    published_date: datetime | None = None
    model_config = _camel


class ArticleUpdate(BaseModel):
    """
    Partial update payload.

    Every field is optional; ``model_fields_set`` tells "absent" apart
    from an explicit ``null``, so untouched fields keep their values.
    """

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=10)
    author: str | None = Field(None, min_length=1, max_length=200)
    tags: list[TagName] | None = None
    is_published: bool | None = None
    published_date: datetime | None = None
    model_config = _camel


# --- Pagination ---

class PaginationInfo(BaseModel):
    current_page: int
    total_pages: int
    total_articles: int
    has_next_page: bool
    has_prev_page: bool
    model_config = _camel


# --- Envelopes ---

class SuccessEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    data: Any = None


class ListEnvelope(BaseModel):
    success: bool = True
    data: list
    pagination: PaginationInfo


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
