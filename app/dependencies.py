import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.repository import ArticleRepository, SQLAlchemyArticleRepository

DEFAULT_PAGE = 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class ArticleListQuery:
    """
    Typed, normalised form of the article listing query string.

    Built with :meth:`from_query_params`, which never fails: malformed or
    out-of-range numbers fall back to their defaults, so ``page`` and
    ``page_size`` are always >= 1.

    Attributes
    ----------
    tags:
        Requested tag names; empty means "any tag".
    author:
        Exact author to match, or None for any author.
    page:
        1-based page number.
    page_size:
        Items per page, clamped to ``settings.MAX_PAGE_SIZE``.
    """

    tags: frozenset[str] = field(default_factory=frozenset)
    author: str | None = None
    page: int = DEFAULT_PAGE
    page_size: int = settings.DEFAULT_PAGE_SIZE

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "ArticleListQuery":
        page_size = _parse_positive_int(params.get("limit"), settings.DEFAULT_PAGE_SIZE)
        return cls(
            tags=_parse_tags(params.get("tags")),
            author=params.get("author") or None,
            page=_parse_positive_int(params.get("page"), DEFAULT_PAGE),
            page_size=min(page_size, settings.MAX_PAGE_SIZE),
        )


def _parse_tags(raw: str | None) -> frozenset[str]:
    """Split a comma-separated list, trimming whitespace and dropping empty segments."""
    if not raw:
        return frozenset()
    return frozenset(segment.strip() for segment in raw.split(",") if segment.strip())


def _parse_positive_int(raw: str | None, default: int) -> int:
    """
    Parse a base-10 signed 64-bit integer, or return *default*.

    Surrounding whitespace, underscores, non-ASCII digits and values
    outside the int64 range are parse failures, as are values <= 0.
    """
    if not raw or not _INT_RE.fullmatch(raw):
        return default
    value = int(raw, 10)
    if value <= 0 or value > _INT64_MAX:
        return default
    return value


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_list_query(request: Request) -> ArticleListQuery:
    """
    Parse the listing query string straight from the request.

    Declared against ``request.query_params`` rather than typed ``Query``
    parameters so that bad numbers degrade to defaults instead of 422s.
    """
    return ArticleListQuery.from_query_params(request.query_params)


def get_article_repository(db: AsyncSession = Depends(get_db)) -> ArticleRepository:
    return SQLAlchemyArticleRepository(db)
