"""
Article service: business logic for the Article aggregate.

Design notes
------------
- Every function takes the repository as its first argument; the router
  injects it through ``get_article_repository`` so tests can substitute
  an in-memory implementation.
- Listing runs the pipeline parse → filter → count/find → paginate →
  envelope.  ``count`` and ``find`` share a single deadline of
  ``settings.DB_TIMEOUT_SECONDS``; when it expires the pending database
  call is cancelled and a ``BackendError`` is raised.
- Missing articles raise ``ArticleNotFoundError``; the error boundary in
  ``app.responses`` turns it into a 404 envelope.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from app.config import settings
from app.dependencies import ArticleListQuery
from app.errors import ArticleNotFoundError, ArticleValidationError, BackendError
from app.filters import build_article_filter
from app.models import Article, as_utc, new_article_id, utcnow
from app.pagination import PageWindow, build_pagination_info
from app.repository import ArticleRepository
from app.responses import list_envelope, success_envelope
from app.schemas import ArticleCreate, ArticleUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields that may be omitted from an update but never set to null.
_NON_NULLABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "content", "author", "is_published", "published_date"}
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _with_timeout(operation: Awaitable[T]) -> T:
    try:
        return await asyncio.wait_for(operation, timeout=settings.DB_TIMEOUT_SECONDS)
    except asyncio.TimeoutError as exc:
        raise BackendError(
            f"database operation exceeded {settings.DB_TIMEOUT_SECONDS}s"
        ) from exc


def _article_to_dict(article: Article) -> dict:
    """Serialise an Article to its camelCase JSON shape."""
    return {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "author": article.author,
        "tags": list(article.tags),
        "publishedDate": as_utc(article.published_date).isoformat(),
        "isPublished": article.is_published,
        "createdAt": as_utc(article.created_at).isoformat(),
        "updatedAt": as_utc(article.updated_at).isoformat(),
    }


async def _get_or_raise(repo: ArticleRepository, article_id: str) -> Article:
    article = await repo.get(article_id)
    if article is None:
        raise ArticleNotFoundError(article_id)
    return article


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_articles(repo: ArticleRepository, query: ArticleListQuery) -> dict:
    """
    Return one page of published articles matching *query*.

    ``count`` runs first for the pagination metadata, then ``find`` for
    the page itself.  Pages past the end come back empty with
    ``hasNextPage`` false and never reach ``find``, so an out-of-range
    OFFSET is never sent to the database.
    """
    article_filter = build_article_filter(query)
    window = PageWindow(page=query.page, page_size=query.page_size)

    async def _load() -> tuple[int, list[Article]]:
        total = await repo.count(article_filter)
        if window.skip >= total:
            return total, []
        articles = await repo.find(article_filter, window.skip, window.limit)
        return total, articles

    total, articles = await _with_timeout(_load())
    logger.debug(
        "Listed %d of %d article(s) (page=%d, size=%d)",
        len(articles), total, window.page, window.page_size,
    )

    pagination = build_pagination_info(window.page, window.page_size, total)
    return list_envelope([_article_to_dict(a) for a in articles], pagination)


async def get_article(repo: ArticleRepository, article_id: str) -> dict:
    article = await _with_timeout(_get_or_raise(repo, article_id))
    return success_envelope(_article_to_dict(article), "Article retrieved successfully")


async def create_article(repo: ArticleRepository, data: ArticleCreate) -> dict:
    """
    Create a new article.

    The id and both audit timestamps are assigned here and nowhere else.
    ``published_date`` defaults to the creation time when not supplied.
    """
    now = utcnow()
    article = Article(
        id=new_article_id(),
        title=data.title,
        content=data.content,
        author=data.author,
        tags=list(data.tags),
        is_published=data.is_published,
        published_date=as_utc(data.published_date) if data.published_date else now,
        created_at=now,
        updated_at=now,
    )
    await _with_timeout(repo.add(article))
    logger.info("Created article %s", article.id)
    return success_envelope(_article_to_dict(article), "Article created successfully")


async def update_article(repo: ArticleRepository, article_id: str, data: ArticleUpdate) -> dict:
    """
    Partially update an existing article.

    Only fields present in the payload are touched.  An explicit ``null``
    clears ``tags`` but is rejected for every other field.
    """
    supplied = data.model_fields_set
    nulled = sorted(f for f in supplied & _NON_NULLABLE_FIELDS if getattr(data, f) is None)
    if nulled:
        raise ArticleValidationError(f"{', '.join(nulled)}: field cannot be null")

    async def _apply() -> Article:
        article = await _get_or_raise(repo, article_id)
        for field in supplied & _NON_NULLABLE_FIELDS:
            value = getattr(data, field)
            if field == "published_date":
                value = as_utc(value)
            setattr(article, field, value)
        if "tags" in supplied:
            article.tags = list(data.tags or [])
        article.updated_at = max(utcnow(), as_utc(article.created_at))
        await repo.flush()
        return article

    article = await _with_timeout(_apply())
    logger.info("Updated article %s (%s)", article_id, ", ".join(sorted(supplied)) or "no fields")
    return success_envelope(_article_to_dict(article), "Article updated successfully")


async def delete_article(repo: ArticleRepository, article_id: str) -> dict:
    async def _remove() -> None:
        article = await _get_or_raise(repo, article_id)
        await repo.delete(article)

    await _with_timeout(_remove())
    logger.info("Deleted article %s", article_id)
    return success_envelope({"id": article_id}, "Article deleted successfully")
