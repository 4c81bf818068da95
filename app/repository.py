"""
Article persistence behind a small, swappable interface.

The service layer only sees :class:`ArticleRepository`; the SQLAlchemy
implementation below is what FastAPI injects in production (see
``app.dependencies.get_article_repository``).  Tests can hand the service
any object with the same methods.

Listing order is ``published_date DESC, id ASC``.  The id tie-breaker
makes the order total, so consecutive pages never overlap or skip rows
while the data is unchanged.
"""
from typing import Protocol

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import BackendError
from app.filters import ArticleFilter
from app.models import Article, ArticleTag


class ArticleRepository(Protocol):
    async def count(self, article_filter: ArticleFilter) -> int: ...

    async def find(self, article_filter: ArticleFilter, skip: int, limit: int) -> list[Article]: ...

    async def get(self, article_id: str) -> Article | None: ...

    async def add(self, article: Article) -> None: ...

    async def delete(self, article: Article) -> None: ...

    async def flush(self) -> None: ...


def _where_clauses(article_filter: ArticleFilter) -> list:
    clauses = [Article.is_published.is_(article_filter.is_published)]
    if article_filter.tags_any:
        clauses.append(
            Article.tag_links.any(ArticleTag.name.in_(sorted(article_filter.tags_any)))
        )
    if article_filter.author is not None:
        clauses.append(Article.author == article_filter.author)
    return clauses


class SQLAlchemyArticleRepository:
    """
    ArticleRepository backed by an ``AsyncSession``.

    Writes are flushed, never committed; the ``get_db`` dependency owns
    the transaction.  Driver errors are re-raised as ``BackendError`` so
    callers never depend on SQLAlchemy exception types.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def count(self, article_filter: ArticleFilter) -> int:
        q = select(func.count()).select_from(Article).where(*_where_clauses(article_filter))
        try:
            return (await self._session.execute(q)).scalar_one()
        except SQLAlchemyError as exc:
            raise BackendError(f"count failed: {exc}") from exc

    async def find(self, article_filter: ArticleFilter, skip: int, limit: int) -> list[Article]:
        q = (
            select(Article)
            .where(*_where_clauses(article_filter))
            .options(selectinload(Article.tag_links))
            .order_by(desc(Article.published_date), asc(Article.id))
            .offset(skip)
            .limit(limit)
        )
        try:
            result = await self._session.execute(q)
        except SQLAlchemyError as exc:
            raise BackendError(f"find failed: {exc}") from exc
        return list(result.scalars().all())

    async def get(self, article_id: str) -> Article | None:
        q = (
            select(Article)
            .where(Article.id == article_id)
            .options(selectinload(Article.tag_links))
        )
        try:
            result = await self._session.execute(q)
        except SQLAlchemyError as exc:
            raise BackendError(f"get failed: {exc}") from exc
        return result.scalar_one_or_none()

    async def add(self, article: Article) -> None:
        self._session.add(article)
        await self.flush()

    async def delete(self, article: Article) -> None:
        try:
            await self._session.delete(article)
        except SQLAlchemyError as exc:
            raise BackendError(f"delete failed: {exc}") from exc
        await self.flush()

    async def flush(self) -> None:
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise BackendError(f"flush failed: {exc}") from exc
