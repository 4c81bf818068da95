from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def new_article_id() -> str:
    """Return a fresh opaque article identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes.

    SQLite hands back naive values even for ``DateTime(timezone=True)``
    columns; everything written by this service is UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------
class Article(Base):
    __tablename__ = "articles"

    __table_args__ = (
        # Published listing, newest first
        Index("ix_articles_is_published_published_date", "is_published", "published_date"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_article_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    published_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # lazy="raise": callers load tags explicitly with selectinload
    tag_links: Mapped[List["ArticleTag"]] = relationship(
        "ArticleTag",
        back_populates="article",
        order_by="ArticleTag.position",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    @property
    def tags(self) -> list[str]:
        return [link.name for link in self.tag_links]

    @tags.setter
    def tags(self, names: list[str]) -> None:
        self.tag_links = [
            ArticleTag(position=position, name=name) for position, name in enumerate(names)
        ]


# ---------------------------------------------------------------------------
# Article tags, one row per tag; position keeps the list order
# ---------------------------------------------------------------------------
class ArticleTag(Base):
    __tablename__ = "article_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    article: Mapped["Article"] = relationship(
        "Article", back_populates="tag_links", lazy="raise"
    )
