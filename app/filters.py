"""
Filter builder for the article listing.

``build_article_filter`` turns an :class:`ArticleListQuery` into an
:class:`ArticleFilter`, a plain description of which articles match.
Translating it into SQL is the repository's job
(``app.repository._where_clauses``); ``ArticleFilter.matches`` evaluates
the same predicate against in-memory objects.

Conditions are always ANDed together and ``is_published`` is always
required, so drafts can never leak through the listing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.dependencies import ArticleListQuery
    from app.models import Article


@dataclass(frozen=True)
class ArticleFilter:
    is_published: bool = field(default=True, init=False)
    # Match if the article carries at least one of these.
    tags_any: frozenset[str] = field(default_factory=frozenset)
    author: str | None = None

    def matches(self, article: Article) -> bool:
        if article.is_published != self.is_published:
            return False
        if self.tags_any and self.tags_any.isdisjoint(article.tags):
            return False
        if self.author is not None and article.author != self.author:
            return False
        return True


def build_article_filter(query: ArticleListQuery) -> ArticleFilter:
    return ArticleFilter(tags_any=query.tags, author=query.author)
