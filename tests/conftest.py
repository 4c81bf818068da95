"""
Test infrastructure for the Article API.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state without needing transactions or truncation.
- ``InMemoryArticleRepository`` implements the repository interface over a
  dict, for service tests that should not touch SQL at all.
"""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.filters import ArticleFilter
from app.main import app
from app.models import Article, as_utc, new_article_id

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override: replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# In-memory repository
# ---------------------------------------------------------------------------

BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _make_article(
    title: str = "Sample",
    author: str = "alice",
    tags: list[str] | None = None,
    is_published: bool = True,
    published_date: datetime | None = None,
) -> Article:
    """Build a transient Article with every required column filled in."""
    published = published_date or BASE_DATE
    return Article(
        id=new_article_id(),
        title=title,
        content=f"Body of {title}, long enough.",
        author=author,
        tags=tags or [],
        is_published=is_published,
        published_date=published,
        created_at=published,
        updated_at=published,
    )


def _make_articles(count: int, **kwargs) -> list[Article]:
    """*count* articles published one day apart, newest last."""
    return [
        _make_article(title=f"Article {i}", published_date=BASE_DATE + timedelta(days=i), **kwargs)
        for i in range(count)
    ]


class InMemoryArticleRepository:
    """Dict-backed ArticleRepository with the same ordering as the SQL one."""

    def __init__(self, articles=()) -> None:
        self.articles: dict[str, Article] = {a.id: a for a in articles}
        self.calls: list[str] = []

    def seed(self, articles) -> "InMemoryArticleRepository":
        self.articles.update((a.id, a) for a in articles)
        return self

    def _matching(self, article_filter: ArticleFilter) -> list[Article]:
        matching = sorted(
            (a for a in self.articles.values() if article_filter.matches(a)),
            key=lambda a: a.id,
        )
        # Stable sort keeps the id order among equal dates.
        matching.sort(key=lambda a: as_utc(a.published_date), reverse=True)
        return matching

    async def count(self, article_filter: ArticleFilter) -> int:
        self.calls.append("count")
        return len(self._matching(article_filter))

    async def find(self, article_filter: ArticleFilter, skip: int, limit: int) -> list[Article]:
        self.calls.append("find")
        return self._matching(article_filter)[skip:skip + limit]

    async def get(self, article_id: str) -> Article | None:
        return self.articles.get(article_id)

    async def add(self, article: Article) -> None:
        self.articles[article.id] = article

    async def delete(self, article: Article) -> None:
        del self.articles[article.id]

    async def flush(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that need to interact with the
    database directly (e.g. seeding data, asserting ORM state).
    """
    async with async_session_test() as session:
        yield session


@pytest.fixture
def memory_repo() -> InMemoryArticleRepository:
    return InMemoryArticleRepository()


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_article():
    return _make_article


@pytest.fixture
def make_articles():
    return _make_articles
