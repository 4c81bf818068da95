import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import dispose_engine
from app.logging_config import setup_logging
from app.middleware import RequestLoggingMiddleware
from app.responses import register_exception_handlers
from app.routers import articles

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info("Article API starting (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    logger.info("Article API shutting down")
    await dispose_engine()

app = FastAPI(
    title="Article API",
    description="CRUD and filtered, paginated listing of blog articles",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Routers
app.include_router(articles.router)

@app.get("/health")
async def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
