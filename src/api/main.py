import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_settings
from src.api.errors import install_error_handlers
from src.rules.loader import load_rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError):
        logger.critical("Rules load failed for %s", settings.rules_path, exc_info=True)
        raise
    logger.info("Rules loaded from %s", settings.rules_path)

    applied = SQLiteMigrator(settings.db_path).run_migrations()
    if applied:
        logger.info("Applied %d migration(s)", len(applied))

    (settings.public_dir / "uploads").mkdir(parents=True, exist_ok=True)

    yield


app = FastAPI(
    title="Travel Agency CMS API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

install_error_handlers(app)

# --- Routers ---
from src.api.routes import (  # noqa: E402
    admin_settings,
    articles,
    auth,
    dashboard,
    packages,
    public,
    public_settings,
    taxonomy,
    users,
)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(packages.router, prefix="/api/packages", tags=["Packages"])
app.include_router(articles.router, prefix="/api/articles", tags=["Articles"])
app.include_router(
    taxonomy.package_types_router, prefix="/api/package-types", tags=["Package Types"]
)
app.include_router(
    taxonomy.article_categories_router,
    prefix="/api/article-categories",
    tags=["Article Categories"],
)
app.include_router(admin_settings.router, prefix="/api/settings", tags=["Settings"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(dashboard.router, prefix="/api/admin", tags=["Dashboard"])
app.include_router(public_settings.router, prefix="/api", tags=["Public"])
app.include_router(public.router, prefix="/api/public", tags=["Public"])

# Uploaded images; references are stored as /uploads/<folder>/<file>
app.mount(
    "/uploads",
    StaticFiles(directory=str(get_settings().public_dir / "uploads"), check_dir=False),
    name="uploads",
)


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
