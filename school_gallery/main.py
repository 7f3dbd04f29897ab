"""School Photo Gallery - FastAPI Entry Point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import ROOT_PATH, SITE_NAME, STATIC_DIR
from .database import cleanup_expired_sessions, init_db
from .infrastructure.backend import is_supabase
from .logging_config import configure_logging, get_logger
from .middleware import AuthMiddleware, CSRFMiddleware

# Import routers
from .routes.admin import router as admin_router
from .routes.auth import router as auth_router
from .routes.files import router as files_router
from .routes.public import router as public_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging()
    if is_supabase():
        logger.info("Using Supabase backend")
    else:
        # The local backend owns its schema and sessions
        init_db()
        removed = cleanup_expired_sessions()
        logger.info("Using local backend (%d expired session(s) removed)", removed)
    yield


app = FastAPI(title=f"Galeri {SITE_NAME}", version=__version__, lifespan=lifespan)

# Add middleware (order matters - first added = last executed)
app.add_middleware(AuthMiddleware)
app.add_middleware(CSRFMiddleware)

# Static files
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(auth_router)
app.include_router(public_router)
app.include_router(admin_router)
app.include_router(files_router)


@app.get("/{path:path}", include_in_schema=False)
def fallback(path: str):
    """Unknown pages go to the home page."""
    return RedirectResponse(url=f"{ROOT_PATH}/", status_code=302)
