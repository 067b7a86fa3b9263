"""
OAuth Code Login web server
Google sign-in that re-signs the user's profile into a short-lived session cookie
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from . import __version__
from .auth import auth_router, api_router
from .auth.routes import close_google_client
from .auth.session import SessionAuthError
from .models.auth import HealthStatus
from .utils.config import SERVER_REQUIRED_VARS, get_config
from .utils.logger import setup_logger

logger = setup_logger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    config = get_config()
    # Refuse to start without credentials
    config.validate_required_config(SERVER_REQUIRED_VARS)

    logger.info(f"Server is running on {config.SERVER_URL}")
    logger.info(f"Navigate to {config.SERVER_URL} to start the OAuth flow")

    yield

    await close_google_client()
    logger.info("OAuth Code Login server shutting down...")


def create_app() -> FastAPI:
    """Build the FastAPI application"""
    app = FastAPI(
        title="OAuth Code Login",
        description="Google authorization code login with signed session cookies",
        version=__version__,
        lifespan=lifespan
    )

    app.mount("/static", StaticFiles(directory=PACKAGE_DIR / "static"), name="static")
    templates = Jinja2Templates(directory=PACKAGE_DIR / "templates")

    app.include_router(auth_router)
    app.include_router(api_router)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        """Landing page with the sign-in button"""
        return templates.TemplateResponse(request, "index.html", {"title": "Sign in"})

    @app.get("/dashboard.html", response_class=HTMLResponse)
    async def dashboard(request: Request):
        """Dashboard page; loads the profile from /api/profile"""
        return templates.TemplateResponse(request, "dashboard.html", {"title": "Dashboard"})

    @app.get("/health", response_model=HealthStatus)
    async def health_check():
        """Health check endpoint for load balancers"""
        return HealthStatus(
            status="OK",
            timestamp=datetime.now(timezone.utc).isoformat(),
            environment=get_config().ENVIRONMENT,
        )

    @app.exception_handler(SessionAuthError)
    async def session_auth_handler(request: Request, exc: SessionAuthError):
        return JSONResponse(content={"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error: {exc}")
        return JSONResponse(content={"error": "Internal server error"}, status_code=500)

    return app


app = create_app()

