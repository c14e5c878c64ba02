"""FastAPI application entry point."""

import logging
import sys
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Must run before settings are read
load_dotenv()

# main.py is at <root>/src/api/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.context import build_context
from api.responses import error_response
from api.routes import health, users
from domain.model.errors import ErrorCode
from domain.model.result import ErrorInfo
from utils.logging import setup_structured_logging
from utils.settings import get_settings

settings = get_settings()
setup_structured_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Version lives in pyproject.toml
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "User Service API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the application context on startup, release it on shutdown."""
    context = build_context(get_settings())
    app.state.context = context
    logger.info("Application context ready", extra={"backend": context.backend})

    yield  # App runs here

    context.close()


app = FastAPI(
    title=SERVICE_NAME,
    description="User management API with paginated, filterable listing",
    version=VERSION,
    lifespan=lifespan,
)

# CORS_ORIGINS="*" cannot be combined with credentials; explicit lists can
if settings.cors_origins == "*":
    cors_origins = ["*"]
    allow_credentials = False
    if settings.is_production:
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "For production, set CORS_ORIGINS to specific domains"
        )
else:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render body/query validation failures as a 400 envelope."""
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    message = "; ".join(details) or "Invalid request"
    logger.info("Request validation failed", extra={"path": request.url.path, "reason": message})
    return error_response(ErrorInfo(message, ErrorCode.VALIDATION_ERROR))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return error_response(ErrorInfo("An unexpected error occurred", ErrorCode.INTERNAL_ERROR))


# Register routes
app.include_router(users.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        access_log=False  # Structured application logs already cover requests
    )
