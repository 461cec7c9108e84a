"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from habitual.config import settings
from habitual.database import database
from habitual.exceptions import StoreFailure
from habitual.routers import goals, progress, tasks
from habitual.utils.log_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await database.connect()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Habitual API",
    description="Backend API for AI-planned and manual habit goals",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request line."""
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    """Malformed or missing request fields are a 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Missing or invalid fields", "details": jsonable_errors(exc)},
    )


@app.exception_handler(StoreFailure)
async def store_failure(request: Request, exc: StoreFailure):
    """Persistence failures surface as internal errors."""
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Reduce pydantic error details to location and message."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# Include routers
app.include_router(goals.router)
app.include_router(tasks.router)
app.include_router(progress.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Habitual API"}


@app.get("/health")
async def health():
    """Health check endpoint, including database reachability."""
    if await database.ping():
        return {"status": "healthy", "database": "connected"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "database": "unreachable"},
    )


# Allow running directly with: python -m habitual.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "habitual.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
