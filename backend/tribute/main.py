"""
FastAPI entrypoint for the Tribute forum backend.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tribute.core.config import settings
from tribute.core.exceptions import ForumError
from tribute.core.logging_config import setup_logging
from tribute.core.utils import describe_validation_errors, format_error
from tribute.api.router import api_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Backend API for the tribute site forum",
    version="1.0.0"
)

# CORS middleware (credentials are required for the session cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ForumError)
async def forum_error_handler(request: Request, exc: ForumError):
    """Render domain errors as {"message": ...} with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=format_error(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing fields are a 400, not FastAPI's default 422."""
    # submitted values are dropped so passwords are never echoed back
    errors = jsonable_encoder([
        {key: value for key, value in error.items() if key not in ("input", "ctx")}
        for error in exc.errors()
    ])
    return JSONResponse(
        status_code=400,
        content=format_error(describe_validation_errors(errors), errors)
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Keep the {"message": ...} shape for framework-raised errors (404 routes, 405...)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": f"{settings.APP_NAME} API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
