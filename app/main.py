"""
Job Board AI Assistant - Main Application

FastAPI backend with:
- Interview MCQ generation for a tech stack
- Cover letter generation for a candidate/job pair
- Any OpenAI-compatible text-generation backend (Ollama by default)

Every error reaches the caller as {"status": "error", "message": "..."}.

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import AppError
from app.schemas.schemas import ErrorResponse, HealthResponse
from app.services.llm_client import get_llm_client

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Board AI Assistant",
    description="""
    AI-assisted content generation for a job board.

    ## Features
    - **Interview questions**: 10 multiple choice questions for a tech stack
    - **Cover letters**: personalized letter from candidate and job details

    ## AI backend
    - Any OpenAI-compatible endpoint (Ollama by default)
    - One call per request, no retries, no streaming
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return error_response(exc.message, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request shape -> 400 with the first problem found."""
    errors = exc.errors()
    if not errors:
        return error_response("Bad Request", 400)

    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    if ctx_error is not None:
        message = str(ctx_error)
    else:
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first['msg']}" if location else first["msg"]

    return error_response(message, 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Internal Server Error", 500)


# ============================================================
# ROOT / HEALTH
# ============================================================

@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Job Board AI Assistant"}


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """Detailed health check, pings the text-generation backend."""
    client = get_llm_client()
    return HealthResponse(
        status="healthy",
        ai_service="connected" if client.test_connection() else "disconnected",
        model=client.model,
    )
