import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router
from app.config import get_settings
from app.services.errors import DebateInputError

logger = logging.getLogger(__name__)

settings = get_settings()


# =============================================================================
# LIFESPAN: Startup and Shutdown Logic
# =============================================================================
#
# Everything before 'yield' runs once on startup, everything after it once
# on shutdown. There is no database or connection pool to open: every
# request is analysed from its own body. Startup only configures logging
# and records which analysis backend is active.
#
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""

    # === STARTUP ===
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Debate practice backend starting (model_backend={settings.model_backend})")
    if settings.model_backend == "openai" and not settings.openai_api_key:
        logger.warning("MODEL_BACKEND=openai but OPENAI_API_KEY is empty; model calls will fall back to rules")

    yield

    # === SHUTDOWN ===
    logger.info("Debate practice backend stopped")


app = FastAPI(
    title="BP Debate Practice",
    description="Adjudication, feedback and AI speeches for British Parliamentary debate practice",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


# =============================================================================
# ERROR HANDLERS
# =============================================================================
#
# Every error leaves the API as {"error": "<message>"} so the client only
# has one shape to read.
#

def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "Invalid request")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.info(f"Rejected {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(DebateInputError)
async def debate_input_error_handler(request: Request, exc: DebateInputError) -> JSONResponse:
    logger.info(f"Rejected {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "model_backend": settings.model_backend}
