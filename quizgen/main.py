"""
Quiz Generator API - Main Application
FILE: main.py
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from quizgen.core.config import settings
from quizgen.api.quiz import router as quiz_router
from quizgen.services.llm_client import MAX_TOKENS, TEMPERATURE
from quizgen.services.session_store import get_session_registry

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("🚀 Starting Quiz Generator API...")
    logger.info(
        f"✓ Completion endpoint: {settings.completion_api_url} "
        f"(model: {settings.completion_model})"
    )

    yield

    logger.info("🛑 Shutting down Quiz Generator API...")
    logger.info(f"✓ Dropping {len(get_session_registry())} in-memory sessions")


app = FastAPI(
    title="Quiz Generator API",
    description="""
    Generate multiple-choice quizzes with a language model, then take them.

    ## Flow
    1. `POST /api/quiz/sessions` - create a session
    2. `POST /api/quiz/sessions/{id}/generate` - topic or text, level, difficulty, count, API key
    3. `POST /api/quiz/sessions/{id}/answer` and `/next` - answer each question
    4. `POST /api/quiz/sessions/{id}/submit` - show the score and corrections
    5. `POST /api/quiz/sessions/{id}/restart` - back to the form

    Sessions live in memory only.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000  # Convert to ms
    response.headers["X-Process-Time-Ms"] = str(round(process_time, 2))
    return response


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    logger.info(f"📨 {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(
        f"📤 {request.method} {request.url.path} - "
        f"Status: {response.status_code}"
    )
    return response


# ==================== INCLUDE ROUTERS ====================

app.include_router(quiz_router)


# ==================== ROOT ENDPOINTS ====================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Quiz Generator API",
        "version": app.version,
        "status": "operational",
        "endpoints": {
            "docs": "/docs",
            "redoc": "/redoc",
            "sessions": "/api/quiz/sessions",
            "health": "/health"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Service health

    The completion API is not called here: each request carries its own key.
    """
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "components": {
            "completion_api": {
                "url": settings.completion_api_url,
                "model": settings.completion_model,
                "max_tokens": MAX_TOKENS,
                "temperature": TEMPERATURE
            },
            "sessions": {
                "active": len(get_session_registry()),
                "max": settings.max_sessions
            }
        },
        "api": {
            "title": app.title,
            "version": app.version,
            "status": "operational"
        }
    }


# ==================== RUN APPLICATION ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "quizgen.main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
        log_level="info"
    )
