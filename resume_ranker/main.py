from datetime import datetime
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from resume_ranker.routers import ai_settings, cvs, reports, sessions

from resume_ranker.utils.logging_config import configure_for_environment, get_logger
from resume_ranker.middleware.error_handlers import RequestContextMiddleware, register_exception_handlers
from resume_ranker.services.analysis import AnalysisOrchestrator
from resume_ranker.services.providers import LLMClient
from resume_ranker.services.session_store import SessionStore
from resume_ranker.utils.config import get_settings

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)


def build_orchestrator() -> AnalysisOrchestrator:
    """One store and one LLM client per process, shared by every request."""
    settings = get_settings()
    llm = LLMClient(settings)
    if llm.is_configured():
        logger.info(f"LLM pre-configured from environment: {llm.provider.display_name} ({llm.model})")
    else:
        logger.info("No LLM API key in environment - configure one via /api/resume/configure")
    return AnalysisOrchestrator(llm, SessionStore(), max_workers=settings.max_concurrent)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume Ranker API starting up...")
    yield
    logger.info("Resume Ranker API shutting down...")


app = FastAPI(title="Resume Ranker API", version="1.0.0", lifespan=lifespan)
app.state.orchestrator = build_orchestrator()

register_exception_handlers(app)
app.add_middleware(RequestContextMiddleware, slow_request_threshold=2.0)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Resume Ranker API", "version": "1.0.0", "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


app.include_router(ai_settings.router, prefix="/api/resume", tags=["llm"])
app.include_router(sessions.router, prefix="/api/resume", tags=["sessions"])
app.include_router(cvs.router, prefix="/api/resume", tags=["candidates"])
app.include_router(reports.router, prefix="/api/resume", tags=["analysis"])

logger.info("Resume Ranker API initialized successfully")
