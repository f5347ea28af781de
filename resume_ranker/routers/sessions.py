from fastapi import APIRouter, Depends, Request

from resume_ranker.models.schemas import SessionClearedResponse, SessionCreatedResponse
from resume_ranker.routers.dependencies import get_orchestrator
from resume_ranker.services.analysis import AnalysisOrchestrator
from resume_ranker.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/session", response_model=SessionCreatedResponse)
async def create_session(request: Request, orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Create an empty session"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    session_id = orchestrator.create_session()
    logger.info(f"Session created: {session_id}", extra={"request_id": request_id, "session_id": session_id})
    return SessionCreatedResponse(session_id=session_id)


@router.delete("/session/{session_id}", response_model=SessionClearedResponse)
async def clear_session(session_id: str, request: Request, orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Drop a session with its candidates and results (no-op when absent)"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    orchestrator.delete_session(session_id)
    logger.info(f"Session cleared: {session_id}", extra={"request_id": request_id, "session_id": session_id})
    return SessionClearedResponse(message="Session cleared.")
