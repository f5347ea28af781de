# routers/reports.py
from typing import Dict, List

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from resume_ranker.models.models import AnalysisResult, Candidate
from resume_ranker.models.schemas import AnalysisResultOut, AnalyzeRequest, AnalyzeResponse, result_to_out
from resume_ranker.routers.dependencies import get_orchestrator
from resume_ranker.services.analysis import AnalysisOrchestrator, DEFAULT_TOP_N
from resume_ranker.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _with_candidates(results: List[AnalysisResult], candidates: List[Candidate]) -> List[AnalysisResultOut]:
    by_id: Dict[str, Candidate] = {c.id: c for c in candidates}
    return [result_to_out(r, by_id.get(r.candidate_id)) for r in results]


@router.post("/analyze/{session_id}", response_model=AnalyzeResponse)
async def analyze_candidates(
    session_id: str,
    payload: AnalyzeRequest,
    request: Request,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Score every candidate in the session against one job requirement"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Analyzing candidates for session {session_id}",
        extra={"request_id": request_id, "session_id": session_id}
    )

    batch = await run_in_threadpool(orchestrator.analyze_batch, session_id, payload.job_requirement)

    return AnalyzeResponse(
        session_id=batch.session_id,
        total_candidates=batch.total_candidates,
        successfully_analyzed=batch.successfully_analyzed,
        failed_to_analyze=batch.failed_to_analyze,
        results=_with_candidates(batch.results, orchestrator.list_candidates(session_id)),
        errors=batch.errors,
        analyzed_at=batch.analyzed_at,
    )


@router.get("/results/{session_id}", response_model=List[AnalysisResultOut])
async def get_results(session_id: str, orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Latest analysis results, best first"""
    return _with_candidates(orchestrator.list_results(session_id), orchestrator.list_candidates(session_id))


@router.get("/top-candidates/{session_id}", response_model=List[AnalysisResultOut])
async def get_top_candidates(
    session_id: str,
    count: int = Query(DEFAULT_TOP_N, description="Number of candidates to return"),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    return _with_candidates(
        orchestrator.get_top_candidates(session_id, count),
        orchestrator.list_candidates(session_id),
    )
