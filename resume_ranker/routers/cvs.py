from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from resume_ranker.models.schemas import CandidateOut, UploadResponse, candidate_to_out
from resume_ranker.routers.dependencies import get_orchestrator
from resume_ranker.services.analysis import AnalysisOrchestrator
from resume_ranker.utils.config import MAX_UPLOAD_BYTES
from resume_ranker.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


def _too_large() -> HTTPException:
    return HTTPException(status_code=413, detail=f"Upload exceeds {MAX_UPLOAD_BYTES // (1024 * 1024)}MB limit.")


@router.post("/upload/{session_id}", response_model=UploadResponse)
async def upload_resumes(
    session_id: str,
    request: Request,
    files: List[UploadFile] = File(default=None),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Upload a batch of resumes; unreadable files are reported, not fatal"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    if not files:
        raise HTTPException(status_code=400, detail="No files selected.")

    uploads = []
    remaining = MAX_UPLOAD_BYTES
    for f in files:
        if f.size is not None and f.size > remaining:
            raise _too_large()
        # never buffer more than one byte past the limit
        data = await f.read(remaining + 1)
        if len(data) > remaining:
            raise _too_large()
        remaining -= len(data)
        uploads.append((f.filename or "", data))

    logger.info(
        f"Uploading {len(uploads)} files to session {session_id}",
        extra={"request_id": request_id, "session_id": session_id, "file_count": len(uploads)}
    )

    with PerformanceMonitor("upload_resumes", logger, threshold_ms=60000):
        summary = await run_in_threadpool(orchestrator.upload_candidates, session_id, uploads)

    return UploadResponse(
        session_id=summary.session_id,
        total_files=summary.total_files,
        successfully_uploaded=summary.successfully_uploaded,
        failed_to_upload=summary.failed_to_upload,
        candidates=[candidate_to_out(c) for c in summary.candidates],
        errors=summary.errors,
    )


@router.get("/candidates/{session_id}", response_model=List[CandidateOut])
async def list_candidates(session_id: str, orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Candidates uploaded to a session, in upload order"""
    return [candidate_to_out(c) for c in orchestrator.list_candidates(session_id)]
