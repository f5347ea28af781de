from fastapi import Request

from resume_ranker.services.analysis import AnalysisOrchestrator


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    """The process-wide orchestrator built at startup (see main.build_orchestrator)."""
    return request.app.state.orchestrator
