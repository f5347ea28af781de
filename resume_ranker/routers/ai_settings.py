"""
LLM Settings Router - API key configuration and provider status
"""
from fastapi import APIRouter, Depends, Request

from resume_ranker.models.schemas import (
    ConfigureLLMRequest, ConfigureLLMResponse, LLMConfigResponse, LLMStatusResponse,
)
from resume_ranker.routers.dependencies import get_orchestrator
from resume_ranker.services.analysis import AnalysisOrchestrator
from resume_ranker.utils.exceptions import ExceptionContext, ValidationError
from resume_ranker.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/configure", response_model=ConfigureLLMResponse)
async def configure_llm(
    payload: ConfigureLLMRequest,
    request: Request,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Set the API key (and optionally the provider) used for all LLM calls"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    if not payload.api_key or not payload.api_key.strip():
        raise ValidationError("API key cannot be empty", field="api_key")

    with ExceptionContext("configure_llm", logger, request_id=request_id):
        orchestrator.configure_llm(payload.api_key, payload.provider)

    llm = orchestrator.llm
    logger.info(
        f"LLM configured: {llm.provider.display_name}",
        extra={"request_id": request_id, "provider": llm.provider_kind.value}
    )
    return ConfigureLLMResponse(
        message=f"{llm.provider.display_name} configured successfully.",
        provider=llm.provider_kind.value,
        model=llm.model,
    )


@router.get("/llm-status", response_model=LLMStatusResponse)
async def get_llm_status(orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    llm = orchestrator.llm
    return LLMStatusResponse(
        is_configured=llm.is_configured(),
        current_provider=llm.provider_kind.value,
        current_model=llm.model,
    )


@router.get("/llm-config", response_model=LLMConfigResponse)
async def get_llm_config(orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    llm = orchestrator.llm
    return LLMConfigResponse(
        provider=llm.provider_kind.value,
        model=llm.model,
        has_api_key=llm.is_configured(),
    )
