import os
from functools import lru_cache

from dotenv import load_dotenv

from resume_ranker.models.llm_settings import LLMSettings

load_dotenv()

# Total request payload accepted by the upload endpoint
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))


def load_settings() -> LLMSettings:
    """Build LLM settings from the environment (.env is loaded on import)."""
    return LLMSettings(
        provider=os.getenv("LLM_PROVIDER", "gemini"),
        api_key=os.getenv("LLM_API_KEY", ""),
        model=os.getenv("LLM_MODEL") or None,
        timeout=int(os.getenv("LLM_TIMEOUT", "120")),
        max_concurrent=int(os.getenv("LLM_MAX_CONCURRENT", "5")),
    )


@lru_cache()
def get_settings() -> LLMSettings:
    return load_settings()
