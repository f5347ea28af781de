"""
LLM Settings Models for provider configuration
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProviderKind(str, Enum):
    """Supported LLM providers"""
    OPENAI = "openai"
    GEMINI = "gemini"
    QWEN = "qwen"

    @classmethod
    def parse(cls, value: str) -> "ProviderKind":
        """Case-insensitive lookup by value or member name"""
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(f"Unknown LLM provider: {value!r}. Expected one of: {', '.join(k.value for k in cls)}")


class LLMSettings(BaseModel):
    """LLM Configuration Settings"""
    provider: ProviderKind = Field(default=ProviderKind.GEMINI, description="Active LLM provider")
    api_key: str = Field(default="", description="Provider API key; empty means not configured", repr=False)
    model: Optional[str] = Field(default=None, description="Override for the provider's default model")
    timeout: int = Field(default=120, ge=1, le=600, description="Request timeout in seconds")
    max_concurrent: int = Field(default=5, ge=1, le=20, description="Maximum concurrent AI requests per batch")

    @field_validator("provider", mode="before")
    @classmethod
    def validate_provider(cls, v):
        return ProviderKind.parse(v)
