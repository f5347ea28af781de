"""
Custom Exception Classes for the Resume Ranker API
"""
from typing import Dict, Any
from fastapi import HTTPException


class ResumeRankerError(Exception):
    """Base exception for Resume Ranker"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ResumeRankerError):
    """Raised when request data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class ConfigurationError(ResumeRankerError):
    """Raised when configuration is invalid"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class NotConfiguredError(ResumeRankerError):
    """Raised when the LLM client has no API key"""

    def __init__(self, message: str = "LLM service is not configured. Please provide an API key first.", **kwargs):
        super().__init__(message, error_code="NOT_CONFIGURED", **kwargs)


class SessionNotFoundError(ResumeRankerError):
    """Raised when a session does not exist"""

    def __init__(self, session_id: str, message: str = None, **kwargs):
        details = kwargs.pop('details', {})
        details['session_id'] = session_id
        super().__init__(
            message or f"Session {session_id} not found. Please upload resumes first.",
            error_code="SESSION_NOT_FOUND",
            details=details,
            **kwargs
        )


class NoCandidatesError(ResumeRankerError):
    """Raised when a session has nothing to analyze"""

    def __init__(self, session_id: str, **kwargs):
        super().__init__(
            f"No resumes to analyze in session {session_id}. Please upload resumes first.",
            error_code="NO_CANDIDATES",
            details={"session_id": session_id},
            **kwargs
        )


class UnsupportedFormatError(ResumeRankerError):
    """Raised when an uploaded file has an extension we cannot read"""

    def __init__(self, file_name: str, supported: tuple = (), **kwargs):
        message = f"Unsupported file format: {file_name}."
        if supported:
            message += f" Supported formats: {', '.join(supported)}"
        super().__init__(
            message,
            error_code="UNSUPPORTED_FORMAT",
            details={"file_name": file_name},
            **kwargs
        )


class EmptyExtractionError(ResumeRankerError):
    """Raised when no text could be extracted from a file"""

    def __init__(self, file_name: str, **kwargs):
        super().__init__(
            f"Could not extract text from file: {file_name}",
            error_code="EMPTY_EXTRACTION",
            details={"file_name": file_name},
            **kwargs
        )


class ProviderError(ResumeRankerError):
    """Raised when an LLM provider call fails at transport or HTTP level"""

    def __init__(self, provider: str, status_or_reason: Any = None, body: str = "", **kwargs):
        self.provider = provider
        self.status_or_reason = status_or_reason
        self.body = body or ""
        details = {"provider": provider}
        if status_or_reason is not None:
            details["status_or_reason"] = status_or_reason
        message = f"{provider} API error"
        if status_or_reason is not None:
            message += f" ({status_or_reason})"
        if self.body:
            message += f": {self.body[:500]}"
        super().__init__(message, error_code="PROVIDER_ERROR", details=details, **kwargs)


class MalformedModelResponseError(ResumeRankerError):
    """Raised when a model response holds no usable JSON or does not fit the expected shape"""

    def __init__(self, message: str, schema: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if schema:
            details['schema'] = schema
        super().__init__(message, error_code="MALFORMED_MODEL_RESPONSE", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ResumeRankerError) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        ConfigurationError: 400,
        NotConfiguredError: 400,
        NoCandidatesError: 400,
        SessionNotFoundError: 404,
        UnsupportedFormatError: 422,
        EmptyExtractionError: 422,
        ProviderError: 502,
        MalformedModelResponseError: 502,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


# Exception context manager for better error handling
class ExceptionContext:
    """Context manager that logs failures and wraps foreign exceptions"""

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            if self.logger:
                self.logger.error(
                    f"Operation failed: {self.operation} - {exc_val}",
                    extra={**self.context, "exception_type": exc_type.__name__}
                )

            # Re-raise custom exceptions as-is
            if isinstance(exc_val, ResumeRankerError):
                return False

            if isinstance(exc_val, (KeyError, ValueError, TypeError)):
                raise ValidationError(
                    f"Validation error in {self.operation}: {str(exc_val)}",
                    details=dict(self.context),
                    cause=exc_val
                ) from exc_val
            # Let everything else reach the global handler untouched
            return False

        if self.logger:
            self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
        return False
