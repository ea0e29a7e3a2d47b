"""Custom exceptions for the prompt enhancement pipeline."""

from typing import Optional, Dict, Any


class PromptEnhancerError(Exception):
    """Base exception for all prompt enhancer errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(PromptEnhancerError):
    """Error in configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, details, cause)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class MissingCredential(PromptEnhancerError):
    """No API key is available for the remote provider."""


class RemoteError(PromptEnhancerError):
    """Error from the remote chat-completion provider."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, details, cause)
        self.provider = provider
        self.status_code = status_code
        if provider:
            self.details["provider"] = provider
        if status_code:
            self.details["status_code"] = status_code


class RemoteUnavailable(RemoteError):
    """The remote provider could not be reached."""


class RemoteHttpError(RemoteError):
    """The remote provider answered with a non-success status."""

    def __init__(
        self,
        status: int,
        body: str,
        provider: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            f"Remote error {status}: {body}",
            provider=provider,
            status_code=status,
            cause=cause
        )
        self.status = status
        self.body = body

    def __str__(self) -> str:
        return self.message


class RemoteEmptyResponse(RemoteError):
    """A successful response carried no usable content."""
