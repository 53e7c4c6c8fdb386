"""Custom exceptions for ModelProbe."""

from typing import Any, Dict, List, Optional

# Longest response body excerpt carried in an error message
BODY_SNIPPET_LIMIT = 200


class ModelProbeException(Exception):
    """Base exception for all ModelProbe errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or []
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(ModelProbeException):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConfigurationError(ModelProbeException):
    """Raised when a provider cannot be configured (e.g. no API key)."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_CONFIG")


class NotFoundError(ModelProbeException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code="NOT_FOUND",
        )


class ProviderError(ModelProbeException):
    """Raised when a call to a provider API fails."""

    def __init__(self, provider: str, message: str, code: str = "PROVIDER_ERROR"):
        super().__init__(
            message=f"Provider error ({provider}): {message}",
            code=code,
            details=[{"provider": provider}],
        )
        self.provider = provider


class RequestBuildError(ProviderError):
    """Raised when a request body or URL cannot be constructed."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="REQUEST_ERROR")


class TransportError(ProviderError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, provider: str, message: str, code: str = "TRANSPORT_ERROR"):
        super().__init__(provider, message, code=code)


class ProbeTimeoutError(TransportError):
    """Raised when a deadline or client timeout cut the request short."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="TIMEOUT")


class ProbeCancelledError(TransportError):
    """Raised when the request was aborted by cancellation."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="CANCELLED")


class UpstreamStatusError(ProviderError):
    """Raised when the provider answered with a rejected status code."""

    def __init__(self, provider: str, status_code: int, body: str = ""):
        snippet = body.strip()[:BODY_SNIPPET_LIMIT]
        message = f"HTTP {status_code}: {snippet}" if snippet else f"HTTP {status_code}"
        super().__init__(provider, message, code="HTTP_ERROR")
        self.status_code = status_code
        self.body = body


class DecodeError(ProviderError):
    """Raised when a response body cannot be decoded."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="DECODE_ERROR")


class CriticalEndpointError(ModelProbeException):
    """Raised after validation when an endpoint marked critical failed."""

    def __init__(self, provider: str, method: str, path: str, error: str):
        super().__init__(
            message=f"critical endpoint failed: {method} {path} - {error}",
            code="CRITICAL_ENDPOINT_FAILED",
            details=[{"provider": provider, "method": method, "path": path}],
        )
        self.provider = provider
        self.method = method
        self.path = path


class AllEndpointsFailedError(ModelProbeException):
    """Raised after validation when a provider requires one working endpoint and none works."""

    def __init__(self, provider: str, error: str = ""):
        message = f"all endpoints failed: {error}" if error else "all endpoints failed"
        super().__init__(
            message=message,
            code="ALL_ENDPOINTS_FAILED",
            details=[{"provider": provider}],
        )
        self.provider = provider
        self.error = error
