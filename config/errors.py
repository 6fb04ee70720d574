"""Estimator error handling.

Custom exceptions and error codes for the extraction/validation pipeline.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Input Errors (1xxx)
    EMPTY_INPUT = "EMPTY_INPUT"

    # Capability Response Errors (2xxx)
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"

    # LLM / Transport Errors (3xxx)
    LLM_ERROR = "LLM_ERROR"
    LLM_RATE_LIMIT = "LLM_RATE_LIMIT"
    LLM_CONTEXT_TOO_LONG = "LLM_CONTEXT_TOO_LONG"

    # Workflow Errors (4xxx)
    SESSION_BUSY = "SESSION_BUSY"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"


class EstimatorError(Exception):
    """Base exception for estimator errors.

    Provides structured error information for the workflow boundary.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize EstimatorError.

        Args:
            code: Error code from ErrorCode constants
            message: Human-readable error message
            details: Additional error context
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for the caller.

        Returns:
            Dictionary with code, message, and details.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(EstimatorError):
    """Neither specification text nor a specification document was supplied."""

    def __init__(self, message: str = "Specification text or document is required", details: Optional[Dict] = None):
        super().__init__(code=ErrorCode.EMPTY_INPUT, message=message, details=details)


class EmptyResponseError(EstimatorError):
    """The reasoning capability returned no content."""

    def __init__(self, message: str = "Empty response from model", details: Optional[Dict] = None):
        super().__init__(code=ErrorCode.EMPTY_RESPONSE, message=message, details=details)


class MalformedResponseError(EstimatorError):
    """No well-formed JSON array could be located in the response."""

    def __init__(self, message: str, raw_content: Optional[str] = None, details: Optional[Dict] = None):
        extra = dict(details or {})
        if raw_content is not None:
            extra["raw_content"] = raw_content[:500]
        super().__init__(code=ErrorCode.MALFORMED_RESPONSE, message=message, details=extra)


class ExternalCapabilityError(EstimatorError):
    """Transport or invocation failure of the reasoning capability."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.LLM_ERROR,
        original_error: Optional[str] = None,
        details: Optional[Dict] = None
    ):
        extra = dict(details or {})
        if original_error is not None:
            extra["original_error"] = original_error
        super().__init__(code=code, message=message, details=extra)


class SessionBusyError(EstimatorError):
    """An extraction or validation call is already in flight."""

    def __init__(self, operation: str, running: str):
        super().__init__(
            code=ErrorCode.SESSION_BUSY,
            message=f"Cannot start {operation}: {running} is still running",
            details={"operation": operation, "running": running}
        )
        self.operation = operation
        self.running = running


class ItemNotFoundError(EstimatorError):
    """Line item lookup by id failed."""

    def __init__(self, item_id: str):
        super().__init__(
            code=ErrorCode.ITEM_NOT_FOUND,
            message=f"Line item not found: {item_id}",
            details={"item_id": item_id}
        )
        self.item_id = item_id
