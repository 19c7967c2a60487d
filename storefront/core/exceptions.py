from fastapi import status
from typing import Any, Dict, Optional


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        body: Dict[str, Any] = {
            "success": False,
            "error": self.detail,
            "code": self.code,
        }
        if self.context:
            body["details"] = self.context
        return body


class ValidationException(APIException):
    """Exception raised when request data validation fails."""

    def __init__(
        self,
        detail: str = "Validation error",
        code: str = "validation_error",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"field": field} if field else {}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=merged_context
        )


class ConfigurationError(APIException):
    """Exception raised when a required integration credential is missing."""

    def __init__(
        self,
        detail: str = "Service is not configured",
        code: str = "configuration_error",
        message: Optional[str] = None,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context={"message": message} if message else None
        )


class PaymentVerificationError(APIException):
    """Exception raised when a payment signature does not match."""

    def __init__(
        self,
        detail: str = "Invalid payment signature. Payment verification failed.",
        code: str = "payment_verification_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=context
        )


class IntegrationException(APIException):
    """Exception raised when an external API cannot be reached."""

    def __init__(
        self,
        detail: str = "External API integration error",
        code: str = "integration_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(status_code=status_code, detail=detail, code=code, context=context)
        self.original_exception = original_exception

        # Add original exception info to context if available
        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)


class AuthenticationError(IntegrationException):
    """Exception raised when an upstream API rejects this service's own credentials."""

    def __init__(
        self,
        detail: str = "Authentication against upstream API failed",
        code: str = "authentication_error",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            detail=detail,
            code=code,
            context=context,
            original_exception=original_exception
        )


class UpstreamAPIError(APIException):
    """
    Exception raised when an external API answers with an error status.

    The response mirrors the upstream status code, and the upstream body is
    kept in the details so callers can see what the provider rejected.
    """

    def __init__(
        self,
        detail: str,
        status_code: int,
        service: str,
        details: Any = None,
        code: str = "upstream_error"
    ):
        super().__init__(status_code=status_code, detail=detail, code=code)
        self.service = service
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.detail,
            "code": self.code,
            "details": self.details,
            f"{self.service}Status": self.status_code,
        }
