"""
Domain errors.

Every error is an HTTPException carrying a stable ``error_code`` so services
can raise them directly and routers never have to translate.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class PillarlogError(HTTPException):
    """Base error with consistent structure."""

    error_code = "ERROR"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail,
            headers=headers,
        )


class InvalidInput(PillarlogError):
    """Malformed identifiers, self-pairing, missing required fields."""

    error_code = "INVALID_INPUT"
    status_code_default = status.HTTP_400_BAD_REQUEST


class NotFound(PillarlogError):
    """Resource not found (or not owned by the caller)."""

    error_code = "NOT_FOUND"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: Any = None):
        detail = f"{resource} not found" if identifier is None else f"{resource} not found: {identifier}"
        super().__init__(detail)


class NoPendingRequest(PillarlogError):
    error_code = "NO_PENDING_REQUEST"
    status_code_default = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "No pending request to accept"):
        super().__init__(detail)


class StoreFailure(PillarlogError):
    """Persistence unavailable or an unanticipated constraint violation."""

    error_code = "STORE_FAILURE"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Database error"):
        super().__init__(detail)


class PredictorFailure(PillarlogError):
    """The external prediction call failed, timed out, or returned garbage."""

    error_code = "PREDICTOR_FAILURE"
    status_code_default = status.HTTP_502_BAD_GATEWAY

    def __init__(self, detail: str = "Prediction failed"):
        super().__init__(detail)
