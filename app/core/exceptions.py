from typing import List, Optional
from fastapi import HTTPException, status


class MarketplaceError(HTTPException):
    """Base class for errors that map onto an HTTP error response."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

    @property
    def message(self) -> str:
        return str(self.detail)

    def to_body(self) -> dict:
        """JSON body sent to the caller."""
        return {"error": self.message}


class AuthenticationError(MarketplaceError):
    """Exception raised when a credential is missing, wrong, or revoked."""

    def __init__(self, detail: str = "Unauthorized. Please provide a valid API key."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail
        )


class ValidationError(MarketplaceError):
    """Exception raised when required request fields are missing or malformed."""

    def __init__(
        self,
        detail: Optional[str] = None,
        missing: Optional[List[str]] = None,
        invalid: Optional[List[str]] = None
    ):
        self.missing = list(missing or [])
        self.invalid = list(invalid or [])
        if detail is None:
            if self.missing:
                detail = f"Missing required fields: {', '.join(self.missing)}"
            elif self.invalid:
                detail = f"Invalid fields: {', '.join(self.invalid)}"
            else:
                detail = "Invalid request"
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )

    def to_body(self) -> dict:
        body = super().to_body()
        if self.missing:
            body["missing"] = self.missing
        if self.invalid:
            body["invalid"] = self.invalid
        return body


class PermissionDeniedError(MarketplaceError):
    """Exception raised when the caller may not act on a resource."""

    def __init__(self, detail: str = "Permission denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class NotFoundError(MarketplaceError):
    """Exception raised when a referenced job, proposal, or profile does not exist."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class InvalidTransitionError(MarketplaceError):
    """Exception raised when a status change is not allowed from the current status."""

    def __init__(self, current: str, target: str, resource: str = "Job"):
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{resource} cannot move from '{current}' to '{target}'"
        )


class PayloadTooLargeError(MarketplaceError):
    """Exception raised when a request body exceeds MAX_REQUEST_SIZE."""

    def __init__(self, detail: str = "Request body too large"):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=detail
        )


class InternalError(MarketplaceError):
    """Exception raised for unexpected failures; the cause is logged, never returned."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )
