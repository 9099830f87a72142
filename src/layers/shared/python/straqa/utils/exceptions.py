"""Custom exception classes for Straqa."""


class StraqaError(Exception):
    """Base exception for all Straqa errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 500,
        details: dict | None = None,
    ):
        """Initialize StraqaError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            status_code: HTTP status code for API responses.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API response."""
        result = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(StraqaError):
    """Raised when lead form input fails validation."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict] | None = None,
    ):
        """Initialize ValidationError.

        Args:
            message: Error message.
            errors: List of validation errors with field and message.
        """
        self.errors = errors or []
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": self.errors},
        )

    @classmethod
    def from_field_errors(cls, field_errors: dict[str, str]) -> "ValidationError":
        """Create ValidationError from a field name -> message mapping."""
        return cls(
            errors=[
                {"field": field, "message": message}
                for field, message in field_errors.items()
            ]
        )

    @classmethod
    def from_pydantic(cls, exc: Exception) -> "ValidationError":
        """Create ValidationError from Pydantic ValidationError."""
        errors = []
        if hasattr(exc, "errors"):
            for error in exc.errors():
                errors.append(
                    {
                        "field": ".".join(str(loc) for loc in error.get("loc", [])),
                        "message": error.get("msg", "Invalid value"),
                        "type": error.get("type", "unknown"),
                    }
                )
        return cls(message="Validation failed", errors=errors)


class EncodingError(StraqaError):
    """Raised when an attached file cannot be turned into a data URI."""

    def __init__(self, message: str = "File reading failed.", filename: str | None = None):
        """Initialize EncodingError."""
        super().__init__(
            message=message,
            error_code="ENCODING_ERROR",
            status_code=400,
            details={"filename": filename} if filename else None,
        )


class SubmissionError(StraqaError):
    """Raised when the CMS answers a submission with an error status."""

    def __init__(
        self,
        message: str = "Internal Server Error",
        status_code: int = 500,
        status: str | int | None = None,
    ):
        """Initialize SubmissionError.

        Args:
            message: First error message from the CMS response body.
            status_code: HTTP status returned by the CMS.
            status: ``status`` attribute of the CMS response body, if any.
        """
        self.status = status
        super().__init__(
            message=message,
            error_code="SUBMISSION_REJECTED",
            status_code=status_code,
            details={"status": status} if status is not None else None,
        )


class TransportError(StraqaError):
    """Raised when the submission request never completed."""

    def __init__(self, message: str = "Something went wrong.", original_error: str | None = None):
        """Initialize TransportError."""
        super().__init__(
            message=message,
            error_code="TRANSPORT_ERROR",
            status_code=502,
            details={"original_error": original_error} if original_error else None,
        )


class SubmissionInProgressError(StraqaError):
    """Raised when submit is called while a submission is already in flight."""

    def __init__(self, message: str = "A submission is already in progress"):
        """Initialize SubmissionInProgressError."""
        super().__init__(
            message=message,
            error_code="SUBMISSION_IN_PROGRESS",
            status_code=409,
        )


class RateLimitError(StraqaError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
    ):
        """Initialize RateLimitError."""
        self.retry_after = retry_after
        details = {}
        if retry_after:
            details["retry_after_seconds"] = retry_after

        super().__init__(
            message=message,
            error_code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            details=details if details else None,
        )
