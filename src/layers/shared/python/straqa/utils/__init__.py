"""Utility functions and helpers."""

from straqa.utils.responses import success, html, error, validation_error, not_found
from straqa.utils.exceptions import (
    StraqaError,
    ValidationError,
    EncodingError,
    SubmissionError,
    TransportError,
    SubmissionInProgressError,
    RateLimitError,
)

__all__ = [
    # Response helpers
    "success",
    "html",
    "error",
    "validation_error",
    "not_found",
    # Exceptions
    "StraqaError",
    "ValidationError",
    "EncodingError",
    "SubmissionError",
    "TransportError",
    "SubmissionInProgressError",
    "RateLimitError",
]
