"""Pydantic models for Straqa entities."""

from straqa.models.base import BaseModel, TimestampMixin, generate_ulid
from straqa.models.country import CountryOption
from straqa.models.lead_form import (
    DEFAULT_COUNTRY,
    LEAD_FORM_ID,
    SUBMISSION_FIELD_ORDER,
    FormError,
    Notification,
    NotificationKind,
    SelectedFile,
    SubmissionDraft,
    SubmissionField,
    SubmissionPayload,
    SubmitLeadFormRequest,
    UploadedFile,
)

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "generate_ulid",
    "CountryOption",
    "DEFAULT_COUNTRY",
    "LEAD_FORM_ID",
    "SUBMISSION_FIELD_ORDER",
    "FormError",
    "Notification",
    "NotificationKind",
    "SelectedFile",
    "SubmissionDraft",
    "SubmissionField",
    "SubmissionPayload",
    "SubmitLeadFormRequest",
    "UploadedFile",
]
