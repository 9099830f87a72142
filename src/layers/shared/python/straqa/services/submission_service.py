"""Lead form session: owns the draft and runs the submission pipeline.

Pipeline on submit:
    validate -> encode upload (if any) -> build payload -> POST with a
    deferred spinner -> map the outcome to error / success state.

Failures keep the draft so the visitor can correct and retry; success
resets it. Nothing is retried or deduplicated here.
"""

import os
from enum import Enum
from typing import Awaitable, Callable

import structlog

from straqa.models.lead_form import (
    LEAD_FORM_ID,
    FormError,
    Notification,
    NotificationKind,
    SelectedFile,
    SubmissionDraft,
    SubmissionPayload,
)
from straqa.services.cms_client import FormSubmissionClient
from straqa.services.file_encoder import encode_file
from straqa.services.loading_indicator import DeferredLoadingIndicator, Scheduler
from straqa.services.validation import validate_draft
from straqa.utils.exceptions import (
    EncodingError,
    SubmissionError,
    SubmissionInProgressError,
    TransportError,
)

logger = structlog.get_logger()

LOADING_INDICATOR_DELAY = float(os.environ.get("LOADING_INDICATOR_DELAY", "1.0"))

FILE_UPLOAD_FAILED = "File upload failed."
SOMETHING_WENT_WRONG = "Something went wrong."


class SubmissionOutcome(str, Enum):
    """How a submit attempt ended."""

    SUCCEEDED = "succeeded"
    INVALID = "invalid"
    ENCODING_FAILED = "encoding_failed"
    REJECTED = "rejected"
    FAILED = "failed"


class LeadFormSession:
    """State of one visitor's lead form.

    Attributes:
        draft: Current field values.
        selected_file: File attached to the upload field, if any.
        field_errors: Inline errors from the last validation.
        error: Form-level error from the last submit attempt.
        notifications: Toasts raised so far.
    """

    def __init__(
        self,
        client: FormSubmissionClient | None = None,
        form_id: str = LEAD_FORM_ID,
        encoder: Callable[[SelectedFile], Awaitable[str]] = encode_file,
        scheduler: Scheduler | None = None,
        loading_delay: float = LOADING_INDICATOR_DELAY,
    ):
        self.form_id = form_id
        self.draft = SubmissionDraft()
        self.selected_file: SelectedFile | None = None
        self.field_errors: dict[str, str] = {}
        self.error: FormError | None = None
        self.notifications: list[Notification] = []

        self._client = client or FormSubmissionClient()
        self._encoder = encoder
        self._indicator = DeferredLoadingIndicator(delay=loading_delay, scheduler=scheduler)
        self._in_flight = False

    @property
    def is_loading(self) -> bool:
        """Whether the spinner is showing."""
        return self._indicator.visible

    @property
    def is_submitting(self) -> bool:
        return self._in_flight

    def update(self, **values: str) -> None:
        """Set draft fields from user input."""
        for name, value in values.items():
            setattr(self.draft, name, value)

    def attach_file(self, file: SelectedFile | None) -> None:
        """Attach a file to the upload field, or clear it with ``None``."""
        self.selected_file = file
        self.draft.upload = file.filename if file else ""

    def remove_file(self) -> None:
        self.attach_file(None)

    def reset(self) -> None:
        """Return the draft to its empty defaults and drop the attached file."""
        self.draft = SubmissionDraft()
        self.selected_file = None
        self.field_errors = {}

    def close(self) -> None:
        """Tear down the session, cancelling any pending spinner timer."""
        self._indicator.cancel()

    async def submit(self) -> SubmissionOutcome:
        """Run the submission pipeline once.

        Raises:
            SubmissionInProgressError: If a submission is already in flight.
        """
        if self._in_flight:
            raise SubmissionInProgressError()

        self._in_flight = True
        try:
            return await self._run()
        finally:
            self._in_flight = False

    async def _run(self) -> SubmissionOutcome:
        self.field_errors = validate_draft(self.draft)
        if self.field_errors:
            logger.info("Lead form has invalid fields", fields=sorted(self.field_errors))
            return SubmissionOutcome.INVALID

        self.error = None

        upload_data_uri = None
        if self.draft.upload and self.selected_file is not None:
            try:
                upload_data_uri = await self._encoder(self.selected_file)
            except EncodingError as e:
                logger.error(
                    "Error converting file",
                    filename=self.selected_file.filename,
                    error=e.message,
                )
                self.error = FormError(message=FILE_UPLOAD_FAILED)
                return SubmissionOutcome.ENCODING_FAILED

        payload = SubmissionPayload.from_draft(
            self.draft,
            upload_data_uri=upload_data_uri,
            form_id=self.form_id,
        )

        try:
            async with self._indicator:
                await self._client.submit(payload)
        except SubmissionError as e:
            self.error = FormError(message=e.message, status=e.status, status_code=e.status_code)
            return SubmissionOutcome.REJECTED
        except TransportError as e:
            logger.warning("Lead form submission failed", submission_id=payload.id, error=e.message)
            self.error = FormError(message=SOMETHING_WENT_WRONG)
            return SubmissionOutcome.FAILED

        self.notifications.append(Notification(kind=NotificationKind.SUCCESS, title="Success"))
        self.reset()
        logger.info("Lead form submitted", submission_id=payload.id, form_id=self.form_id)
        return SubmissionOutcome.SUCCEEDED
