"""Lead form models: the draft a visitor fills in and the payload sent to the CMS."""

import asyncio
import base64
import binascii
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field

from straqa.models.base import BaseModel
from straqa.utils.exceptions import EncodingError

# Form document in the CMS that collects the tour submissions
LEAD_FORM_ID = os.environ.get("LEAD_FORM_ID", "679e61e98cbf538dd1ded437")

# Order of the submission data entries sent to the CMS
SUBMISSION_FIELD_ORDER = ("email", "name", "tel", "experience", "upload")

DEFAULT_COUNTRY = "NG"


class SubmissionDraft(PydanticBaseModel):
    """In-memory, not-yet-sent state of a single form fill-out."""

    model_config = ConfigDict(validate_assignment=True)

    email: str = ""
    name: str = ""
    tel: str = Field(default="", description="E.164 number or empty")
    experience: str = ""
    upload: str = Field(default="", description="File input value, empty when nothing is picked")


class SelectedFile(PydanticBaseModel):
    """A file picked in the upload field.

    Holds either the bytes themselves or a path to read them from.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str = "application/octet-stream"
    data: bytes | None = None
    path: Path | None = None

    async def read(self) -> bytes:
        """Read the file contents without blocking the event loop."""
        if self.data is not None:
            return self.data
        if self.path is None:
            return b""
        return await asyncio.to_thread(self.path.read_bytes)


class SubmissionField(PydanticBaseModel):
    """One ``{field, value}`` entry of the submission data."""

    field: str
    value: str | None = None


class SubmissionPayload(BaseModel):
    """Body posted to the CMS form-submissions endpoint.

    ``id`` and ``created_at`` identify the attempt in logs and are not sent.
    """

    form: str = Field(default=LEAD_FORM_ID, description="CMS form ID")
    submission_data: list[SubmissionField] = Field(
        default_factory=list, alias="submissionData"
    )

    @classmethod
    def from_draft(
        cls,
        draft: SubmissionDraft,
        upload_data_uri: str | None = None,
        form_id: str = LEAD_FORM_ID,
    ) -> "SubmissionPayload":
        """Flatten a draft into submission data.

        The upload entry carries the encoded file rather than the raw input
        value, and no value at all when nothing was encoded.
        """
        values = draft.model_dump()
        data = [
            SubmissionField(
                field=name,
                value=upload_data_uri if name == "upload" else values[name],
            )
            for name in SUBMISSION_FIELD_ORDER
        ]
        return cls(form=form_id, submission_data=data)

    def get_value(self, field: str) -> str | None:
        """Get the value sent for a field."""
        for entry in self.submission_data:
            if entry.field == field:
                return entry.value
        return None

    def to_request_body(self) -> dict:
        """Serialize to the wire format; a missing value drops the ``value`` key."""
        return {
            "form": self.form,
            "submissionData": [
                entry.model_dump(exclude_none=True) for entry in self.submission_data
            ],
        }


class NotificationKind(str, Enum):
    """Toast notification kinds."""

    SUCCESS = "success"


class Notification(PydanticBaseModel):
    """A toast shown in the page's notification area."""

    kind: NotificationKind
    title: str
    description: str | None = None


class FormError(PydanticBaseModel):
    """Form-level error shown above the submit button."""

    message: str
    status: str | int | None = None
    status_code: int | None = Field(None, description="HTTP status the CMS answered with")


class UploadedFile(PydanticBaseModel):
    """File attached to a submit request by the page script."""

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(default="application/octet-stream", max_length=100)
    data_base64: str = Field(..., description="Base64 contents, bare or as a data URL")

    def to_selected_file(self) -> SelectedFile:
        """Decode the transported contents.

        Raises:
            EncodingError: If the contents are not valid base64.
        """
        encoded = self.data_base64
        if encoded.startswith("data:"):
            encoded = encoded.partition(",")[2]

        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError("File upload failed.", filename=self.filename) from e

        return SelectedFile(
            filename=self.filename,
            content_type=self.content_type,
            data=data,
        )


class SubmitLeadFormRequest(PydanticBaseModel):
    """Request model for submitting the lead form (public)."""

    name: str = ""
    email: str = ""
    tel: str = Field(default="", description="Phone number as typed")
    tel_country: str = Field(default=DEFAULT_COUNTRY, min_length=2, max_length=2)
    experience: str = ""
    upload: UploadedFile | None = None
