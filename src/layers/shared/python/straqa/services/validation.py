"""Lead form field registry and validation.

Each field name maps to its validator, error message and the widget that
renders it. The registry is in submission order.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pydantic import BaseModel as PydanticBaseModel

from straqa.models.lead_form import SubmissionDraft

# Email validation regex
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def _is_email(value: str) -> bool:
    return bool(EMAIL_REGEX.match(value)) if value else False


def _is_present(value: str) -> bool:
    return len(value) > 0


def _always(value: str) -> bool:
    return True


@dataclass(frozen=True)
class FieldSpec:
    """How one lead form field is validated and rendered."""

    name: str
    label: str
    widget: str
    validator: Callable[[str], bool]
    message: str = "Invalid value."
    required: bool = True
    accept: str | None = None


LEAD_FORM_FIELDS: Mapping[str, FieldSpec] = MappingProxyType({
    "email": FieldSpec(
        name="email",
        label="Email address",
        widget="email",
        validator=_is_email,
        message="Your email is required.",
    ),
    "name": FieldSpec(
        name="name",
        label="Full name",
        widget="text",
        validator=_is_present,
        message="Your name is required.",
    ),
    "tel": FieldSpec(
        name="tel",
        label="Phone",
        widget="phone",
        validator=_is_present,
        message="Your phone number is required.",
    ),
    "experience": FieldSpec(
        name="experience",
        label="How was your experience",
        widget="textarea",
        validator=_is_present,
        message="Field is required.",
    ),
    "upload": FieldSpec(
        name="upload",
        label="Upload a picture ( this is not compulsory)",
        widget="file",
        validator=_always,
        required=False,
        accept="image/*",
    ),
})

# Order the fields appear on the page
DISPLAY_ORDER = ("name", "email", "tel", "experience", "upload")


@dataclass(frozen=True)
class BoundField:
    """A field spec together with its current value and error."""

    spec: FieldSpec
    value: str
    error: str | None = None


def _as_values(data: Any) -> Mapping[str, Any]:
    if isinstance(data, PydanticBaseModel):
        return data.model_dump()
    if isinstance(data, Mapping):
        return data
    return {}


def validate_draft(data: Any) -> dict[str, str]:
    """Validate a candidate draft.

    Accepts a ``SubmissionDraft`` or any mapping. Anything else is treated
    as an empty draft. Never raises for malformed input.

    Args:
        data: Candidate draft.

    Returns:
        Field name -> error message; empty when the draft is valid.
    """
    values = _as_values(data)
    errors: dict[str, str] = {}

    for name, spec in LEAD_FORM_FIELDS.items():
        value = values.get(name)
        if value is None and not spec.required:
            continue
        if value is None:
            value = ""
        if not isinstance(value, str):
            errors[name] = spec.message
            continue
        if not spec.validator(value):
            errors[name] = spec.message

    return errors


def bind_fields(
    draft: SubmissionDraft,
    errors: Mapping[str, str] | None = None,
) -> list[BoundField]:
    """Pair each field with its current value and error, in display order."""
    errors = errors or {}
    values = draft.model_dump()
    return [
        BoundField(
            spec=LEAD_FORM_FIELDS[name],
            value=values.get(name, ""),
            error=errors.get(name),
        )
        for name in DISPLAY_ORDER
    ]
