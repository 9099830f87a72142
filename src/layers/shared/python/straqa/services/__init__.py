"""Service classes for the lead form."""

from straqa.services.cms_client import FormSubmissionClient
from straqa.services.countries import CountryTable, get_country_table
from straqa.services.file_encoder import encode_file
from straqa.services.loading_indicator import DeferredLoadingIndicator
from straqa.services.phone_input import PhoneInput, normalize_phone
from straqa.services.submission_service import LeadFormSession, SubmissionOutcome
from straqa.services.validation import LEAD_FORM_FIELDS, bind_fields, validate_draft

__all__ = [
    "FormSubmissionClient",
    "CountryTable",
    "get_country_table",
    "encode_file",
    "DeferredLoadingIndicator",
    "PhoneInput",
    "normalize_phone",
    "LeadFormSession",
    "SubmissionOutcome",
    "LEAD_FORM_FIELDS",
    "bind_fields",
    "validate_draft",
]
