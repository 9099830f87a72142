"""Tour lead form page handler (public, no authentication)."""

import asyncio
import base64
import json
import os
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from straqa.models.lead_form import LEAD_FORM_ID, SubmitLeadFormRequest, SubmissionDraft
from straqa.services.cms_client import FormSubmissionClient
from straqa.services.countries import get_country_table
from straqa.services.page_templates import render_full_page
from straqa.services.phone_input import PhoneInput
from straqa.services.submission_service import (
    FILE_UPLOAD_FAILED,
    LOADING_INDICATOR_DELAY,
    LeadFormSession,
    SubmissionOutcome,
)
from straqa.services.validation import bind_fields, validate_draft
from straqa.utils.exceptions import EncodingError, RateLimitError, ValidationError
from straqa.utils.rate_limiter import check_rate_limit, get_client_ip, rate_limit_response
from straqa.utils.responses import error, html, not_found, success, validation_error

logger = structlog.get_logger()

API_URL = os.environ.get("API_URL", "")


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle tour page requests.

    Routes:
        GET  /              - Render the lead form page
        GET  /countries?q=  - Search phone country options
        POST /submit        - Submit the lead form
    """
    try:
        http_method = event.get("httpMethod", "").upper()
        path = (event.get("path") or "/").rstrip("/") or "/"
        query_params = event.get("queryStringParameters", {}) or {}

        if path in ("/", "/tour") and http_method == "GET":
            return get_page()
        elif path == "/countries" and http_method == "GET":
            return list_countries(query_params.get("q", ""))
        elif path == "/submit" and http_method == "POST":
            return submit_lead_form(event)
        else:
            return not_found()

    except RateLimitError as e:
        return rate_limit_response(e.retry_after or 60)
    except ValidationError as e:
        return validation_error(e.errors)
    except EncodingError as e:
        logger.warning("Upload could not be decoded", error=e.message, **e.details)
        return error(FILE_UPLOAD_FAILED, 400, error_code=e.error_code)
    except ValueError as e:
        return error(str(e), 400)
    except Exception as e:
        logger.exception("Tour page handler error", error=str(e))
        return error("Internal server error", 500)


def get_page() -> dict:
    """Render the lead form page with empty defaults."""
    countries = get_country_table().options
    page = render_full_page(
        bind_fields(SubmissionDraft()),
        form_id=LEAD_FORM_ID,
        countries=countries,
        api_url=API_URL,
        loading_delay=LOADING_INDICATOR_DELAY,
    )

    csp_directives = [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' cdn.tailwindcss.com",
        "style-src 'self' 'unsafe-inline' cdn.tailwindcss.com",
        "img-src 'self' data: blob:",
        f"connect-src 'self' {API_URL}".rstrip(),
        "frame-ancestors 'none'",
        "base-uri 'self'",
        "form-action 'self'",
    ]
    return html(page, csp="; ".join(csp_directives))


def list_countries(query: str) -> dict:
    """Search the phone country options."""
    options = get_country_table().search(query)
    return success({
        "items": [
            {
                "code": option.code,
                "label": option.label,
                "dial_code": option.dial_prefix,
                "flag": option.flag,
            }
            for option in options
        ],
    })


def _get_client() -> FormSubmissionClient:
    """Get the CMS submissions client."""
    return FormSubmissionClient()


def _parse_body(event: dict) -> dict:
    """Parse the JSON request body, decoding it first if API Gateway base64'd it."""
    raw = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")

    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        raise ValueError("Invalid JSON body")

    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def submit_lead_form(event: dict) -> dict:
    """Validate and forward a lead form submission to the CMS."""
    client_ip = get_client_ip(event)
    rate_check = check_rate_limit(identifier=client_ip)
    if not rate_check.allowed:
        raise RateLimitError(retry_after=rate_check.retry_after)

    body = _parse_body(event)
    try:
        request = SubmitLeadFormRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)

    if request.tel_country not in get_country_table():
        raise ValidationError(
            errors=[{"field": "tel_country", "message": "Unknown country."}]
        )

    phone = PhoneInput(default_country=request.tel_country)
    session = LeadFormSession(client=_get_client())
    session.update(
        name=request.name,
        email=request.email,
        tel=phone.type(request.tel),
        experience=request.experience,
    )

    # Field errors take precedence over a malformed upload
    field_errors = validate_draft(session.draft)
    if field_errors:
        raise ValidationError.from_field_errors(field_errors)

    if request.upload:
        session.attach_file(request.upload.to_selected_file())

    try:
        outcome = asyncio.run(session.submit())
    finally:
        session.close()

    logger.info("Lead form submit finished", outcome=outcome.value, client_ip=client_ip[:20])

    if outcome == SubmissionOutcome.SUCCEEDED:
        return success({"success": True, "message": "Success"})
    if outcome == SubmissionOutcome.INVALID:
        raise ValidationError.from_field_errors(session.field_errors)
    if outcome == SubmissionOutcome.ENCODING_FAILED:
        return error(session.error.message, 400, error_code="ENCODING_ERROR")
    if outcome == SubmissionOutcome.REJECTED:
        return error(
            session.error.message,
            session.error.status_code or 500,
            error_code="SUBMISSION_REJECTED",
        )
    return error(session.error.message, 502, error_code="TRANSPORT_ERROR")
