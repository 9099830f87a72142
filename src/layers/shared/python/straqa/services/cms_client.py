"""Client for the CMS form-submissions endpoint."""

import os
from typing import Any

import httpx
import structlog

from straqa.models.lead_form import SubmissionPayload
from straqa.utils.exceptions import SubmissionError, TransportError

logger = structlog.get_logger()

CMS_SERVER_URL = os.environ.get("CMS_SERVER_URL", "http://localhost:3000")
CMS_REQUEST_TIMEOUT = float(os.environ.get("CMS_REQUEST_TIMEOUT", "30"))

SUBMISSIONS_PATH = "/api/form-submissions"

FALLBACK_ERROR_MESSAGE = "Internal Server Error"


def first_error_message(body: Any) -> str:
    """Get the first ``errors[].message`` of a CMS error body, or the fallback."""
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("message"):
                return str(first["message"])
    return FALLBACK_ERROR_MESSAGE


def error_status(body: Any) -> str | int | None:
    """Get the ``status`` of a CMS error body when it is a plain string or number."""
    if not isinstance(body, dict):
        return None
    status = body.get("status")
    if isinstance(status, (str, int)) and not isinstance(status, bool):
        return status
    return None


class FormSubmissionClient:
    """Posts submission payloads to the CMS."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: CMS server URL. Defaults to CMS_SERVER_URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used in tests).
        """
        self.base_url = (base_url or CMS_SERVER_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else CMS_REQUEST_TIMEOUT
        self._transport = transport

    async def submit(self, payload: SubmissionPayload) -> dict:
        """Send a payload as a single request.

        Args:
            payload: The submission payload.

        Returns:
            Parsed response body.

        Raises:
            SubmissionError: The CMS answered with a 4xx/5xx status.
            TransportError: The request did not complete or the body was not JSON.
        """
        logger.info(
            "Sending form submission",
            submission_id=payload.id,
            form_id=payload.form,
            fields=len(payload.submission_data),
        )

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    SUBMISSIONS_PATH,
                    json=payload.to_request_body(),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.warning(
                "Form submission request failed",
                submission_id=payload.id,
                error=str(e),
                exception=type(e).__name__,
            )
            raise TransportError(original_error=str(e)) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.warning(
                "Form submission returned a non-JSON body",
                submission_id=payload.id,
                status_code=response.status_code,
            )
            raise TransportError(original_error=str(e)) from e

        if response.status_code >= 400:
            message = first_error_message(body)
            logger.info(
                "Form submission rejected",
                submission_id=payload.id,
                status_code=response.status_code,
                message=message,
            )
            raise SubmissionError(
                message=message,
                status_code=response.status_code,
                status=error_status(body),
            )

        logger.info(
            "Form submission accepted",
            submission_id=payload.id,
            status_code=response.status_code,
        )
        return body if isinstance(body, dict) else {"data": body}
