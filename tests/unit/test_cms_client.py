"""Tests for the CMS form-submissions client."""

import asyncio

import httpx
import pytest

from straqa.models.lead_form import SubmissionDraft, SubmissionPayload
from straqa.services.cms_client import error_status, first_error_message
from straqa.utils.exceptions import SubmissionError, TransportError


def _payload() -> SubmissionPayload:
    return SubmissionPayload.from_draft(SubmissionDraft(name="Ada"))


class TestFirstErrorMessage:
    """Tests for first_error_message."""

    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"errors": [{"message": "Invalid phone"}, {"message": "Other"}]}, "Invalid phone"),
            ({"errors": []}, "Internal Server Error"),
            ({"errors": [{"field": "tel"}]}, "Internal Server Error"),
            ({"errors": "nope"}, "Internal Server Error"),
            ([], "Internal Server Error"),
            (None, "Internal Server Error"),
        ],
    )
    def test_extraction(self, body, expected):
        assert first_error_message(body) == expected


class TestErrorStatus:
    """Tests for error_status."""

    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"status": "error"}, "error"),
            ({"status": 400}, 400),
            ({"status": {"code": 400}}, None),
            ({"status": ["error"]}, None),
            ({"status": True}, None),
            ({}, None),
            ([], None),
        ],
    )
    def test_extraction(self, body, expected):
        assert error_status(body) == expected


class TestFormSubmissionClient:
    """Tests for FormSubmissionClient.submit."""

    def test_success_returns_body(self, cms_client):
        client, requests = cms_client()

        body = asyncio.run(client.submit(_payload()))

        assert body["doc"]["id"] == "sub-1"
        assert requests[0].url.path == "/api/form-submissions"

    def test_error_status_raises(self, cms_client):
        client, _ = cms_client(
            lambda request: httpx.Response(422, json={"errors": [{"message": "Invalid phone"}]})
        )

        with pytest.raises(SubmissionError) as exc_info:
            asyncio.run(client.submit(_payload()))

        assert exc_info.value.message == "Invalid phone"
        assert exc_info.value.status_code == 422

    def test_timeout_is_transport_error(self, cms_client):
        def _timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = cms_client(_timeout)

        with pytest.raises(TransportError):
            asyncio.run(client.submit(_payload()))

    def test_base_url_trailing_slash(self, cms_transport):
        from straqa.services.cms_client import FormSubmissionClient

        transport, requests = cms_transport()
        client = FormSubmissionClient(base_url="http://cms.test/", transport=transport)

        asyncio.run(client.submit(_payload()))

        assert str(requests[0].url) == "http://cms.test/api/form-submissions"
