"""Tests for the rate limiter utility."""

import json
from unittest.mock import patch

from botocore.exceptions import ClientError

from straqa.utils.rate_limiter import (
    check_rate_limit,
    get_client_ip,
    rate_limit_response,
)


class TestRateLimiter:
    """Tests for check_rate_limit and rate_limit_response."""

    def test_allows_under_limit(self, dynamodb_table):
        result = check_rate_limit(identifier="test-ip", requests_per_minute=5)

        assert result.allowed is True
        assert result.requests_remaining == 4
        assert result.retry_after is None

    def test_blocks_over_minute(self, dynamodb_table):
        """The sixth submission within a minute is blocked."""
        for _ in range(5):
            assert check_rate_limit(identifier="test-ip").allowed is True

        result = check_rate_limit(identifier="test-ip")

        assert result.allowed is False
        assert result.requests_remaining == 0
        assert 0 < result.retry_after <= 60

    def test_blocks_over_hour(self, dynamodb_table):
        for _ in range(3):
            assert check_rate_limit(
                identifier="test-ip", requests_per_minute=100, requests_per_hour=3
            ).allowed is True

        result = check_rate_limit(identifier="test-ip", requests_per_minute=100, requests_per_hour=3)

        assert result.allowed is False
        assert 0 < result.retry_after <= 3600

    def test_identifiers_are_independent(self, dynamodb_table):
        for _ in range(5):
            check_rate_limit(identifier="ip-a")

        assert check_rate_limit(identifier="ip-b").allowed is True

    def test_fails_open_on_dynamodb_error(self):
        """A DynamoDB failure lets the request through."""
        client_error = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "UpdateItem",
        )
        with patch("straqa.utils.rate_limiter._get_table") as mock_table:
            mock_table.return_value.update_item.side_effect = client_error

            result = check_rate_limit(identifier="test-ip")

        assert result.allowed is True
        assert result.requests_remaining == -1

    def test_rate_limit_response(self):
        response = rate_limit_response(42)

        assert response["statusCode"] == 429
        assert response["headers"]["Retry-After"] == "42"
        assert json.loads(response["body"])["error_code"] == "RATE_LIMITED"


class TestGetClientIp:
    def test_forwarded_for(self):
        event = {"headers": {"X-Forwarded-For": "9.9.9.9, 10.0.0.1"}}

        assert get_client_ip(event) == "9.9.9.9"

    def test_source_ip(self):
        event = {"headers": {}, "requestContext": {"identity": {"sourceIp": "1.2.3.4"}}}

        assert get_client_ip(event) == "1.2.3.4"

    def test_unknown(self):
        assert get_client_ip({}) == "unknown"
