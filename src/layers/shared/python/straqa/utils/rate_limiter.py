"""Per-client rate limiting for the public lead form endpoint."""

import os
import time
from typing import NamedTuple

import boto3
import structlog
from botocore.exceptions import ClientError

logger = structlog.get_logger()

TABLE_NAME = os.environ.get("TABLE_NAME", "straqa-dev")

# Lead form submissions are low volume; anything above this is a bot.
SUBMIT_REQUESTS_PER_MINUTE = 5
SUBMIT_REQUESTS_PER_HOUR = 30


class RateLimitResult(NamedTuple):
    """Result of a rate limit check."""

    allowed: bool
    requests_remaining: int
    retry_after: int | None  # Seconds until the window resets


def _get_table():
    """Get the DynamoDB table holding the window counters."""
    return boto3.resource("dynamodb").Table(TABLE_NAME)


def _bump_window(table, window_key: str, identifier: str, expires_at: int) -> int:
    """Increment a window counter and return its new value."""
    response = table.update_item(
        Key={"PK": window_key, "SK": identifier},
        UpdateExpression="SET #count = if_not_exists(#count, :zero) + :inc, #ttl = :ttl",
        ExpressionAttributeNames={"#count": "count", "#ttl": "ttl"},
        ExpressionAttributeValues={":zero": 0, ":inc": 1, ":ttl": expires_at},
        ReturnValues="ALL_NEW",
    )
    return int(response["Attributes"]["count"])


def check_rate_limit(
    identifier: str,
    action: str = "lead_form_submit",
    requests_per_minute: int = SUBMIT_REQUESTS_PER_MINUTE,
    requests_per_hour: int = SUBMIT_REQUESTS_PER_HOUR,
) -> RateLimitResult:
    """Count a request against the minute and hour windows.

    Counters live in DynamoDB and expire through the table TTL. A DynamoDB
    failure lets the request through.

    Args:
        identifier: Client identifier, usually the source IP.
        action: Action being limited.
        requests_per_minute: Max requests allowed per minute.
        requests_per_hour: Max requests allowed per hour.

    Returns:
        RateLimitResult with allowed status and remaining requests.
    """
    now = int(time.time())
    windows = (
        (f"RATELIMIT#{action}#MIN#{now // 60}", requests_per_minute, 60),
        (f"RATELIMIT#{action}#HOUR#{now // 3600}", requests_per_hour, 3600),
    )

    try:
        table = _get_table()
        remaining = []
        for window_key, limit, span in windows:
            count = _bump_window(table, window_key, identifier, now + span * 2)
            if count > limit:
                logger.warning(
                    "Rate limit exceeded",
                    identifier=identifier[:20],
                    action=action,
                    window=span,
                    count=count,
                    limit=limit,
                )
                return RateLimitResult(
                    allowed=False,
                    requests_remaining=0,
                    retry_after=span - (now % span),
                )
            remaining.append(limit - count)

        return RateLimitResult(allowed=True, requests_remaining=min(remaining), retry_after=None)

    except ClientError as e:
        logger.error(
            "Rate limiter DynamoDB error",
            error=str(e),
            identifier=identifier[:20],
            action=action,
        )
        return RateLimitResult(allowed=True, requests_remaining=-1, retry_after=None)


def get_client_ip(event: dict) -> str:
    """Extract client IP from an API Gateway event.

    Prefers the first X-Forwarded-For hop for requests behind CloudFront.
    """
    headers = event.get("headers", {}) or {}
    identity = (event.get("requestContext", {}) or {}).get("identity", {}) or {}

    forwarded_for = headers.get("X-Forwarded-For") or headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return identity.get("sourceIp", "unknown")


def rate_limit_response(retry_after: int) -> dict:
    """Generate a 429 Too Many Requests response."""
    from straqa.utils.responses import CORS_HEADERS

    return {
        "statusCode": 429,
        "headers": {
            **CORS_HEADERS,
            "Retry-After": str(retry_after),
        },
        "body": '{"error": true, "message": "Too many requests. Please try again later.", "error_code": "RATE_LIMITED"}',
    }
