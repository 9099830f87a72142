"""Pytest configuration and fixtures."""

import json
import os

import pytest

# Set environment variables before imports
os.environ["TABLE_NAME"] = "straqa-test"
os.environ["STAGE"] = "test"
os.environ["CMS_SERVER_URL"] = "http://cms.test"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create mocked DynamoDB table for the rate limiter."""
    import boto3
    from moto import mock_aws

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName="straqa-test",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()

        yield table


class FakeTimer:
    """Timer handle returned by FakeClock."""

    def __init__(self, due: float, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Controllable scheduler: callbacks only run when time is advanced."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay, callback):
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float):
        self.now += seconds
        for timer in sorted(self.timers, key=lambda t: t.due):
            if timer.due <= self.now and not timer.cancelled and not timer.fired:
                timer.fired = True
                timer.callback()

    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def cms_transport():
    """Build an httpx mock transport for the CMS that records requests.

    The handler receives the request and returns an httpx.Response (or raises).
    """
    import httpx

    def _create_transport(handler=None):
        requests = []

        def _default(request):
            return httpx.Response(201, json={"doc": {"id": "sub-1"}, "message": "Created"})

        async def _record(request):
            requests.append(request)
            response = (handler or _default)(request)
            if hasattr(response, "__await__"):
                response = await response
            return response

        return httpx.MockTransport(_record), requests

    return _create_transport


@pytest.fixture
def cms_client(cms_transport):
    """Build a FormSubmissionClient backed by a mock transport."""
    from straqa.services.cms_client import FormSubmissionClient

    def _create_client(handler=None):
        transport, requests = cms_transport(handler)
        return FormSubmissionClient(base_url="http://cms.test", transport=transport), requests

    return _create_client


@pytest.fixture
def ada_values():
    """Field values of a complete draft."""
    return {
        "name": "Ada",
        "email": "ada@example.com",
        "tel": "+2340000000000",
        "experience": "Great",
    }


@pytest.fixture
def public_event():
    """Create an API Gateway event for the public tour page."""
    def _create_event(
        method: str = "GET",
        path: str = "/",
        query_params: dict = None,
        body=None,
        headers: dict = None,
        source_ip: str = "1.2.3.4",
    ):
        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": {},
            "queryStringParameters": query_params or {},
            "body": body if isinstance(body, str) or body is None else json.dumps(body),
            "headers": headers or {"Content-Type": "application/json"},
            "requestContext": {
                "identity": {"sourceIp": source_ip},
            },
        }

    return _create_event
