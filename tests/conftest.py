"""Shared fixtures: a scripted stand-in for requests.Session."""

import json
from typing import Any, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from vaultsens import RetryPolicy, VaultSensClient

BASE_URL = "https://api.example.com"


def make_response(
    status: int = 200,
    body: Any = None,
    content_type: Optional[str] = "application/json",
    reason: str = "",
) -> requests.Response:
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict()
    if content_type:
        response.headers["Content-Type"] = content_type
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, str)):
        response._content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        response._content = json.dumps(body).encode("utf-8")
    # body is already in memory; iter_content slices it instead of reading raw
    response._content_consumed = True
    return response


class FakeSession:
    """Replays queued responses/exceptions and records every call.

    The last queued item is repeated once the queue runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class SleepRecorder:
    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client(sleeper):
    """Factory for a client wired to a FakeSession."""

    def factory(*outcomes, retry_policy: Optional[RetryPolicy] = None, **kwargs):
        session = FakeSession(*outcomes)
        kwargs.setdefault("api_key", "key")
        kwargs.setdefault("api_secret", "secret")
        client = VaultSensClient(
            BASE_URL,
            retry_policy=retry_policy,
            session=session,
            sleep=sleeper,
            **kwargs,
        )
        return client, session

    return factory


def ok(data: Any = None, message: str = "ok") -> requests.Response:
    return make_response(200, {"status": 200, "message": message, "data": data})
