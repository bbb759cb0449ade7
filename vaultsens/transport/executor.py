"""Resilient request executor for the VaultSens API.

Every resource operation goes through RequestExecutor.request(), which:
- attaches the x-api-key / x-api-secret credential headers
- bounds each attempt with the configured timeout
- retries transport failures and allowlisted statuses with a fixed delay
- raises a classified VaultSensError for anything that is not 2xx
"""

import json
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

import requests

from ..errors import VaultSensError, VaultSensTimeoutError, VaultSensTransportError

API_KEY_HEADER = "x-api-key"
API_SECRET_HEADER = "x-api-secret"

CHUNK_SIZE = 8192

if TYPE_CHECKING:
    from ..config import ClientConfig

RetryCallback = Callable[[int, VaultSensError], None]


@dataclass
class AttemptOutcome:
    """Result of a single attempt: a decoded payload or a classified error."""
    payload: Any = None
    error: Optional[VaultSensError] = None
    status: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class RequestExecutor:
    """Runs one logical HTTP operation with auth, timeout and retries.

    The executor reads the client's configuration on every call, so
    changes made through the client's setters apply to later attempts.
    """

    def __init__(
        self,
        config: "ClientConfig",
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_retry: Optional[RetryCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the executor.

        Args:
            config: Client configuration (base URL, credentials, timeout, retry).
            session: HTTP session to use. A new one is created if omitted.
            sleep: Function used to wait between attempts.
            on_retry: Optional callback(retry_number, error) before each retry.
            clock: Monotonic clock used for the per-attempt deadline.
        """
        self.config = config
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._sleep = sleep
        self.on_retry = on_retry
        self._clock = clock

    def request(
        self,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> Any:
        """Execute a request and return its decoded payload.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Path relative to the base URL, including any query string.
            headers: Extra request headers.
            **kwargs: Body arguments passed to requests (json, data, files).

        Returns:
            Parsed JSON for JSON responses, text otherwise.

        Raises:
            VaultSensError: Missing credentials or a non-2xx final response.
            VaultSensTimeoutError: Final attempt timed out.
            VaultSensTransportError: Final attempt failed without a response.
        """
        config = self.config
        if not config.has_credentials:
            raise VaultSensError("API key and secret are required", 401)

        url = f"{config.base_url}{path}"
        attempt = 0

        while True:
            merged = {
                k: v for k, v in (headers or {}).items()
                if k.lower() not in (API_KEY_HEADER, API_SECRET_HEADER)
            }
            merged[API_KEY_HEADER] = config.api_key
            merged[API_SECRET_HEADER] = config.api_secret

            outcome = self._attempt(method, url, merged, kwargs)
            if outcome.ok:
                return outcome.payload

            if not config.retry.should_retry(outcome.status, attempt):
                raise outcome.error

            attempt += 1
            if self.on_retry:
                self.on_retry(attempt, outcome.error)
            self._sleep(config.retry.retry_delay)

    def _attempt(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        kwargs: dict[str, Any],
    ) -> AttemptOutcome:
        """Make a single network call and classify what came back.

        The body is streamed so the whole attempt, not just each socket
        read, is bounded by the configured timeout.
        """
        timeout = self.config.timeout
        deadline = self._clock() + timeout
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                timeout=timeout,
                stream=True,
                **kwargs,
            )
            try:
                content = self._read_body(response, deadline)
            finally:
                response.close()
        except requests.Timeout as e:
            return _timeout_outcome(e)
        except requests.RequestException as e:
            error = VaultSensTransportError(str(e) or type(e).__name__)
            error.__cause__ = e
            return AttemptOutcome(error=error, status=0)

        if content is None:
            return _timeout_outcome()

        payload = decode_payload(response, content)

        if 200 <= response.status_code < 300:
            return AttemptOutcome(payload=payload, status=response.status_code)

        message = extract_message(payload, response)
        return AttemptOutcome(
            error=VaultSensError(message, response.status_code, payload),
            status=response.status_code,
        )

    def _read_body(self, response: requests.Response, deadline: float) -> Optional[bytes]:
        """Read the body in chunks; None if the deadline passes first."""
        if self._clock() >= deadline:
            return None
        chunks = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            chunks.append(chunk)
            if self._clock() >= deadline:
                return None
        return b"".join(chunks)

    def close(self) -> None:
        """Close the HTTP session if this executor created it."""
        if self._owns_session:
            self._session.close()


def _timeout_outcome(cause: Optional[BaseException] = None) -> AttemptOutcome:
    error = VaultSensTimeoutError()
    error.__cause__ = cause
    return AttemptOutcome(error=error, status=0)


def decode_payload(response: requests.Response, content: Optional[bytes] = None) -> Any:
    """Decode a response body as JSON or text based on its content type.

    Args:
        response: Response whose headers select the decoding.
        content: Body bytes already read. Defaults to ``response.content``.
    """
    if content is None:
        content = response.content
    text = content.decode(response.encoding or "utf-8", errors="replace")

    content_type = response.headers.get("content-type") or ""
    if "application/json" in content_type:
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


def extract_message(payload: Any, response: requests.Response) -> str:
    """Pick the error message: payload message, payload error, then reason."""
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if value:
                return value if isinstance(value, str) else str(value)
    return response.reason or f"HTTP {response.status_code}"
