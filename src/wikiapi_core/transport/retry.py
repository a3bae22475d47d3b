"""Retry transport for the synchronous wiki client.

Only idempotent methods are retried, and only on gateway style 5xx answers.
The retry happens below the action layer: an action never sees the failed
attempt, it only receives the final response for its envelope. Login and
other POST requests are never resent.

```python
from wikiapi_core.transport.retry import IdempotentOnlyRetry
import httpx

transport = IdempotentOnlyRetry(
    wrapped_transport=httpx.HTTPTransport(),
    max_retries=3,
)

with httpx.Client(transport=transport) as client:
    response = client.get("https://wiki.example.org/api.php")
```
"""

import logging
import time
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

logger = logging.getLogger(__name__)


class IdempotentOnlyRetry(httpx.BaseTransport):
    """Retry GET/HEAD requests on 502, 503 and 504.

    A ``Retry-After`` header (seconds or HTTP date), as sent by servers shedding
    load, is honoured up to ``max_backoff``.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retry attempts (default: 3)
        backoff_factor: Multiplier for exponential backoff (default: 1.0)
        max_backoff: Upper bound for a single delay in seconds (default: 60)
        retry_status_codes: Set of status codes that trigger retries (default: 502, 503, 504)
        sleep: Function used to wait between attempts
    """

    IDEMPOTENT_METHODS: frozenset[str] = frozenset(["HEAD", "GET"])

    DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([502, 503, 504])

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        max_retries: int = 3,
        backoff_factor: float = 1.0,
        max_backoff: float = 60.0,
        retry_status_codes: frozenset[int] | None = None,
        sleep=time.sleep,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.max_backoff = max_backoff
        self.retry_status_codes = retry_status_codes or self.DEFAULT_RETRY_STATUS_CODES
        self._sleep = sleep

    def __enter__(self):
        self._wrapped_transport.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return self._wrapped_transport.__exit__(exc_type, exc_val, exc_tb)

    def close(self) -> None:
        self._wrapped_transport.close()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying idempotent methods on gateway errors.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response (after retries if needed)
        """
        retries = 0

        while True:
            try:
                response = self._wrapped_transport.handle_request(request)
            except httpx.TransportError as e:
                if retries >= self.max_retries or request.method not in self.IDEMPOTENT_METHODS:
                    raise
                retries += 1
                delay = self._calculate_backoff_delay(retries)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e}, "
                    f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
                )
                self._sleep(delay)
                continue

            if not self._should_retry(request, response, retries):
                return response

            retries += 1
            delay = self._parse_retry_after(response)
            if delay is None:
                delay = self._calculate_backoff_delay(retries)
            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )
            response.close()
            self._sleep(delay)

    def _should_retry(self, request: httpx.Request, response: httpx.Response, current_retries: int) -> bool:
        if current_retries >= self.max_retries:
            return False
        if request.method not in self.IDEMPOTENT_METHODS:
            return False
        return response.status_code in self.retry_status_codes

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse a Retry-After header in delay-seconds or HTTP-date form."""
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = int(retry_after)
            if delay < 0:
                return None
            return float(min(delay, self.max_backoff))
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after)
            delay = (retry_date - datetime.now(UTC)).total_seconds()
            if delay < 0:
                return None
            return float(min(delay, self.max_backoff))
        except (ValueError, TypeError):
            return None

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Exponential backoff: backoff_factor * 2 ** (retry_number - 1), capped at max_backoff."""
        delay = self.backoff_factor * (2 ** (retry_number - 1))
        return min(delay, self.max_backoff)
