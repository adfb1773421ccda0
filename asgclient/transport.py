"""HTTP GET client that retries transient network failures and 5xx replies."""

from __future__ import annotations

import http.client
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Tuple

RetryPredicate = Callable[[Optional["HttpResponse"], Optional[BaseException]], bool]
WaitFunction = Callable[[int], None]

_TEMPORARY_ERRORS = (TimeoutError, ConnectionResetError, ConnectionAbortedError)


@dataclass(frozen=True)
class HttpResponse:
    """A fully read HTTP response."""

    status_code: int
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def status(self) -> str:
        """Status line text, such as ``"404 Not Found"``."""
        return f"{self.status_code} {self.reason}".strip()

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


def exp_backoff(attempt: int) -> None:
    """Sleep 100 ms doubled for every earlier attempt."""
    time.sleep(0.1 * 2**attempt)


def linear_backoff(attempt: int) -> None:
    """Sleep 100 ms for every earlier attempt."""
    time.sleep(attempt * 100 / 1000)


def _is_temporary(error: BaseException) -> bool:
    if isinstance(error, urllib.error.URLError) and isinstance(
        error.reason, BaseException
    ):
        error = error.reason
    return isinstance(error, _TEMPORARY_ERRORS)


def aws_retry(
    response: Optional[HttpResponse], error: Optional[BaseException]
) -> bool:
    """Decide whether a request is worth repeating.

    Temporary network errors and 5xx replies are retried; anything else is not.
    """
    if error is not None and _is_temporary(error):
        return True
    return response is not None and 500 <= response.status_code < 600


class RetryingClient:
    """Issues GET requests, repeating them while ``should_retry`` says so."""

    def __init__(
        self,
        *,
        timeout: float = 5.0,
        max_tries: int = 3,
        should_retry: RetryPredicate = aws_retry,
        wait: Optional[WaitFunction] = exp_backoff,
    ) -> None:
        if max_tries < 1:
            raise ValueError("max_tries must be at least 1")
        self.timeout = timeout
        self.max_tries = max_tries
        self.should_retry = should_retry
        self.wait = wait
        self._opener = urllib.request.build_opener()

    def _round_trip(
        self, url: str
    ) -> Tuple[Optional[HttpResponse], Optional[BaseException]]:
        request = urllib.request.Request(url, headers={"Connection": "close"})
        try:
            with self._opener.open(request, timeout=self.timeout) as reply:
                body = reply.read()
                return (
                    HttpResponse(
                        reply.status, reply.reason, dict(reply.headers.items()), body
                    ),
                    None,
                )
        except urllib.error.HTTPError as reply:
            try:
                body = reply.read()
            finally:
                reply.close()
            headers = dict(reply.headers.items()) if reply.headers else {}
            return HttpResponse(reply.code, str(reply.reason), headers, body), None
        except (OSError, http.client.HTTPException) as error:
            return None, error

    def get(self, url: str) -> HttpResponse:
        """GET ``url`` and return the last response received.

        Error statuses are returned, not raised; a network error that is
        not retried, or remains after the last try, is raised.
        """
        response: Optional[HttpResponse] = None
        error: Optional[BaseException] = None
        for attempt in range(self.max_tries):
            response, error = self._round_trip(url)
            if not self.should_retry(response, error):
                break
            if self.wait is not None and attempt + 1 < self.max_tries:
                self.wait(attempt)
        if error is not None:
            raise error
        assert response is not None
        return response


_DEFAULT_CLIENT = RetryingClient()


def default_client() -> RetryingClient:
    """The shared client: 5 s timeout, 3 tries, exponential backoff."""
    return _DEFAULT_CLIENT