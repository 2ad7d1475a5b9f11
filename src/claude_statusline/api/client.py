"""API client for the Claude Code OAuth usage endpoint.

A single GET per call, bounded by an end-to-end deadline and a cap on the
response size. There are no retries: the cache fallback in the usage
orchestrator covers transient failures across invocations.
"""

from __future__ import annotations

import json
import socket
import threading
import time
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from claude_statusline.api.models import UsageSnapshot
from claude_statusline.config.debuglog import NULL_LOG, DebugEvent, DebugLog
from claude_statusline.config.settings import (
    API_URL,
    DEFAULT_MAX_RESPONSE_BYTES,
    DEFAULT_TIMEOUT,
)
from claude_statusline.errors import (
    DecodeError,
    NetworkError,
    NetworkTimeoutError,
    RequestBuildError,
    categorize_http_status,
)

API_BETA_HEADER = "oauth-2025-04-20"
USER_AGENT = "claude-code/2.0.31"

READ_CHUNK_SIZE = 64 * 1024


def build_request(token: str, endpoint: str = API_URL) -> Request:
    """Build the usage request.

    Raises:
        RequestBuildError: If the endpoint is not a valid URL or the token
            cannot be sent as a header value.
    """
    if any(c in token for c in "\r\n\0"):
        raise RequestBuildError("failed to create request: token contains control characters")
    try:
        return Request(
            endpoint,
            method="GET",
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
                "Authorization": f"Bearer {token}",
                "anthropic-beta": API_BETA_HEADER,
            },
        )
    except ValueError as e:
        raise RequestBuildError(f"failed to create request: {e}") from e


def _is_timeout(error: BaseException) -> bool:
    if isinstance(error, (socket.timeout, TimeoutError)):
        return True
    if isinstance(error, URLError):
        reason = error.reason
        if isinstance(reason, (socket.timeout, TimeoutError)):
            return True
        return "timed out" in str(reason).lower()
    return False


def _check_deadline(deadline: float, timeout: float) -> None:
    if time.monotonic() > deadline:
        raise NetworkTimeoutError(f"usage API request exceeded {timeout:g}s")


def read_capped(response, max_bytes: int, deadline: float, timeout: float) -> bytes:
    """Read at most max_bytes from a response, enforcing the deadline.

    Raises:
        NetworkTimeoutError: If the deadline passes while reading.
        NetworkError: If the connection fails mid-body.
    """
    chunks = []
    remaining = max_bytes
    try:
        while remaining > 0:
            _check_deadline(deadline, timeout)
            chunk = response.read(min(READ_CHUNK_SIZE, remaining))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
    except (OSError, HTTPException) as e:
        if _is_timeout(e):
            raise NetworkTimeoutError(f"usage API request exceeded {timeout:g}s") from e
        raise NetworkError(f"failed to read usage response: {e}") from e
    return b"".join(chunks)


def _drain(response, max_bytes: int, deadline: float, timeout: float) -> None:
    """Discard an error body without exposing it."""
    try:
        read_capped(response, max_bytes, deadline, timeout)
    except NetworkError:
        pass  # Status code is the error being reported


def _request(
    req: Request,
    timeout: float,
    max_bytes: int,
    deadline: float,
    debug_log: DebugLog,
) -> bytes:
    """Perform the request and return the capped body of a 200 response."""
    try:
        response = urlopen(req, timeout=timeout)
    except HTTPError as e:
        status = e.code
        if e.fp is not None:
            _drain(e, max_bytes, deadline, timeout)
            e.close()
        debug_log.log(
            DebugEvent.API_ERROR,
            "Usage API returned an error status",
            details={"status_code": status},
            success=False,
        )
        raise categorize_http_status(status) from None
    except ValueError as e:
        raise RequestBuildError(f"failed to create request: {e}") from e
    except (OSError, HTTPException) as e:
        debug_log.log(
            DebugEvent.API_ERROR,
            "Usage API request failed",
            details={"error": str(e)},
            success=False,
        )
        if _is_timeout(e):
            raise NetworkTimeoutError(f"usage API request exceeded {timeout:g}s") from e
        reason = e.reason if isinstance(e, URLError) else e
        raise NetworkError(f"failed to call usage API: {reason}") from e

    with response:
        status = response.status
        if status != 200:
            _drain(response, max_bytes, deadline, timeout)
            debug_log.log(
                DebugEvent.API_ERROR,
                "Usage API returned an error status",
                details={"status_code": status},
                success=False,
            )
            raise categorize_http_status(status)

        return read_capped(response, max_bytes, deadline, timeout)


def _call_with_deadline(func, timeout: float):
    """Run func in a worker thread and give up once timeout seconds pass.

    Socket timeouts bound each blocking operation, not their sum, so a
    server trickling headers or body bytes is cut off here. An abandoned
    worker is a daemon thread and cannot keep the process alive.

    Raises:
        NetworkTimeoutError: If func has not finished in time.
    """
    outcome = {}

    def target():
        try:
            outcome["value"] = func()
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=target, name="usage-fetch", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise NetworkTimeoutError(f"usage API request exceeded {timeout:g}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def fetch_usage(
    token: str,
    endpoint: str = API_URL,
    timeout: float = DEFAULT_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
    debug_log: DebugLog = NULL_LOG,
) -> UsageSnapshot:
    """Fetch current usage from the OAuth usage API.

    Args:
        token: OAuth access token.
        endpoint: Usage API URL.
        timeout: End-to-end time budget in seconds, covering connect,
            response headers and body.
        max_bytes: Maximum number of response body bytes to read.
        debug_log: Logger for request outcomes. The token is never logged.

    Returns:
        Decoded usage snapshot.

    Raises:
        RequestBuildError: If the request cannot be constructed.
        NetworkTimeoutError: If the request exceeds the time budget.
        NetworkError: On any other transport failure.
        HTTPStatusError: On a non-200 response. The body is never included.
        DecodeError: If the body is not a valid usage document.
    """
    req = build_request(token, endpoint)
    debug_log.log(
        DebugEvent.API_REQUEST,
        "Requesting usage",
        details={"endpoint": endpoint, "timeout": timeout},
    )

    deadline = time.monotonic() + timeout
    try:
        body = _call_with_deadline(
            lambda: _request(req, timeout, max_bytes, deadline, debug_log), timeout
        )
    except NetworkTimeoutError:
        debug_log.log(
            DebugEvent.API_ERROR,
            "Usage API request timed out",
            details={"timeout": timeout},
            success=False,
        )
        raise

    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"failed to decode usage response: {e}") from e
    usage = UsageSnapshot.from_dict(data)

    debug_log.log(
        DebugEvent.API_SUCCESS,
        "Fetched usage",
        details={"status_code": 200, "bytes": len(body)},
    )
    return usage


__all__ = [
    "API_BETA_HEADER",
    "USER_AGENT",
    "build_request",
    "read_capped",
    "fetch_usage",
]
