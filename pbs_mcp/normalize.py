from typing import Any

import httpx

from pbs_mcp.constants import RATE_LIMIT_HEADERS
from pbs_mcp.envelopes import (
    ErrorEnvelope,
    NoResponseErrorEnvelope,
    RateLimit,
    ResultEnvelope,
    SetupErrorEnvelope,
    UpstreamErrorEnvelope,
)


def extract_rate_limit(headers: httpx.Headers) -> RateLimit | None:
    """
    Collect the upstream rate-limit headers.

    Returns None when none of them is present, so the envelope omits the
    field instead of reporting empty values.
    """
    values = {name: headers.get(header) for name, header in RATE_LIMIT_HEADERS.items()}
    if all(value is None for value in values.values()):
        return None
    return RateLimit(**values)


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def normalize_response(response: httpx.Response) -> ResultEnvelope:
    return ResultEnvelope(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=dict(response.headers.items()),
        body=_parse_body(response),
        rate_limit=extract_rate_limit(response.headers),
    )


def normalize_error(exc: Exception) -> ErrorEnvelope:
    """
    Map a failed call onto one of the three error envelopes.

    - the upstream responded with a non-2xx status
    - the request went out but no response came back (network error, timeout)
    - the request could not be built or sent at all
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        return UpstreamErrorEnvelope(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers.items()),
            body=_parse_body(response),
            rate_limit=extract_rate_limit(response.headers),
        )
    # UnsupportedProtocol is raised before anything is written to the wire
    if isinstance(exc, httpx.RequestError) and not isinstance(exc, httpx.UnsupportedProtocol):
        return NoResponseErrorEnvelope()
    return SetupErrorEnvelope(message=str(exc))
