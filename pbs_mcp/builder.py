from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pbs_mcp.constants import SUBSCRIPTION_KEY_HEADER
from pbs_mcp.settings import PbsApiSettings

if TYPE_CHECKING:
    from pbs_mcp.tool import ForwardRequest


@dataclass(frozen=True)
class PreparedRequest:
    """An outbound request descriptor ready for dispatch."""

    method: str
    url: str
    headers: dict[str, str]
    params: dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0


def construct_url(base_url: str, endpoint: str) -> str:
    """
    Join an endpoint onto the base URL.

    An empty endpoint targets the base URL unmodified. Anything else gets a
    leading slash if it lacks one; the endpoint itself is not validated.
    """
    if not endpoint:
        return base_url

    formatted_endpoint = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    return f"{base_url.rstrip('/')}{formatted_endpoint}"


def build_request(request: "ForwardRequest", settings: PbsApiSettings) -> PreparedRequest:
    subscription_key = request.subscription_key or settings.subscription_key
    timeout_ms = request.timeout if request.timeout is not None else settings.timeout_ms

    return PreparedRequest(
        method=request.method,
        url=construct_url(settings.base_url, request.endpoint),
        headers={
            SUBSCRIPTION_KEY_HEADER: subscription_key,
            "Accept": "application/json",
        },
        params=dict(request.params or {}),
        timeout=timeout_ms / 1000,
    )
