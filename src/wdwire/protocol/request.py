"""Request execution: send, classify, raise."""

from __future__ import annotations

import logging
from typing import Any

from wdwire.protocol.classifier import classify_response
from wdwire.protocol.errors import error_from_response_body
from wdwire.transport.base import Transport

logger = logging.getLogger(__name__)


async def make_request(
    transport: Transport,
    method: str,
    path: str,
    body: dict[str, Any] | None = None,
    *,
    use_base_path: bool = True,
    tolerate_missing_element: bool = True,
) -> dict[str, Any]:
    """
    Send one WebDriver request and check the reply.

    Args:
        transport: Transport to send through.
        method: HTTP method.
        path: Endpoint path with variables substituted.
        body: JSON payload.
        use_base_path: Whether the path is under the configured base path.
        tolerate_missing_element: Accept "element not found" replies
            instead of raising, for lazy element lookups.

    Returns:
        The decoded response body.

    Raises:
        WebDriverError: If the reply is classified as a failure.
        TransportError: If the transport fails.
    """
    status_code, response = await transport.send(
        method, path, body, use_base_path=use_base_path
    )

    outcome = classify_response(status_code, response)
    if outcome.is_success or (outcome.is_element_missing and tolerate_missing_element):
        return response

    logger.debug(f"[{method}] {path} classified as {outcome}")
    raise error_from_response_body(response)
