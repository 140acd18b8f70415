"""Telemetry sender module for sending anonymous usage data."""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("editor_commons.telemetry")


async def send_telemetry(
    url: str,
    payload: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Send telemetry data to collection endpoint.

    Delivery is best-effort: network and HTTP errors are logged and reported
    through the return value, never raised.

    Args:
        url: Collection endpoint
        payload: Telemetry data to send
        transport: Optional httpx transport to send through

    Returns:
        bool: True if sending was successful, False otherwise
    """
    try:
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()
        logger.debug(f"Sent telemetry event {payload.get('event')} to {url}")
        return True
    except httpx.HTTPError as e:
        logger.debug(f"Failed to send telemetry: {e}")
        return False
