"""Client for the tunnel creation endpoint."""

import json
from http.client import HTTPException
from urllib.error import URLError
from urllib.parse import urlencode
from urllib.request import urlopen

from pydantic import ValidationError

from .config import TunnelSettings
from .exceptions import NetworkError, ProtocolError
from .logging import get_logger
from .models import TunnelDescriptor, TunnelRequest
from .utils import sanitize_log_data

logger = get_logger(__name__)

CONNECT_ERROR_MESSAGE = "Can't connect to QAdept.com."
MALFORMED_RESPONSE_MESSAGE = "Malformed tunnel response from QAdept.com."


def build_request_url(request: TunnelRequest, settings: TunnelSettings) -> str:
    """Full GET URL for a tunnel request."""
    separator = "&" if "?" in settings.api_url else "?"
    return settings.api_url + separator + urlencode(request.query_params())


def parse_tunnel_response(body: bytes | str) -> TunnelDescriptor:
    """Parse the tunnel service JSON into a TunnelDescriptor.

    Raises:
        ProtocolError: If the body is not JSON, the service refused the
            request, or required fields are missing
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        logger.info("Tunnel response is not valid JSON", error=str(e))
        raise ProtocolError(CONNECT_ERROR_MESSAGE) from e

    if not isinstance(data, dict) or not data.get("ret"):
        message = data.get("message") if isinstance(data, dict) else None
        logger.info("Tunnel request rejected", message=message)
        raise ProtocolError(message if message else CONNECT_ERROR_MESSAGE)

    try:
        descriptor = TunnelDescriptor.model_validate(data)
    except ValidationError as e:
        logger.info("Tunnel response failed validation", errors=e.error_count())
        raise ProtocolError(MALFORMED_RESPONSE_MESSAGE) from e

    return descriptor


def request_tunnel(request: TunnelRequest, settings: TunnelSettings) -> TunnelDescriptor:
    """Ask the tunnel service for a new tunnel.

    A single attempt is made; failures are reported, not retried.

    Args:
        request: Token, projects and local host from the command line
        settings: Tool settings (api_url and request_timeout are used)

    Returns:
        Parsed tunnel descriptor

    Raises:
        NetworkError: If the service cannot be reached
        ProtocolError: If the response is rejected or malformed
    """
    url = build_request_url(request, settings)
    logger.info(
        "Requesting tunnel",
        api_url=settings.api_url,
        params=sanitize_log_data(request.query_params()),
    )

    try:
        with urlopen(url, timeout=settings.request_timeout) as response:
            body = response.read()
    except (URLError, HTTPException, OSError) as e:
        logger.info("Tunnel request failed", api_url=settings.api_url, error=str(e))
        raise NetworkError(CONNECT_ERROR_MESSAGE) from e

    descriptor = parse_tunnel_response(body)
    logger.info(
        "Tunnel descriptor received",
        host=descriptor.ssh_host,
        user=descriptor.ssh_user,
        ports=len(descriptor.port_mappings),
    )
    return descriptor
