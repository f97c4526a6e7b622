"""
Endpoint resolution and tagging: address strings -> EndpointDescriptor -> TagSet.
"""
from __future__ import annotations

from typing import Callable
from urllib.parse import urlsplit

from errors import ResolutionError
from models import EndpointDescriptor, TagSet, default_port
from utils import UNKNOWN_HOST, get_logger, local_hostname

logger = get_logger(__name__)

HostnameProvider = Callable[[], str]


def resolve(address: str) -> EndpointDescriptor:
    """Parse "scheme://host[:port]" into an endpoint. Raises ResolutionError."""
    if not isinstance(address, str) or not address.strip():
        raise ResolutionError(str(address), "empty address")
    try:
        parts = urlsplit(address.strip())
        port = parts.port
    except ValueError as e:
        raise ResolutionError(address, e) from e
    if not parts.scheme:
        raise ResolutionError(address, "missing scheme")
    if not parts.hostname:
        raise ResolutionError(address, "missing host")
    scheme = parts.scheme.lower()
    return EndpointDescriptor(
        scheme=scheme,
        host=parts.hostname,
        port=str(port) if port is not None else default_port(scheme),
        address=address,
    )


def build_tags(endpoint: EndpointDescriptor, hostname_provider: HostnameProvider = local_hostname) -> TagSet:
    """Tags attached to every sample from endpoint: reporting host and queried port."""
    port = endpoint.port or default_port(endpoint.scheme)
    try:
        host = hostname_provider()
    except Exception as e:
        logger.debug("Hostname lookup failed, using %r: %s", UNKNOWN_HOST, e)
        host = ""
    return {"host": host or UNKNOWN_HOST, "port": port}
