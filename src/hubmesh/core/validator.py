from __future__ import annotations

import logging
import socket
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_PORTS = (80, 8081)
DEFAULT_PROBE_TIMEOUT = 0.75

Probe = Callable[[str, int, float], bool]


def parse_address(candidate: str) -> str | None:
    """Return the canonical dotted-decimal form of an IPv4 address, or None."""
    segments = candidate.strip().split(".")
    if len(segments) != 4:
        return None

    octets: list[int] = []
    for segment in segments:
        if not segment or not (segment.isascii() and segment.isdigit()):
            return None
        value = int(segment)
        if value > 255:
            return None
        octets.append(value)

    return ".".join(str(octet) for octet in octets)


def probe_port(address: str, port: int, timeout: float) -> bool:
    try:
        with socket.create_connection((address, port), timeout=timeout):
            return True
    except OSError as exc:
        logger.debug("Port %d on %s not reachable: %s", port, address, exc)
        return False


def validate(
    candidate: str,
    ports: Iterable[int] = DEFAULT_PORTS,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    probe: Probe = probe_port,
) -> str | None:
    """Canonicalize ``candidate`` and confirm a hub answers on every port.

    Returns the canonical address, or None when the address is malformed or
    any port refuses the connection within ``timeout`` seconds.
    """
    address = parse_address(candidate)
    if address is None:
        logger.debug("Rejected malformed address %r", candidate)
        return None

    for port in ports:
        if not probe(address, port, timeout):
            return None
    return address


def parse_address_list(text: str) -> list[str]:
    """Parse a newline-delimited address list; ``#`` starts a comment."""
    addresses: list[str] = []
    for line in text.splitlines():
        entry = line.split("#", 1)[0].strip()
        if entry:
            addresses.append(entry)
    return addresses
