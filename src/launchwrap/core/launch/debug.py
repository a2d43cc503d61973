"""
JDWP debug-parameter parsing.

Handles the parameter part of ``-agentlib:jdwp=...`` and ``-Xrunjdwp:...``,
e.g. ``transport=dt_socket,server=y,suspend=n,address=localhost:5005``.
"""

from __future__ import annotations

from launchwrap.core.config.models import DebugSettings
from launchwrap.core.errors import InvalidDebugAddressError, UnsupportedDebugTransportError

JDWP_AGENT = "-agentlib:jdwp="
JDWP_RUN = "-Xrunjdwp:"
SOCKET_TRANSPORT = "dt_socket"


def parse_jdwp_bool(value: str) -> bool:
    """
    Parse a JDWP boolean option.

    ``y``/``n`` are the JDWP spelling; anything else is true only when it
    reads ``true`` (case-insensitive).
    """
    if value == "y":
        return True
    if value == "n":
        return False
    return value.lower() == "true"


def _parse_address(address: str, settings: DebugSettings) -> None:
    parts = address.split(":")
    try:
        if len(parts) == 1:
            settings.port = int(address)
        else:
            settings.host = parts[0]
            settings.port = int(parts[1])
    except ValueError as e:
        raise InvalidDebugAddressError(address) from e


def parse_debug_spec(
    raw: str,
    params: str,
    settings: DebugSettings | None = None,
) -> DebugSettings:
    """
    Parse JDWP agent parameters into debug settings.

    Args:
        raw: The complete original flag, kept verbatim for re-injection
        params: The ``key=value,...`` part after the agent prefix
        settings: Settings to update in place (a fresh object if None)

    Returns:
        The updated DebugSettings, always with ``enabled`` set

    Raises:
        UnsupportedDebugTransportError: transport is not dt_socket
        InvalidDebugAddressError: the port is not a number

    Example:
        >>> s = parse_debug_spec("-agentlib:jdwp=address=5005", "address=5005")
        >>> (s.enabled, s.host, s.port)
        (True, None, 5005)
    """
    if settings is None:
        settings = DebugSettings()
    settings.enabled = True
    settings.jdwp_raw = raw

    for item in params.split(","):
        key, sep, value = item.partition("=")
        if not sep:
            continue
        if key == "address":
            _parse_address(value, settings)
        elif key == "server":
            settings.server = parse_jdwp_bool(value)
        elif key == "suspend":
            settings.suspend = parse_jdwp_bool(value)
        elif key == "transport" and value != SOCKET_TRANSPORT:
            raise UnsupportedDebugTransportError(value)

    return settings


__all__ = [
    "JDWP_AGENT",
    "JDWP_RUN",
    "SOCKET_TRANSPORT",
    "parse_debug_spec",
    "parse_jdwp_bool",
]
