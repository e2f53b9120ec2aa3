from __future__ import annotations

__all__ = ["IP", "IPv4", "IPv6", "parse_address", "from_tuple", "ntoa"]

import ipaddress
import struct
from typing import NamedTuple, Union


class IPv4(NamedTuple):
    """IPv4 address as four octets"""

    a: int
    b: int
    c: int
    d: int

    @property
    def version(self) -> int:
        return 4


class IPv6(NamedTuple):
    """IPv6 address as eight 16 bit groups"""

    a: int
    b: int
    c: int
    d: int
    e: int
    f: int
    g: int
    h: int

    @property
    def version(self) -> int:
        return 6


IP = Union[IPv4, IPv6]

_FAMILIES: dict[int, tuple[type, int]] = {
    4: (IPv4, 0xFF),
    6: (IPv6, 0xFFFF),
}

_VERSION_BY_ARITY: dict[int, int] = {4: 4, 8: 6}

_IPV4_MAPPED_PREFIX = (0, 0, 0, 0, 0, 0xFFFF)
_IPV4_COMPATIBLE_PREFIX = (0, 0, 0, 0, 0, 0)


def parse_address(text: str | bytes) -> IP:
    """Parse dotted-decimal or colon-hex text into an IPv4 or IPv6 value.

    Raises:
        ValueError:
            when text is not a valid IPv4 or IPv6 address
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError:
            raise ValueError(f"{text!r} is not an IP address") from None
    if not isinstance(text, str):
        raise ValueError(f"{text!r} is not an IP address")
    # zone ids cannot be carried by the tuple form
    if "%" in text:
        raise ValueError(f"{text!r} has a scope id")

    if ":" in text:
        packed = ipaddress.IPv6Address(text).packed
        return IPv6(*struct.unpack("!8H", packed))
    packed = ipaddress.IPv4Address(text).packed
    return IPv4(*packed)


def from_tuple(value: tuple) -> IP:
    """Validate a structured tuple and return it as an IPv4 or IPv6 value.

    The tuple is range checked, rendered to text and parsed back, and the
    parsed value has to match the tuple it came from.

    Raises:
        ValueError:
            when the tuple is not a valid address
    """
    version = _VERSION_BY_ARITY.get(len(value))
    if version is None:
        raise ValueError(f"{value!r} has arity {len(value)}, expected 4 or 8")
    family, limit = _FAMILIES[version]
    for element in value:
        if isinstance(element, bool) or not isinstance(element, int):
            raise ValueError(f"{value!r} contains non integer {element!r}")
        if not 0 <= element <= limit:
            raise ValueError(f"{value!r} contains out of range {element!r}")

    ip = family(*value)
    if parse_address(ntoa(ip)) != ip:
        raise ValueError(f"{value!r} does not survive a text round trip")
    return ip


def ntoa(ip: IP) -> str:
    """Render an IP value in its canonical text form (no port, no brackets).

    IPv6 is upper case with the longest run of zero groups compressed.
    IPv4-mapped and IPv4-compatible addresses keep a dotted-decimal tail.
    """
    if len(ip) == 4:
        return ".".join(str(octet) for octet in ip)
    if tuple(ip[:6]) == _IPV4_MAPPED_PREFIX:
        return "::FFFF:" + _dotted_tail(ip)
    # ::, ::1 and ::ABCD stay in hex
    if tuple(ip[:6]) == _IPV4_COMPATIBLE_PREFIX and ip[6] != 0:
        return "::" + _dotted_tail(ip)
    return ipaddress.IPv6Address(struct.pack("!8H", *ip)).compressed.upper()


def _dotted_tail(ip: IPv6) -> str:
    return ".".join(str(octet) for octet in struct.pack("!2H", ip[6], ip[7]))
