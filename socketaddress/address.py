from __future__ import annotations

__all__ = ["SocketAddress", "RawAddress", "ErrorKind", "SocketAddressError",
           "InvalidIPError", "InvalidPortError", "PORT_RANGE"]

import ipaddress
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union, cast

from .ip import IP, from_tuple, ntoa, parse_address
from .options import Option, Options, merge_options
from .packet import DEFAULT_PROTOCOL, PacketMalformedError, StrictPacket, decode, encode

RawAddress = tuple[str, int]
IPInput = Union[str, bytes, tuple, ipaddress.IPv4Address, ipaddress.IPv6Address]

PORT_RANGE = range(0, 65_536)


class ErrorKind(Enum):
    INVALID_IP = "invalid_ip"
    INVALID_PORT = "invalid_port"


class SocketAddressError(ValueError):

    """Raised when a socket address cannot be built. kind tells which
    half of the address was rejected
    """

    kind: ErrorKind

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"{self.kind.value}: {value!r}")

class InvalidIPError(SocketAddressError):
    kind = ErrorKind.INVALID_IP

class InvalidPortError(SocketAddressError):
    kind = ErrorKind.INVALID_PORT


@dataclass(frozen=True)
class SocketAddress:

    """Validated Internet socket address, an IP address paired with a port.

    The ip is given as text ("127.0.0.1", "fe80::204:acff:fe17:bf38"), as
    ASCII bytes, as a tuple of 4 or 8 integers, or as an ipaddress object.
    It is always stored as an IPv4 or IPv6 tuple.

    Usage:
        addr = SocketAddress.new("127.0.0.1", 80)
        str(addr)           // "127.0.0.1:80"
        addr.to_options()   // [("ip", (127, 0, 0, 1)), ("port", 80)]
        sock.bind(addr.astuple())

    Raises:
        InvalidIPError:
            when ip is not an IPv4 or IPv6 address (checked first)
        InvalidPortError:
            when port is not an integer in 0..65535
    """

    ip: IP
    port: int

    def __post_init__(self):
        object.__setattr__(self, "ip", _parse_ip(self.ip))
        if not _valid_port(self.port):
            raise InvalidPortError(self.port)

    @classmethod
    def new(cls, ip: IPInput, port: int) -> SocketAddress:
        return cls(cast(IP, ip), port)

    @classmethod
    def from_packet(cls, packet: StrictPacket) -> tuple[SocketAddress, list[Option]]:
        """Build a SocketAddress from a configuration packet and return it
        with the packet's remaining options. Option values are returned as
        found in the packet, so a tuple given to dumps comes back from
        loads as a list

        Raises:
            PacketMalformedError:
                when packet is not a dict or has no "ip" or "port"
        """
        if not isinstance(packet, dict):
            raise PacketMalformedError(f"Packet {packet!r} is not a dict")
        try:
            address = cls.new(cast(IPInput, packet["ip"]), cast(int, packet["port"]))
        except KeyError as e:
            raise PacketMalformedError(f"Packet {packet!r} is missing key {e}") from None
        rest = [(key, value) for key, value in packet.items() if key not in ("ip", "port")]
        return address, rest

    @classmethod
    def loads(cls, data: bytes, protocol: str=DEFAULT_PROTOCOL) -> tuple[SocketAddress, list[Option]]:
        """Deserialise a configuration packet made by dumps. Tuple option
        values come back as lists

        Raises:
            PacketMalformedError:
                when data cannot be decoded or is not an address packet
            InvalidIPError, InvalidPortError:
                when the packet holds an invalid address
        """
        return cls.from_packet(decode(data, protocol))

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}<{self}>"

    def to_text(self) -> str:
        if self.version == 6:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def to_options(self, extra_options: Options=()) -> list[Option]:
        """Return [("ip", ip), ("port", port)] merged with extra_options.
        Keys of extra_options override existing keys in place and new
        keys are appended in the order given
        """
        return merge_options([("ip", self.ip), ("port", self.port)], extra_options)

    def to_packet(self, extra_options: Options=()) -> StrictPacket:
        """Return the option list as a serialisable packet, with the ip
        as host text. An "ip" or "port" given in extra_options is validated
        the same way as by new

        Raises:
            InvalidIPError, InvalidPortError:
                when extra_options overrides the ip or port with an invalid value
        """
        options = dict(self.to_options(extra_options))
        address = self.new(cast(IPInput, options["ip"]), options["port"])
        options.update(ip=address.host, port=address.port)
        return options

    def dumps(self, extra_options: Options=(), protocol: str=DEFAULT_PROTOCOL) -> bytes:
        """Serialise to_packet(extra_options) with the named protocol

        Raises:
            PacketMalformedError:
                when an option value cannot be serialised by the protocol
        """
        return encode(self.to_packet(extra_options), protocol)

    def astuple(self) -> RawAddress:
        """Return the (host, port) pair accepted by socket.bind"""
        return (self.host, self.port)

    @property
    def host(self) -> str:
        return ntoa(self.ip)

    @property
    def version(self) -> int:
        return self.ip.version

    @property
    def family(self) -> socket.AddressFamily:
        return socket.AF_INET6 if self.version == 6 else socket.AF_INET

    @property
    def ip_address(self) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
        return ipaddress.ip_address(self.host)


def _parse_ip(ip: Any) -> IP:
    try:
        if isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return parse_address(str(ip))
        if isinstance(ip, (str, bytes)):
            return parse_address(ip)
        if isinstance(ip, tuple):
            return from_tuple(ip)
    except ValueError:
        raise InvalidIPError(ip) from None
    raise InvalidIPError(ip)

def _valid_port(port: Any) -> bool:
    return isinstance(port, int) and not isinstance(port, bool) and port in PORT_RANGE
