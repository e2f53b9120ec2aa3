from __future__ import annotations

__all__ = ["SocketAddress", "RawAddress", "ErrorKind", "SocketAddressError",
            "InvalidIPError", "InvalidPortError", "PORT_RANGE", "IP", "IPv4",
            "IPv6", "ntoa", "Option", "merge_options", "Packet", "StrictPacket",
            "PacketMalformedError", "PROTOCOLS", "DEFAULT_PROTOCOL"]

from .address import (PORT_RANGE, ErrorKind, InvalidIPError, InvalidPortError,
                      RawAddress, SocketAddress, SocketAddressError)
from .ip import IP, IPv4, IPv6, ntoa
from .options import Option, merge_options
from .packet import (DEFAULT_PROTOCOL, PROTOCOLS, Packet, PacketMalformedError,
                     StrictPacket)
