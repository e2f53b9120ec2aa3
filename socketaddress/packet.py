from __future__ import annotations

__all__ = ["Packet", "StrictPacket", "PacketMalformedError", "PROTOCOLS",
           "DEFAULT_PROTOCOL", "encode", "decode"]

import json
from typing import Callable, Union

import msgpack # type: ignore

SerialisableElement = Union[None, bool, int, float, str, list, dict]

StrictPacket = dict[str, SerialisableElement]
Packet = Union[StrictPacket, None]

class PacketMalformedError(Exception):
    pass

def malformed_packet_wrap(function: Callable) -> Callable:
    def value_error_catch(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except (ValueError, TypeError) as e:
            raise PacketMalformedError(f"Packet was malformed ({e})") from None
    return value_error_catch

def _json_dumps(packet: StrictPacket) -> bytes:
    return json.dumps(packet).encode("utf-8")

# name -> (encode, decode)
PROTOCOLS: dict[str, tuple[Callable[[StrictPacket], bytes], Callable[[bytes], Packet]]] = {
    "msgpack": (malformed_packet_wrap(msgpack.packb), malformed_packet_wrap(msgpack.unpackb)),
    "json": (malformed_packet_wrap(_json_dumps), malformed_packet_wrap(json.loads)),
}

DEFAULT_PROTOCOL: str = "msgpack"

def _protocol(protocol_name: str) -> tuple[Callable, Callable]:
    try:
        return PROTOCOLS[protocol_name.lower()]
    except KeyError:
        raise KeyError(f"Protocol {protocol_name} is not defined") from None

def encode(packet: StrictPacket, protocol: str=DEFAULT_PROTOCOL) -> bytes:
    """Serialise packet to bytes with the named protocol

    Raises:
        PacketMalformedError:
            when a value of packet cannot be serialised
        KeyError:
            when protocol is not in PROTOCOLS
    """
    encoder, _ = _protocol(protocol)
    return encoder(packet)

def decode(data: bytes, protocol: str=DEFAULT_PROTOCOL) -> StrictPacket:
    """Deserialise bytes made by encode. Sequences come back as lists

    Raises:
        PacketMalformedError:
            when data cannot be decoded or does not hold a dict
        KeyError:
            when protocol is not in PROTOCOLS
    """
    _, decoder = _protocol(protocol)
    packet = decoder(data)
    if not isinstance(packet, dict):
        raise PacketMalformedError(f"Packet {packet!r} is not a dict")
    return packet
