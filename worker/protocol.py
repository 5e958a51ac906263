"""
Worker Message Protocol
=======================

Tagged-union messages exchanged with the physics worker.

Inbound:  {"type": "init"|"update"|"pause"|"reset", "payload": ...}
Outbound: {"type": "update"|"error", "payload": ...}
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union


class MessageType(str, Enum):
    """Message tags."""
    INIT = 'init'
    UPDATE = 'update'
    PAUSE = 'pause'
    RESET = 'reset'
    ERROR = 'error'


class ProtocolError(ValueError):
    """Malformed message."""


@dataclass
class InitMessage:
    """Seed the worker's model from serialized satellites."""
    satellites: List[dict] = field(default_factory=list)
    type: MessageType = field(default=MessageType.INIT, init=False)

    def payload(self) -> dict:
        return {'satellites': self.satellites}


@dataclass
class UpdateMessage:
    """Advance the worker's model to a wall-clock timestamp."""
    timestamp: float
    mass: float
    type: MessageType = field(default=MessageType.UPDATE, init=False)

    def payload(self) -> dict:
        return {'timestamp': self.timestamp, 'mass': self.mass}


@dataclass
class PauseMessage:
    """Pause or resume."""
    paused: bool
    type: MessageType = field(default=MessageType.PAUSE, init=False)

    def payload(self) -> dict:
        return {'paused': self.paused}


@dataclass
class ResetMessage:
    """Return to time zero."""
    type: MessageType = field(default=MessageType.RESET, init=False)

    def payload(self) -> dict:
        return {}


@dataclass
class UpdateReply:
    """State snapshot sent after every update message."""
    positions: List[dict]
    rotation: float
    expansion: float
    universe_age: float
    type: MessageType = field(default=MessageType.UPDATE, init=False)

    def payload(self) -> dict:
        return {
            'positions': self.positions,
            'rotation': self.rotation,
            'expansion': self.expansion,
            'universeAge': self.universe_age,
        }


@dataclass
class ErrorReply:
    """Failure inside the worker."""
    message: str
    type: MessageType = field(default=MessageType.ERROR, init=False)

    def payload(self) -> dict:
        return {'message': self.message}


InboundMessage = Union[InitMessage, UpdateMessage, PauseMessage, ResetMessage]
OutboundMessage = Union[UpdateReply, ErrorReply]


def encode_message(message) -> dict:
    """Convert a message object to its wire dict."""
    return {'type': message.type.value, 'payload': message.payload()}


def to_json(message) -> str:
    return json.dumps(encode_message(message))


def decode_message(data: Union[dict, str, bytes]) -> InboundMessage:
    """
    Decode and validate an inbound message.

    Args:
        data: Wire dict or its JSON text

    Returns:
        Typed inbound message

    Raises:
        ProtocolError: Unknown type or malformed payload
    """
    msg_type, payload = _split(data)

    if msg_type == MessageType.INIT:
        return InitMessage(satellites=_decode_satellites(payload))
    if msg_type == MessageType.UPDATE:
        return UpdateMessage(
            timestamp=_number(payload, 'timestamp'),
            mass=_number(payload, 'mass'),
        )
    if msg_type == MessageType.PAUSE:
        paused = payload.get('paused')
        if not isinstance(paused, bool):
            raise ProtocolError("pause payload needs boolean 'paused'")
        return PauseMessage(paused=paused)
    if msg_type == MessageType.RESET:
        return ResetMessage()

    raise ProtocolError(f"{msg_type.value} is not an inbound message")


def decode_reply(data: Union[dict, str, bytes]) -> OutboundMessage:
    """
    Decode and validate an outbound message (used by the caller side).

    Raises:
        ProtocolError: Unknown type or malformed payload
    """
    msg_type, payload = _split(data)

    if msg_type == MessageType.UPDATE:
        positions = payload.get('positions')
        if not isinstance(positions, list):
            raise ProtocolError("update reply needs a 'positions' list")
        for i, pos in enumerate(positions):
            if not isinstance(pos, dict):
                raise ProtocolError(f"position {i} must be an object")
            for axis in ('x', 'y', 'z'):
                _number(pos, axis)
        return UpdateReply(
            positions=list(positions),
            rotation=_number(payload, 'rotation'),
            expansion=_number(payload, 'expansion'),
            universe_age=_number(payload, 'universeAge'),
        )
    if msg_type == MessageType.ERROR:
        message = payload.get('message')
        if not isinstance(message, str):
            raise ProtocolError("error reply needs a string 'message'")
        return ErrorReply(message=message)

    raise ProtocolError(f"{msg_type.value} is not an outbound message")


def _number(payload: dict, key: str) -> float:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProtocolError(f"'{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ProtocolError(f"'{key}' must be finite")
    return float(value)


def _decode_satellites(payload: dict) -> List[dict]:
    satellites = payload.get('satellites')
    if not isinstance(satellites, list):
        raise ProtocolError("init payload needs a 'satellites' list")

    decoded = []
    for i, sat in enumerate(satellites):
        pos = sat.get('position') if isinstance(sat, dict) else None
        if not isinstance(pos, dict):
            raise ProtocolError(f"satellite {i} has no position object")
        decoded.append({'position': {axis: _number(pos, axis) for axis in ('x', 'y', 'z')}})
    return decoded


def _split(data: Union[dict, str, bytes]):
    """Parse the envelope into (type, payload dict)."""
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ProtocolError(f"message must be an object, got {type(data).__name__}")

    try:
        msg_type = MessageType(data.get('type'))
    except ValueError:
        raise ProtocolError(f"unknown message type {data.get('type')!r}") from None

    payload = data.get('payload')
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ProtocolError(f"{msg_type.value} payload must be an object")
    return msg_type, payload
