"""
Physics Worker Package
======================

Message-passing execution of the dilation model on its own thread.
"""

from .bridge import SimulationBridge
from .physics_worker import PhysicsMessageHandler, PhysicsWorker
from .protocol import ProtocolError, decode_message, encode_message

__all__ = [
    'SimulationBridge',
    'PhysicsMessageHandler',
    'PhysicsWorker',
    'ProtocolError',
    'decode_message',
    'encode_message',
]
