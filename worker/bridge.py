"""
Simulation Bridge
=================

Caller-side front for the physics worker. Falls back to running the
same message handler synchronously when the worker cannot start.
"""

import logging
from typing import Callable, List, Optional, Sequence

from dilation.core.config import SimulationConfig
from dilation.core.satellite import Satellite

from .physics_worker import PhysicsMessageHandler, PhysicsWorker
from .protocol import (
    InitMessage,
    OutboundMessage,
    PauseMessage,
    ResetMessage,
    UpdateMessage,
    UpdateReply,
)

logger = logging.getLogger(__name__)


class SimulationBridge:
    """
    Drives the simulation by messages, threaded or in-context.

    Replies are delivered to registered callbacks; the most recent
    update reply is kept in `latest`.
    """

    def __init__(self,
                 satellites: Sequence[Satellite],
                 config: SimulationConfig = None,
                 use_worker: bool = True,
                 worker_factory: Callable[[SimulationConfig], PhysicsWorker] = PhysicsWorker):
        """
        Initialize bridge and send init.

        Args:
            satellites: Initial satellites (serialized, not shared)
            config: Simulation configuration
            use_worker: Try to run the model on a worker thread
            worker_factory: Worker constructor
        """
        self.config = config or SimulationConfig()
        self.latest: Optional[UpdateReply] = None
        self._callbacks: List[Callable[[OutboundMessage], None]] = []

        self.worker: Optional[PhysicsWorker] = None
        self.handler: Optional[PhysicsMessageHandler] = None

        if use_worker:
            try:
                worker = worker_factory(self.config)
                worker.register_reply_callback(self._on_reply)
                worker.start()
                self.worker = worker
            except Exception:
                logger.warning("Physics worker unavailable, running in-context", exc_info=True)

        if self.worker is None:
            self.handler = PhysicsMessageHandler(self.config)

        self._send(InitMessage(satellites=[s.to_dict() for s in satellites]))

    @property
    def threaded(self) -> bool:
        return self.worker is not None

    def register_callback(self, callback: Callable[[OutboundMessage], None]):
        self._callbacks.append(callback)

    def update(self, now_ms: float, mass: float):
        self._send(UpdateMessage(timestamp=now_ms, mass=mass))

    def set_paused(self, paused: bool):
        self._send(PauseMessage(paused=paused))

    def reset(self):
        self._send(ResetMessage())

    def flush(self):
        """Wait for the worker to drain its queue (no-op in-context)."""
        if self.worker is not None:
            self.worker.wait_idle()

    def close(self):
        if self.worker is not None:
            self.worker.stop()

    def _send(self, message):
        if self.worker is not None:
            self.worker.post_message(message)
            return
        reply = self.handler.process(message)
        if reply is not None:
            self._on_reply(reply)

    def _on_reply(self, reply: OutboundMessage):
        if isinstance(reply, UpdateReply):
            self.latest = reply
        else:
            logger.error("Physics error: %s", reply.message)
        for cb in self._callbacks:
            cb(reply)
