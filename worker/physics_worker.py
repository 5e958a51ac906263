"""
Physics Worker
==============

Runs an OrbitalDilationModel in its own thread. The worker owns the
model exclusively; callers only exchange messages with it.
"""

import logging
import threading
from queue import Empty, Queue
from typing import Callable, List, Optional, Union

from dilation.core.config import SimulationConfig
from dilation.core.model import OrbitalDilationModel
from dilation.core.satellite import Satellite

from .protocol import (
    ErrorReply,
    InboundMessage,
    InitMessage,
    OutboundMessage,
    PauseMessage,
    ResetMessage,
    UpdateMessage,
    UpdateReply,
    decode_message,
)

logger = logging.getLogger(__name__)


class PhysicsMessageHandler:
    """
    Applies inbound messages to a model, one at a time.

    Shared by the threaded worker and the in-context fallback so both
    produce the same results for the same message sequence.
    """

    def __init__(self, config: SimulationConfig = None):
        self.config = config or SimulationConfig()
        self.model: Optional[OrbitalDilationModel] = None

    def handle(self, message: Union[InboundMessage, dict, str]) -> Optional[OutboundMessage]:
        """
        Apply one message.

        Returns:
            UpdateReply for update messages, None otherwise
        """
        if isinstance(message, (dict, str, bytes)):
            message = decode_message(message)

        if isinstance(message, InitMessage):
            satellites = [Satellite.from_dict(s) for s in message.satellites]
            self.model = OrbitalDilationModel(satellites, self.config)
            logger.debug("Worker model initialized with %d satellites", len(satellites))
            return None

        if self.model is None:
            logger.debug("Ignoring %s before init", message.type.value)
            return None

        if isinstance(message, UpdateMessage):
            self.model.update(message.timestamp, message.mass)
            snap = self.model.snapshot().to_payload()
            return UpdateReply(
                positions=snap['positions'],
                rotation=snap['rotation'],
                expansion=snap['expansion'],
                universe_age=snap['universeAge'],
            )

        if isinstance(message, PauseMessage):
            self.model.set_paused(message.paused)
        elif isinstance(message, ResetMessage):
            self.model.reset()
        return None

    def process(self, message: Union[InboundMessage, dict, str]) -> Optional[OutboundMessage]:
        """
        Apply one message, turning a failure into an ErrorReply.

        Returns:
            Reply to deliver, or None
        """
        try:
            return self.handle(message)
        except Exception as e:
            logger.exception("Physics worker error")
            return ErrorReply(message=str(e))


class PhysicsWorker:
    """
    Threaded physics worker.

    Messages are consumed from a FIFO queue by a single thread, so they
    are handled strictly in arrival order.
    """

    def __init__(self, config: SimulationConfig = None):
        """
        Initialize worker.

        Args:
            config: Configuration for the model built on init
        """
        self.handler = PhysicsMessageHandler(config)

        self._reply_callbacks: List[Callable[[OutboundMessage], None]] = []

        self._inbox: Queue = Queue()
        self.outbox: Queue = Queue()
        self._running = False
        self._thread: Optional[threading.Thread] = None

        self.stats = {
            'messages_received': 0,
            'messages_processed': 0,
            'errors': 0,
        }

    @property
    def is_running(self) -> bool:
        return self._running

    def register_reply_callback(self, callback: Callable[[OutboundMessage], None]):
        """Register callback for outbound messages (runs on the worker thread)."""
        self._reply_callbacks.append(callback)

    def start(self):
        """Start the processing thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._process_loop,
                                        name="physics-worker", daemon=True)
        try:
            self._thread.start()
        except RuntimeError:
            self._running = False
            self._thread = None
            raise
        logger.info("Physics worker started")

    def stop(self, timeout: float = 1.0):
        """Stop after the queued messages have been handled."""
        if not self._running:
            return
        self._inbox.join()
        self._running = False
        if self._thread:
            self._thread.join(timeout=timeout)
        self._thread = None
        logger.info("Physics worker stopped")

    def post_message(self, message: Union[InboundMessage, dict, str]):
        """Queue a message for the worker."""
        self.stats['messages_received'] += 1
        self._inbox.put(message)

    def wait_idle(self):
        """Block until every posted message has been handled."""
        self._inbox.join()

    def _process_loop(self):
        while self._running:
            try:
                message = self._inbox.get(timeout=0.1)
            except Empty:
                continue
            try:
                self._process(message)
            finally:
                self._inbox.task_done()

    def _process(self, message):
        reply = self.handler.process(message)
        if isinstance(reply, ErrorReply):
            self.stats['errors'] += 1
        else:
            self.stats['messages_processed'] += 1

        if reply is not None:
            self._emit(reply)

    def _emit(self, reply: OutboundMessage):
        self.outbox.put(reply)
        for cb in self._reply_callbacks:
            try:
                cb(reply)
            except Exception:
                logger.exception("Reply callback failed")

    def __enter__(self) -> 'PhysicsWorker':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
