"""Control channel between a host and a background optimization engine."""

import logging
import queue
import threading
from typing import List, Optional

from ..logger import JSONLogger
from ..models.messages import Notification, StartCommand
from .config import GeneticConfig
from .engine import NotificationSink, OptimizationEngine

logger = logging.getLogger(__name__)

_STOP = object()


class QueueSink:
    """Notification sink that collects notifications into a queue."""

    def __init__(self):
        self.queue: "queue.Queue[Notification]" = queue.Queue()

    def __call__(self, notification: Notification) -> None:
        self.queue.put(notification)

    def get(self, timeout: Optional[float] = None) -> Notification:
        """Next notification (blocks up to timeout, raises queue.Empty)."""
        return self.queue.get(timeout=timeout)

    def drain(self) -> List[Notification]:
        """Every notification received so far, oldest first."""
        notifications = []
        while True:
            try:
                notifications.append(self.queue.get_nowait())
            except queue.Empty:
                return notifications


class OptimizationWorker(threading.Thread):
    """Daemon thread that owns an engine and executes start commands.

    Commands go to the engine's queue. While a run is in progress the engine
    consumes them at its per-generation checkpoint; while idle the worker
    consumes them and ignores everything except start.
    """

    def __init__(
        self,
        sink: NotificationSink,
        ga_config: Optional[GeneticConfig] = None,
        history_logger: Optional[JSONLogger] = None,
    ):
        super().__init__(name="optimization-worker", daemon=True)
        self.engine = OptimizationEngine(sink, ga_config, history_logger=history_logger)

    def submit(self, command) -> None:
        """Queue a command for the engine."""
        self.engine.commands.put(command)

    def start_optimization(self, command: StartCommand) -> None:
        self.submit(command)

    def pause(self) -> None:
        self.engine.pause()

    def resume(self) -> None:
        self.engine.resume()

    def cancel(self) -> None:
        self.engine.cancel()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Cancel any run in progress and end the thread."""
        self.engine.cancel()
        self.engine.commands.put(_STOP)
        if self.is_alive():
            self.join(timeout)

    def run(self) -> None:
        logger.info("Optimization worker started")
        while True:
            command = self.engine.commands.get()
            if command is _STOP:
                break
            if isinstance(command, StartCommand):
                self.engine.run(command)
            else:
                logger.debug(f"Ignoring {type(command).__name__}: no run in progress")
        logger.info("Optimization worker stopped")
