"""
ample ChangeSignal

Per-node "state changed" notification port.

Each ErrorNode owns a ChangeSignal and emits it after every mutation
(receive, remove, remove_all_errors, suppress, unsuppress). No payload is
passed: subscribers re-read the node's errors and presentation flag.

Delivery is synchronous by default. A scheduler defers delivery onto
another context (an asyncio loop, a UI main queue); deferred deliveries
keep only a weak reference to the signal and are skipped once it is gone.
"""

from typing import Any, Callable, List, Optional
import asyncio
import logging
import weakref


logger = logging.getLogger("ui.signal")


# Type alias for change handlers
ChangeHandler = Callable[[], None]

# Receives a zero-argument delivery callback and runs it later
Scheduler = Callable[[Callable[[], None]], Any]


class QueueScheduler:
    """
    Buffers deliveries until drain() is called.

    Usage:
        scheduler = QueueScheduler()
        root = ErrorNode.root(scheduler=scheduler)
        root.receive(error)   # nothing delivered yet
        scheduler.drain()     # handlers run here
    """

    def __init__(self):
        self._pending: List[Callable[[], None]] = []

    def __call__(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def drain(self) -> int:
        """Run queued deliveries in order, including ones queued meanwhile."""
        count = 0
        while self._pending:
            callback = self._pending.pop(0)
            callback()
            count += 1
        return count

    def clear(self) -> None:
        self._pending.clear()


def asyncio_scheduler(loop: Optional[asyncio.AbstractEventLoop] = None) -> Scheduler:
    """
    Scheduler posting deliveries onto an asyncio event loop.

    Safe to call from other threads; the loop runs the handlers.
    """
    if loop is None:
        loop = asyncio.get_running_loop()

    def schedule(callback: Callable[[], None]) -> None:
        loop.call_soon_threadsafe(callback)

    return schedule


def _deliver_deferred(ref: "weakref.ReferenceType[ChangeSignal]") -> None:
    signal = ref()
    if signal is None:
        return
    signal._dispatch()


class ChangeSignal:
    """
    Instance-scoped change notification.

    Features:
    - Zero-argument handlers, delivered in subscription order
    - Handler failures are logged, never raised
    - Optional scheduler for deferred delivery
    - Pause/resume (emissions while paused are dropped)
    """

    def __init__(
        self,
        source: str = "",
        scheduler: Optional[Scheduler] = None,
        paused: bool = False,
    ):
        """
        Initialize the signal.

        Args:
            source: Owner identifier (the node tag) used in log messages
            scheduler: Deferred delivery; None delivers synchronously
            paused: Start paused
        """
        self._source = source
        self._scheduler = scheduler
        self._handlers: List[ChangeHandler] = []
        self._subscription_counter = 0
        self._emit_count = 0
        self._paused = paused

    @property
    def source(self) -> str:
        return self._source

    @property
    def scheduler(self) -> Optional[Scheduler]:
        return self._scheduler

    def subscribe(self, handler: ChangeHandler) -> str:
        """
        Subscribe to change notifications.

        Args:
            handler: Callback function() -> None

        Returns:
            Subscription ID, or "" if the handler was already subscribed
        """
        if handler in self._handlers:
            return ""

        self._handlers.append(handler)
        self._subscription_counter += 1
        sub_id = f"sub_{self._subscription_counter}"
        logger.debug(f"Subscribed {sub_id} to {self._source}")
        return sub_id

    def unsubscribe(self, handler: ChangeHandler) -> bool:
        """
        Unsubscribe a handler.

        Returns:
            True if handler was removed
        """
        try:
            self._handlers.remove(handler)
            logger.debug(f"Unsubscribed handler from {self._source}")
            return True
        except ValueError:
            return False

    def emit(self) -> None:
        """Announce that the owner's observable state changed."""
        if self._paused:
            logger.debug(f"Signal paused, dropping change from {self._source}")
            return

        self._emit_count += 1

        if self._scheduler is None:
            self._dispatch()
            return

        ref = weakref.ref(self)
        self._scheduler(lambda: _deliver_deferred(ref))

    def _dispatch(self) -> None:
        for handler in list(self._handlers):
            try:
                handler()
            except Exception as e:
                logger.error(f"Change handler failed for {self._source}: {e}")

    def pause(self) -> None:
        """Pause emission (changes are dropped)."""
        self._paused = True

    def resume(self) -> None:
        """Resume emission."""
        self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    def clear_handlers(self) -> None:
        self._handlers.clear()

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    @property
    def emit_count(self) -> int:
        """Number of emissions accepted (not dropped while paused)."""
        return self._emit_count
