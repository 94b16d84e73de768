"""
ui/ - Host-facing seams

Change notification for host UI code and serializable tree snapshots.
"""

from .signal import (
    ChangeHandler,
    Scheduler,
    ChangeSignal,
    QueueScheduler,
    asyncio_scheduler,
)

from .snapshot import (
    ErrorSnapshot,
    NodeSnapshot,
)

__all__ = [
    # Signal
    "ChangeHandler",
    "Scheduler",
    "ChangeSignal",
    "QueueScheduler",
    "asyncio_scheduler",
    # Snapshot
    "ErrorSnapshot",
    "NodeSnapshot",
]
