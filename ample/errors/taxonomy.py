"""
errors/taxonomy.py - Error values held by error nodes

Defines the retryable wrapper handed to nodes by calling code, the
synthetic aggregate marker created by the tree itself, and the tagged
entry a node stores for each received error.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict


RetryAction = Callable[[], None]


class ErrorKind(str, Enum):
    """Classification of a held error, decided once when a node receives it."""
    PLAIN = "plain"
    RETRYABLE = "retryable"
    AGGREGATE = "aggregate"  # Synthetic "multiple children failed" marker


def describe(error: Any) -> str:
    """
    User-facing description of an error value.

    Nodes compare errors by this text when removing them.
    """
    text = str(error)
    if not text:
        return type(error).__name__
    return text


class RetryableError(Exception):
    """
    An error paired with the action that retries the failed operation.

    Usage:
        node.receive(RetryableError(ConnectionError("offline"), reload_feed))
    """

    def __init__(self, underlying: Any, retry_action: RetryAction):
        super().__init__(underlying)
        self.underlying = underlying
        self.retry_action = retry_action

    @property
    def description(self) -> str:
        return describe(self.underlying)

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"RetryableError({self.underlying!r})"


class ParentError(Exception):
    """
    Marker placed on a node when several of its children fail at once.

    Internal: only the tree creates it. Import it from ample.errors.taxonomy
    for isinstance checks; application code must not receive() it.
    """

    MESSAGE = "Multiple sections failed to load."

    def __str__(self) -> str:
        return self.MESSAGE


@dataclass(frozen=True)
class ErrorEntry:
    """A held error together with its classification."""

    error: Any
    kind: ErrorKind = ErrorKind.PLAIN

    @classmethod
    def wrap(cls, error: Any) -> "ErrorEntry":
        if isinstance(error, ParentError):
            return cls(error=error, kind=ErrorKind.AGGREGATE)
        if isinstance(error, RetryableError):
            return cls(error=error, kind=ErrorKind.RETRYABLE)
        return cls(error=error, kind=ErrorKind.PLAIN)

    @property
    def description(self) -> str:
        return describe(self.error)

    @property
    def is_retryable(self) -> bool:
        """Retryable wrappers and aggregate markers both count as retryable."""
        return self.kind in (ErrorKind.RETRYABLE, ErrorKind.AGGREGATE)

    def run_retry_action(self) -> None:
        """Invoke the wrapped retry action; no-op for other kinds."""
        if self.kind is ErrorKind.RETRYABLE:
            self.error.retry_action()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "kind": self.kind.value,
        }
