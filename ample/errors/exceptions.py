"""
errors/exceptions.py - Exceptions raised by the library itself

Tree errors never travel by raising; these cover misconfiguration and
retry actions that blew up while a retry cascade was running.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List


class AmpleError(Exception):
    """Base class for library exceptions."""


class ConfigurationError(AmpleError):
    """Invalid configuration value."""


@dataclass
class RetryFailure:
    """A retry action that raised during a retry cascade."""

    tag: str
    error: Any
    exception: BaseException

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "error": str(self.error),
            "exception": repr(self.exception),
        }


class RetryActionError(AmpleError):
    """
    Raised by ErrorNode.retry() once the cascade has finished if any
    retry action raised.

    The tree is already fully retried when this is raised.
    """

    def __init__(self, failures: List[RetryFailure]):
        self.failures = list(failures)
        tags = ", ".join(f.tag for f in self.failures)
        super().__init__(f"{len(self.failures)} retry action(s) failed: {tags}")
