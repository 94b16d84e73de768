"""
ample Core Module

Contains the error tree:
- Behaviors (PresentationBehavior, RetryBehavior)
- ErrorNode (tree ops, error intake, suppression, retry)
"""

from ample.core.enums import (
    PresentationBehavior,
    RetryBehavior,
)

from ample.core.node import ErrorNode

__all__ = [
    "PresentationBehavior",
    "RetryBehavior",
    "ErrorNode",
]
