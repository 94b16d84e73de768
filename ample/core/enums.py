"""
ample Core Enumerations

Behaviors configured on each error node at creation time.
"""

from enum import Enum


class PresentationBehavior(str, Enum):
    """
    Whether a node's error display may be hidden by aggregation.
    """
    ACCEPTS_SUPPRESSION = "accepts_suppression"  # May be folded into the parent's error
    PREFERS_DISPLAY = "prefers_display"          # Always shown; vetoes aggregation for its siblings


class RetryBehavior(str, Enum):
    """
    Starting point of a retry issued on a node.

    ANCESTOR -> the parent decides (walks up to the root)
    DESCENDANTS -> this node and its subtree
    SIBLINGS -> every child of the parent and their subtrees
    """
    ANCESTOR = "ancestor"
    DESCENDANTS = "descendants"
    SIBLINGS = "siblings"
