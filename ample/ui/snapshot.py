"""
ui/snapshot.py - Serializable view of an error tree

Diagnostics only: snapshots are read-only copies and cannot be turned
back into nodes.
"""

from typing import List, Optional, TYPE_CHECKING

from pydantic import BaseModel, Field

from ample.core.enums import PresentationBehavior, RetryBehavior
from ample.errors.taxonomy import ErrorKind

if TYPE_CHECKING:
    from ample.core.node import ErrorNode


class ErrorSnapshot(BaseModel):
    """A held error."""

    description: str = Field(..., description="User-facing error text")
    kind: ErrorKind = Field(default=ErrorKind.PLAIN, description="Classification at intake")


class NodeSnapshot(BaseModel):
    """State of one node and its subtree."""

    tag: str
    presentation_behavior: PresentationBehavior
    retry_behavior: RetryBehavior
    errors: List[ErrorSnapshot] = Field(default_factory=list)
    presentation_suppressed: bool = False
    show_error: bool = False
    children: List["NodeSnapshot"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: "ErrorNode") -> "NodeSnapshot":
        return cls(
            tag=node.tag,
            presentation_behavior=node.presentation_behavior,
            retry_behavior=node.retry_behavior,
            errors=[
                ErrorSnapshot(description=entry.description, kind=entry.kind)
                for entry in node.entries
            ],
            presentation_suppressed=node.presentation_suppressed,
            show_error=node.show_error,
            children=[cls.from_node(child) for child in node.children],
        )

    def find(self, tag: str) -> Optional["NodeSnapshot"]:
        """Depth-first lookup by tag; None if absent."""
        if self.tag == tag:
            return self
        for child in self.children:
            found = child.find(tag)
            if found is not None:
                return found
        return None


NodeSnapshot.model_rebuild()
