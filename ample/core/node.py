"""
ample ErrorNode

Hierarchical error state for a tree of cooperating UI scopes.

Each scope owns one node. Leaf nodes receive errors from application code;
when several children of the same parent fail at once the parent takes a
single aggregate ParentError and the children's subtrees stop displaying,
so the user sees one error instead of a cascade. A retry issued on any node
is routed to the ancestor, the node's own subtree, or its siblings
depending on the node's RetryBehavior.

INVARIANT: a node with a parent is listed exactly once in that parent's
children. Parents own their children; children keep only a weak reference
back to the parent.

Not thread-safe: all mutation of one tree must come from one control flow.
Only change-notification delivery may be deferred (see ui/signal.py).
"""

from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING
import logging
import uuid
import weakref

from ample.core.enums import PresentationBehavior, RetryBehavior
from ample.errors.taxonomy import ErrorEntry, ErrorKind, ParentError, describe
from ample.errors.exceptions import RetryActionError, RetryFailure
from ample.ui.signal import ChangeHandler, ChangeSignal, Scheduler

if TYPE_CHECKING:
    from ample.bootstrap.config import AmpleConfig
    from ample.ui.snapshot import NodeSnapshot


logger = logging.getLogger("core.node")


def _generate_tag() -> str:
    return str(uuid.uuid4())


class ErrorNode:
    """
    A node of the error tree.

    Create nodes with ErrorNode.root() or parent.child(); the constructor
    is not meant to be called directly.

    Usage:
        screen = ErrorNode.root(tag="screen")
        header = screen.child(tag="header")
        feed = screen.child(tag="feed", retry_behavior=RetryBehavior.DESCENDANTS)

        feed.receive(RetryableError(TimeoutError("feed timed out"), load_feed))
        if feed.show_error:
            ...
        feed.retry()
    """

    def __init__(
        self,
        *,
        config: AmpleConfig,
        tag: Optional[str] = None,
        presentation_behavior: Optional[PresentationBehavior] = None,
        retry_behavior: Optional[RetryBehavior] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self._config = config
        self._tag = tag if tag is not None else _generate_tag()
        # Set only by child(), together with the append to the parent's children
        self._parent_ref: Optional[weakref.ReferenceType] = None
        self._was_attached = False
        self._children: List[ErrorNode] = []

        self._presentation_behavior = PresentationBehavior(
            presentation_behavior or config.tree.default_presentation_behavior
        )
        self._retry_behavior = RetryBehavior(
            retry_behavior or config.tree.default_retry_behavior
        )

        self._entries: List[ErrorEntry] = []
        self._presentation_suppressed = False

        self._signal = ChangeSignal(
            source=self._tag,
            scheduler=scheduler,
            paused=not config.notification.enabled,
        )

    # =========================================================================
    # Nodes
    # =========================================================================

    @classmethod
    def root(
        cls,
        tag: Optional[str] = None,
        presentation_behavior: Optional[PresentationBehavior] = None,
        retry_behavior: Optional[RetryBehavior] = None,
        scheduler: Optional[Scheduler] = None,
        config: Optional[AmpleConfig] = None,
    ) -> "ErrorNode":
        """
        Create a parentless node.

        Args:
            tag: Identifier for diagnostics; a UUID is generated if omitted
            presentation_behavior: Defaults to the configured default
                (ACCEPTS_SUPPRESSION unless overridden)
            retry_behavior: Defaults to the configured default
                (ANCESTOR unless overridden)
            scheduler: Deferred delivery for change notifications,
                inherited by every descendant
            config: Configuration for the whole tree; get_config() is
                consulted only when omitted

        Returns:
            The new root node
        """
        if config is None:
            from ample.bootstrap.config import get_config

            config = get_config()

        node = cls(
            config=config,
            tag=tag,
            presentation_behavior=presentation_behavior,
            retry_behavior=retry_behavior,
            scheduler=scheduler,
        )
        logger.debug(f"Created root {node.tag}")
        return node

    def child(
        self,
        tag: Optional[str] = None,
        presentation_behavior: Optional[PresentationBehavior] = None,
        retry_behavior: Optional[RetryBehavior] = None,
    ) -> "ErrorNode":
        """
        Create a child node appended to this node's children.

        The caller must keep a reference to the returned node; release it
        with detach() or by using it as a context manager.
        """
        node = type(self)(
            config=self._config,
            tag=tag,
            presentation_behavior=presentation_behavior,
            retry_behavior=retry_behavior,
            scheduler=self._signal.scheduler,
        )
        node._parent_ref = weakref.ref(self)
        node._was_attached = True
        self._children.append(node)
        logger.debug(f"Attached {node.tag} to {self.tag} ({len(self._children)} children)")
        return node

    node = child

    def detach(self) -> None:
        """Remove this node from its parent's children. Idempotent."""
        parent = self.parent
        if parent is not None:
            parent._children = [c for c in parent._children if c is not self]
            logger.debug(f"Detached {self.tag} from {parent.tag}")
        self._parent_ref = None

    def release(self) -> None:
        """End of life for the owning scope; same cleanup as detach()."""
        self.detach()

    def __enter__(self) -> "ErrorNode":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()

    # =========================================================================
    # Tree
    # =========================================================================

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def parent(self) -> Optional["ErrorNode"]:
        """The parent, or None for roots, detached nodes, and orphans."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> Tuple["ErrorNode", ...]:
        return tuple(self._children)

    @property
    def presentation_behavior(self) -> PresentationBehavior:
        return self._presentation_behavior

    @property
    def retry_behavior(self) -> RetryBehavior:
        return self._retry_behavior

    @property
    def config(self) -> AmpleConfig:
        """Configuration resolved by the root, shared by the whole tree."""
        return self._config

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_detached(self) -> bool:
        """Created under a parent that is no longer reachable."""
        return self._was_attached and self.parent is None

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def root_node(self) -> "ErrorNode":
        """Top-most reachable ancestor (self for roots)."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def walk(self) -> Iterator["ErrorNode"]:
        """Depth-first, pre-order traversal of this node and its subtree."""
        yield self
        for child in list(self._children):
            yield from child.walk()

    # =========================================================================
    # Errors
    # =========================================================================

    @property
    def errors(self) -> List[Any]:
        """Held errors in arrival order."""
        return [entry.error for entry in self._entries]

    @property
    def entries(self) -> Tuple[ErrorEntry, ...]:
        """Held errors with their classification."""
        return tuple(self._entries)

    @property
    def presentation_suppressed(self) -> bool:
        return self._presentation_suppressed

    @property
    def has_error(self) -> bool:
        return bool(self._entries)

    @property
    def has_single_error(self) -> bool:
        return len(self._entries) == 1

    @property
    def show_error(self) -> bool:
        return self.has_error and not self._presentation_suppressed

    @property
    def has_retryable_error(self) -> bool:
        return any(entry.is_retryable for entry in self._entries)

    def receive(self, error: Any) -> None:
        """
        Hold a new error, then let the parent decide on aggregation.

        The whole suppression cascade completes before this returns.
        """
        entry = ErrorEntry.wrap(error)
        self._entries.append(entry)
        logger.debug(f"{self.tag} received {entry.kind.value} error: {entry.description}")
        self._update_ui()
        self._notify_parent()

    def remove_all_errors(self) -> None:
        """Drop every held error. Suppression is left as is."""
        self._entries.clear()
        self._update_ui()

    def remove(self, error: Any) -> None:
        """
        Drop every held error whose description matches error's.

        Distinct errors with the same text are removed together.
        """
        description = describe(error)
        self._entries = [e for e in self._entries if e.description != description]
        self._update_ui()

    # =========================================================================
    # Retry
    # =========================================================================

    def retry(self) -> None:
        """
        Retry according to this node's RetryBehavior.

        Raises:
            RetryActionError: one or more retry actions raised. The cascade
                has still run to completion when this is raised.
        """
        logger.info(f"Retry requested on {self.tag} ({self._retry_behavior.value})")
        failures: List[RetryFailure] = []
        self._internal_retry(failures)
        if failures:
            raise RetryActionError(failures)

    def _internal_retry(self, failures: List[RetryFailure]) -> None:
        parent = self.parent
        if parent is None:
            self._retry_self_and_descendants(failures)
            return

        if self._retry_behavior is RetryBehavior.ANCESTOR:
            parent._internal_retry(failures)
        elif self._retry_behavior is RetryBehavior.DESCENDANTS:
            self._retry_self_and_descendants(failures)
        elif self._retry_behavior is RetryBehavior.SIBLINGS:
            parent._retry_descendants(failures)

    def _retry_self(self, failures: List[RetryFailure]) -> None:
        # Snapshot: actions may feed new errors back into this node
        for entry in list(self._entries):
            if entry.kind is ErrorKind.RETRYABLE:
                try:
                    entry.run_retry_action()
                except Exception as e:
                    logger.error(f"Retry action failed on {self.tag} for '{entry.description}': {e}")
                    failures.append(RetryFailure(tag=self.tag, error=entry.error, exception=e))

            self.remove(entry.error)

        self._unsuppress_presentation()

    def _retry_descendants(self, failures: List[RetryFailure]) -> None:
        for child in list(self._children):
            child._retry_self(failures)
            child._retry_descendants(failures)

    def _retry_self_and_descendants(self, failures: List[RetryFailure]) -> None:
        logger.debug(f"Retrying {self.tag} and its subtree")
        self._retry_self(failures)
        self._retry_descendants(failures)

    # =========================================================================
    # Presentation
    # =========================================================================

    def _notify_parent(self) -> None:
        parent = self.parent
        if parent is None:
            # A root shows its own error, so nothing below it should
            self._suppress_descendants_presentation()
            return

        parent._suppress_descendants_presentation_if_required()

    def _unsuppress_presentation(self) -> None:
        self._presentation_suppressed = False
        self._update_ui()

    def _suppress_presentation(self) -> None:
        self._presentation_suppressed = True
        self._update_ui()

    def _suppress_descendants_presentation(self) -> None:
        for child in list(self._children):
            child._suppress_presentation()
            child._suppress_descendants_presentation()

    def _suppress_descendants_presentation_if_required(self) -> None:
        failing = [child for child in self._children if child.has_error]
        prefers_display = any(
            child.presentation_behavior is PresentationBehavior.PREFERS_DISPLAY
            for child in self._children
        )

        if not prefers_display and (len(failing) > 1 or len(failing) == len(self._children)):
            logger.debug(
                f"{self.tag} aggregating {len(failing)}/{len(self._children)} failing children"
            )
            self.receive(ParentError())
        else:
            for child in failing:
                child._suppress_descendants_presentation()

    # =========================================================================
    # Notification
    # =========================================================================

    @property
    def signal(self) -> ChangeSignal:
        return self._signal

    def subscribe(self, handler: ChangeHandler) -> str:
        """Register a zero-argument callback fired after every state change."""
        return self._signal.subscribe(handler)

    def unsubscribe(self, handler: ChangeHandler) -> bool:
        return self._signal.unsubscribe(handler)

    def _update_ui(self) -> None:
        self._signal.emit()

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def snapshot(self) -> "NodeSnapshot":
        """Serializable copy of this node and its subtree."""
        from ample.ui.snapshot import NodeSnapshot

        return NodeSnapshot.from_node(self)

    def to_dict(self) -> Dict[str, Any]:
        return self.snapshot().model_dump(mode="json")

    def __repr__(self) -> str:
        return (
            f"ErrorNode(tag={self._tag!r}, errors={len(self._entries)}, "
            f"suppressed={self._presentation_suppressed}, children={len(self._children)})"
        )
