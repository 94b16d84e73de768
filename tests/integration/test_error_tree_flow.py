"""
Integration tests for error tree flows.

Tests complete receive -> aggregate -> retry cycles across realistic
screen layouts.
"""

from unittest.mock import Mock

from ample.core.enums import PresentationBehavior, RetryBehavior
from ample.core.node import ErrorNode
from ample.errors.taxonomy import ParentError, RetryableError
from ample.ui.signal import QueueScheduler


def visible(root: ErrorNode):
    return [node.tag for node in root.walk() if node.show_error]


class TestTwoChildScenario:
    """Root R with children A and B, both ACCEPTS_SUPPRESSION / ANCESTOR."""

    def test_full_cycle(self, two_child_tree):
        root, a, b = two_child_tree

        a.receive(ValueError("e1"))
        assert root.has_error is False
        assert a.show_error is True

        b.receive(ValueError("e2"))
        assert root.has_error is True
        assert a.presentation_suppressed is True
        assert b.presentation_suppressed is True
        assert visible(root) == ["R"]

        a.retry()

        for node in (root, a, b):
            assert node.has_error is False
            assert node.presentation_suppressed is False
        assert visible(root) == []


class TestDashboardScreen:
    """A dashboard with independent widgets and a pinned banner."""

    def build(self):
        screen = ErrorNode.root(tag="screen")
        banner = screen.child(tag="banner", presentation_behavior=PresentationBehavior.PREFERS_DISPLAY)
        widgets = screen.child(tag="widgets", retry_behavior=RetryBehavior.DESCENDANTS)
        chart = widgets.child(tag="chart", retry_behavior=RetryBehavior.SIBLINGS)
        table = widgets.child(tag="table", retry_behavior=RetryBehavior.SIBLINGS)
        summary = widgets.child(tag="summary", retry_behavior=RetryBehavior.SIBLINGS)
        return screen, banner, widgets, chart, table, summary

    def test_widget_failures_collapse_into_one_error(self):
        screen, banner, widgets, chart, table, summary = self.build()
        reload_chart = Mock()
        reload_table = Mock()

        chart.receive(RetryableError(TimeoutError("chart timed out"), reload_chart))
        assert visible(screen) == ["chart"]

        table.receive(RetryableError(TimeoutError("table timed out"), reload_table))

        # widgets aggregates; the banner sibling vetoes aggregation on screen
        assert isinstance(widgets.errors[0], ParentError)
        assert not screen.has_error
        assert visible(screen) == ["widgets"]
        assert widgets.has_retryable_error

        table.retry()

        reload_chart.assert_called_once_with()
        reload_table.assert_called_once_with()
        assert not chart.has_error and not table.has_error
        # Siblings retry leaves the parent's marker in place
        assert widgets.has_error
        assert visible(screen) == ["widgets"]

        widgets.retry()

        assert visible(screen) == []
        assert not any(node.has_error for node in screen.walk())

    def test_banner_always_shows(self):
        screen, banner, widgets, chart, table, summary = self.build()

        banner.receive(ValueError("maintenance tonight"))
        summary.receive(ValueError("no data"))

        assert not screen.has_error
        assert "banner" in visible(screen)
        assert "summary" in visible(screen)

    def test_closing_a_widget_changes_aggregation(self):
        """A released scope no longer counts among its former siblings."""
        screen, banner, widgets, chart, table, summary = self.build()

        with widgets.child(tag="popover") as popover:
            popover.receive(ValueError("popover failed"))
            assert not widgets.has_error

        assert popover not in widgets.children

        chart.receive(ValueError("chart failed"))
        assert not widgets.has_error
        assert visible(screen) == ["chart"]


class TestDeferredRendering:
    """Hosts render from deferred notifications."""

    def test_host_rerenders_after_drain(self):
        scheduler = QueueScheduler()
        root = ErrorNode.root(tag="R", scheduler=scheduler)
        a = root.child(tag="A")
        b = root.child(tag="B")
        renders = []
        for node in (root, a, b):
            node.subscribe(lambda node=node: renders.append((node.tag, node.show_error)))

        a.receive(ValueError("e1"))
        b.receive(ValueError("e2"))
        assert renders == []

        scheduler.drain()

        # Every delivery reflects the settled state
        assert ("R", True) in renders
        assert all(show is False for tag, show in renders if tag in ("A", "B"))
