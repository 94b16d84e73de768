"""
ample Test Configuration and Fixtures

Every test runs against a fresh default configuration so environment
variables and earlier set_config() calls cannot leak between tests.
"""

import pytest
from typing import Callable, List

from ample.bootstrap.config import AmpleConfig, set_config, reset_config
from ample.core.node import ErrorNode


@pytest.fixture(autouse=True)
def default_config():
    """Install a default AmpleConfig for the duration of the test."""
    config = AmpleConfig()
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def two_child_tree():
    """
    Root R with two ACCEPTS_SUPPRESSION / ANCESTOR children A and B.

    Returns:
        Tuple (R, A, B)
    """
    root = ErrorNode.root(tag="R")
    a = root.child(tag="A")
    b = root.child(tag="B")
    return root, a, b


@pytest.fixture
def call_log():
    """
    Ordered record of retry actions.

    Usage:
        action = call_log.action("a")
        action()
        assert call_log.calls == ["a"]
    """

    class CallLog:
        def __init__(self):
            self.calls: List[str] = []

        def action(self, name: str) -> Callable[[], None]:
            def run() -> None:
                self.calls.append(name)
            return run

    return CallLog()
