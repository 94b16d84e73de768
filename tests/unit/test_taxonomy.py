"""
Unit tests for errors/taxonomy.py and errors/exceptions.py.
"""

from unittest.mock import Mock

from ample.errors.exceptions import AmpleError, RetryActionError, RetryFailure
from ample.errors.taxonomy import (
    ErrorEntry,
    ErrorKind,
    ParentError,
    RetryableError,
    describe,
)


class TestDescribe:
    """Test error descriptions."""

    def test_exception_message(self):
        assert describe(ValueError("disk full")) == "disk full"

    def test_empty_message_falls_back_to_type_name(self):
        assert describe(TimeoutError()) == "TimeoutError"

    def test_non_exception_values(self):
        """Any value with a string form can be held."""
        assert describe("plain text") == "plain text"


class TestRetryableError:
    """Test the retryable wrapper."""

    def test_description_delegates_to_underlying(self):
        error = RetryableError(ConnectionError("offline"), Mock())
        assert str(error) == "offline"
        assert error.description == "offline"
        assert describe(error) == "offline"

    def test_nested_wrapper(self):
        inner = RetryableError(ValueError("inner"), Mock())
        outer = RetryableError(inner, Mock())
        assert str(outer) == "inner"

    def test_keeps_action(self):
        action = Mock()
        error = RetryableError(ValueError("x"), action)
        assert error.retry_action is action
        assert "ValueError" in repr(error)


class TestParentError:
    """Test the aggregate marker."""

    def test_description(self):
        assert str(ParentError()) == ParentError.MESSAGE

    def test_markers_share_description(self):
        assert describe(ParentError()) == describe(ParentError())

    def test_not_exported_from_errors_package(self):
        """The marker is created by the tree only and stays out of the public names."""
        import ample.errors

        assert "ParentError" not in ample.errors.__all__
        assert not hasattr(ample.errors, "ParentError")


class TestErrorEntry:
    """Test intake classification."""

    def test_wrap_kinds(self):
        assert ErrorEntry.wrap(ValueError("x")).kind is ErrorKind.PLAIN
        assert ErrorEntry.wrap(RetryableError(ValueError("x"), Mock())).kind is ErrorKind.RETRYABLE
        assert ErrorEntry.wrap(ParentError()).kind is ErrorKind.AGGREGATE

    def test_is_retryable(self):
        assert not ErrorEntry.wrap(ValueError("x")).is_retryable
        assert ErrorEntry.wrap(RetryableError(ValueError("x"), Mock())).is_retryable
        assert ErrorEntry.wrap(ParentError()).is_retryable

    def test_run_retry_action(self):
        action = Mock()
        ErrorEntry.wrap(RetryableError(ValueError("x"), action)).run_retry_action()
        action.assert_called_once_with()

    def test_run_retry_action_noop_for_other_kinds(self):
        ErrorEntry.wrap(ValueError("x")).run_retry_action()
        ErrorEntry.wrap(ParentError()).run_retry_action()

    def test_to_dict(self):
        data = ErrorEntry.wrap(RetryableError(ValueError("net"), Mock())).to_dict()
        assert data == {"description": "net", "kind": "retryable"}


class TestExceptions:
    """Test library exceptions."""

    def test_retry_action_error(self):
        failure = RetryFailure(tag="feed", error=ValueError("x"), exception=RuntimeError("boom"))
        error = RetryActionError([failure])

        assert isinstance(error, AmpleError)
        assert error.failures == [failure]
        assert "feed" in str(error)
        assert failure.to_dict()["tag"] == "feed"
        assert "boom" in failure.to_dict()["exception"]
