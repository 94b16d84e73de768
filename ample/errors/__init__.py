"""
errors/ - Error values and library exceptions

Provides the retryable wrapper, the tagged entry stored by nodes, and the
exceptions the library raises. The aggregate ParentError marker is internal
to the tree and stays in errors.taxonomy.
"""

from .taxonomy import (
    RetryAction,
    ErrorKind,
    RetryableError,
    ErrorEntry,
    describe,
)

from .exceptions import (
    AmpleError,
    ConfigurationError,
    RetryFailure,
    RetryActionError,
)

__all__ = [
    # Taxonomy
    "RetryAction",
    "ErrorKind",
    "RetryableError",
    "ErrorEntry",
    "describe",
    # Exceptions
    "AmpleError",
    "ConfigurationError",
    "RetryFailure",
    "RetryActionError",
]
