"""
bootstrap/ - Configuration and logging setup
"""

from .config import (
    TreeConfig,
    NotificationConfig,
    LoggingConfig,
    AmpleConfig,
    load_config,
    get_config,
    set_config,
    reset_config,
)

from .logs import (
    JSONFormatter,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    # Config
    "TreeConfig",
    "NotificationConfig",
    "LoggingConfig",
    "AmpleConfig",
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    # Logging
    "JSONFormatter",
    "setup_logging",
    "setup_logging_from_config",
]
