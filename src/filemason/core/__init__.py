"""filemason core: errors, logging, configuration and diagnostics."""

from filemason.core.config import ConfigResolver, ConfigSource, LoggingPolicy
from filemason.core.errors import (
    AlreadyExistsError,
    ArchiveError,
    ConfigError,
    DepthLimitExceededError,
    FileError,
    FileMasonError,
    InvalidTargetError,
    NotFoundError,
    SizeLimitExceededError,
)
from filemason.core.events import EventBus, get_event_bus
from filemason.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_colors,
    set_log_stream,
    set_verbosity,
)

__all__ = [
    # Config
    "ConfigResolver",
    "ConfigSource",
    "LoggingPolicy",
    # Errors
    "AlreadyExistsError",
    "ArchiveError",
    "ConfigError",
    "DepthLimitExceededError",
    "FileError",
    "FileMasonError",
    "InvalidTargetError",
    "NotFoundError",
    "SizeLimitExceededError",
    # Events
    "EventBus",
    "get_event_bus",
    # Logging
    "VerbosityLevel",
    "apply_logging_policy",
    "get_logger",
    "get_verbosity",
    "set_colors",
    "set_log_stream",
    "set_verbosity",
]
