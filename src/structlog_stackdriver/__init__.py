"""
Google Cloud Logging (Stackdriver) hook for structlog and stdlib logging.

Log entries are split into structured slots (log name, severity, HTTP
request/response) and a ``jsonPayload`` of the remaining fields, then written
through google-cloud-logging, either inline or from worker threads.

Usage:
    from structlog_stackdriver import StackdriverHook, configure_logging

    hook = StackdriverHook.new("my-project", "my-service")
    hook.add_ignore("password")
    configure_logging(hook=hook, stdlib=True)
"""

from .client import GCloudLoggingClient, LoggingClient
from .core import configure_from_settings, configure_logging, get_logger
from .exceptions import ClientInitializationError, StackdriverError, WriteError
from .fields import FieldExtractor
from .formatting import format_value
from .hook import DEFAULT_LEVELS, StackdriverHook
from .integrations import StackdriverHandler, StackdriverProcessor
from .types import GLOBAL_RESOURCE, LogEntry, LogLevel, Severity, WriteData

__all__ = [
    "ClientInitializationError",
    "DEFAULT_LEVELS",
    "FieldExtractor",
    "GCloudLoggingClient",
    "GLOBAL_RESOURCE",
    "LogEntry",
    "LogLevel",
    "LoggingClient",
    "Severity",
    "StackdriverError",
    "StackdriverHandler",
    "StackdriverHook",
    "StackdriverProcessor",
    "WriteData",
    "WriteError",
    "configure_from_settings",
    "configure_logging",
    "format_value",
    "get_logger",
]
