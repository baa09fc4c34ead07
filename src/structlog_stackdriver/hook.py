"""
Stackdriver hook: turns log entries into Cloud Logging writes.

Configuration (levels, labels, ignored fields, filters, async mode) must be
completed before the first ``fire``. Setters are not synchronized with fires
already in flight.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Set, Tuple

from .client import GCloudLoggingClient, LoggingClient
from .config import ClientConfig, HookSettings
from .core import get_logger
from .exceptions import ClientInitializationError
from .fields import FieldExtractor
from .formatting import format_value
from .types import GLOBAL_RESOURCE, FieldFilter, LogEntry, LogLevel, WriteData

logger = get_logger("structlog_stackdriver.hook")

DEFAULT_LEVELS: Tuple[LogLevel, ...] = (
    LogLevel.ALERT,
    LogLevel.CRITICAL,
    LogLevel.ERROR,
    LogLevel.WARNING,
    LogLevel.INFO,
)

ClientFactory = Callable[[Optional[str], ClientConfig], LoggingClient]


class StackdriverHook:
    """Hook that ships log entries to Google Cloud Logging.

    In async mode every ``fire`` is handed to a worker thread and returns at
    once. Writes may then land in any order, and a failed write is only
    reported on this module's logger; the caller never sees it.
    """

    def __init__(self, client: LoggingClient, log_name: str, *, max_workers: int = 4):
        self._client = client
        self._default_log_name = log_name
        self._levels: list[LogLevel] = list(DEFAULT_LEVELS)
        self._labels: Dict[str, str] = {}
        self._async = False
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._ignore_fields: Set[str] = set()
        self._filters: Dict[str, FieldFilter] = {}

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls, project_id: Optional[str], log_name: str) -> "StackdriverHook":
        """Create a hook using Application Default Credentials."""
        return cls.new_with_config(project_id, log_name, ClientConfig())

    @classmethod
    def new_with_config(
        cls,
        project_id: Optional[str],
        log_name: str,
        config: ClientConfig,
        *,
        client_factory: ClientFactory = GCloudLoggingClient,
        max_workers: int = 4,
    ) -> "StackdriverHook":
        """Create a hook with an explicitly configured client.

        Raises:
            ClientInitializationError: If the client cannot be constructed
        """
        try:
            client = client_factory(project_id, config)
        except Exception as exc:
            raise ClientInitializationError(project_id=project_id, reason=str(exc)) from exc
        return cls(client, log_name, max_workers=max_workers)

    @classmethod
    def from_settings(
        cls,
        settings: HookSettings,
        *,
        client_factory: ClientFactory = GCloudLoggingClient,
    ) -> "StackdriverHook":
        """Create a fully configured hook from HookSettings."""
        hook = cls.new_with_config(
            settings.project_id,
            settings.log_name,
            settings.to_client_config(),
            client_factory=client_factory,
            max_workers=settings.max_workers,
        )

        levels = []
        for name in settings.levels:
            level = LogLevel.parse(name)
            if level is None:
                raise ValueError(f"Unknown log level in STACKDRIVER_LEVELS: {name!r}")
            levels.append(level)
        hook.set_levels(levels)

        hook.set_labels(settings.labels)
        for name in settings.ignore_fields:
            hook.add_ignore(name)
        if settings.async_mode:
            hook.enable_async()
        return hook

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def levels(self) -> list[LogLevel]:
        """Levels that trigger this hook."""
        return self._levels

    def set_levels(self, levels: Iterable[LogLevel]) -> None:
        self._levels = list(levels)

    def set_labels(self, labels: Mapping[str, str]) -> None:
        """Replace the labels attached to every entry."""
        self._labels = dict(labels)

    @property
    def is_async(self) -> bool:
        return self._async

    def enable_async(self) -> None:
        """Send entries from worker threads. ``fire`` no longer raises."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="stackdriver-hook",
            )
        self._async = True

    def add_ignore(self, name: str) -> None:
        self._ignore_fields.add(name)

    def add_filter(self, name: str, fn: FieldFilter) -> None:
        """Register a transform used instead of the default formatting for ``name``."""
        self._filters[name] = fn

    # =========================================================================
    # Firing
    # =========================================================================

    def fire(self, entry: LogEntry) -> None:
        """Send one entry.

        Synchronous mode re-raises whatever the client raised. Async mode
        schedules the write and returns immediately.
        """
        if not self._async:
            self._fire(entry)
            return

        executor = self._executor
        if executor is None:
            logger.warning("async_write_dropped", reason="hook closed")
            return
        try:
            future = executor.submit(self._fire, entry)
        except RuntimeError as exc:
            # executor shut down by a concurrent close()
            logger.warning("async_write_dropped", reason=str(exc))
            return
        future.add_done_callback(self._report_async_failure)

    def _fire(self, entry: LogEntry) -> None:
        fields = FieldExtractor.from_entry(self._default_log_name, entry)

        # Structured getters run first so their keys are claimed before the
        # residual pass.
        log_name = fields.get_log_name()
        request = fields.get_request()
        response = fields.get_response()

        self._client.write(
            WriteData(
                log_name=log_name,
                severity=fields.get_severity(),
                labels=self._labels,
                data=self._build_data(fields),
                request=request,
                response=response,
                resource=GLOBAL_RESOURCE,
            )
        )

    def _build_data(self, fields: FieldExtractor) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, value in fields.items():
            if key in self._ignore_fields:
                continue
            fn = self._filters.get(key)
            data[key] = fn(value) if fn is not None else format_value(value)
        return data

    @staticmethod
    def _report_async_failure(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("async_write_failed", error=str(exc), error_type=type(exc).__name__)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Wait for pending async writes, then close the client if it can be closed.

        Async fires after this point are dropped and reported on this module's
        logger. ``enable_async`` starts a fresh worker pool.
        """
        if self._executor is not None:
            executor, self._executor = self._executor, None
            executor.shutdown(wait=True)
        close = getattr(self._client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "StackdriverHook":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
