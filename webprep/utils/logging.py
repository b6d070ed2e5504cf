"""Logging configuration using structlog.

Every module logs through a structlog bound logger with key/value context.
Records are rendered by stdlib handlers: one on stderr for the operator and,
for CLI runs, one rotating task log file that keeps every executed command.
"""

import logging
import sys
import uuid
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import structlog
from rich.console import Console
from structlog.typing import EventDict, Processor, WrappedLogger

MAX_VALUE_LENGTH = 500
LOG_BACKUP_DAYS = 7

# Keys the renderers lay out themselves
_RENDERED_KEYS = frozenset({"event", "level", "timestamp", "_record", "_from_structlog"})

_console: Console | None = None


class SafeStreamHandler(logging.StreamHandler):
    """Stream handler that degrades characters its stream cannot encode.

    Source trees routinely contain accented or CJK filenames, and a legacy
    console encoding must not turn a log line into a logging error.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        encoding = getattr(self.stream, "encoding", None) or "utf-8"
        return message.encode(encoding, errors="replace").decode(encoding)


def get_console() -> Console:
    """Shared stderr console, so progress output and log lines interleave cleanly."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def truncate_long_values(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Shorten oversized values such as the captured stderr of a failed command."""
    for key, value in event_dict.items():
        if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = f"{value[:MAX_VALUE_LENGTH]}... [{len(value)} chars total]"
        elif isinstance(value, bytes | bytearray) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = f"[BINARY DATA: {len(value)} bytes]"
    return event_dict


def separate_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Put a ``|`` between the message and its key/value context."""
    if "event" in event_dict and not event_dict.keys() <= _RENDERED_KEYS:
        event_dict["event"] = f"{event_dict['event']} |"
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        truncate_long_values,
        separate_context,
    ]


def _formatter(json_format: bool, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=colors,
            exception_formatter=structlog.dev.plain_traceback,
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def _level(name: str | None, default: int) -> int:
    return getattr(logging, name.upper(), default) if name else default


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    json_format: bool = False,
    console_level: str | None = None,
    file_level: str | None = None,
) -> None:
    """Configure structlog and the root logger's handlers.

    Args:
        level: Root log level
        log_file: Optional log file, rotated at midnight with a week of backups
        json_format: Render JSON lines instead of the human-readable format
        console_level: Override for the stderr handler level
        file_level: Override for the file handler level
    """
    root_level = _level(level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)
    logging.getLogger("asyncio").setLevel(max(root_level, logging.WARNING))

    console_handler = SafeStreamHandler(sys.stderr)
    console_handler.setLevel(_level(console_level, root_level))
    console_handler.setFormatter(_formatter(json_format, colors=not json_format))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(_level(file_level, root_level))
        file_handler.setFormatter(_formatter(json_format, colors=False))
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def create_task_log_path(log_dir: str | Path, prefix: str = "task") -> tuple[str, Path]:
    """Reserve ``<log_dir>/<prefix>_<YYYYmmdd_HHMMSS>_<id>.log`` for one run.

    Returns:
        Tuple of (task_id, log_file_path)
    """
    log_dir_path = Path(log_dir)
    log_dir_path.mkdir(parents=True, exist_ok=True)

    task_id = uuid.uuid4().hex[:8]
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return task_id, log_dir_path / f"{prefix}_{timestamp}_{task_id}.log"


def setup_task_logging(
    log_dir: str | Path,
    prefix: str = "task",
    verbose: bool = False,
    json_format: bool = False,
) -> tuple[str, Path]:
    """Log one CLI run to its own file.

    The console shows WARNING and above unless ``verbose`` is set; the task
    log always captures DEBUG so every executed operation is traceable.

    Returns:
        Tuple of (task_id, log_file_path)
    """
    task_id, log_path = create_task_log_path(log_dir, prefix)
    setup_logging(
        level="DEBUG",
        log_file=log_path,
        json_format=json_format,
        console_level="DEBUG" if verbose else "WARNING",
        file_level="DEBUG",
    )
    return task_id, log_path
