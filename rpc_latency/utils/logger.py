"""
Structured logging setup for the RPC latency tester.

Every component logs through ``get_logger`` so that per-request latencies,
phase transitions and endpoint failures share one consistent format.
"""

import logging
import sys
from datetime import datetime


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured log data."""

    COLORS = {
        logging.DEBUG: "\033[90m",    # Gray
        logging.INFO: "\033[36m",     # Cyan
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
        logging.CRITICAL: "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, stream=None):
        super().__init__()
        stream = stream or sys.stderr
        self.use_colors = use_colors and hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        level = record.levelname.ljust(5)
        name = record.name
        message = record.getMessage()

        extra = ""
        if getattr(record, "extra_data", None):
            extra = f" {record.extra_data}"

        if self.use_colors:
            color = self.COLORS.get(record.levelno, "")
            return f"{color}[{timestamp}][{name}][{level}]{self.RESET} {message}{extra}"
        return f"[{timestamp}][{name}][{level}] {message}{extra}"


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that adds context to all log messages."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = dict(kwargs.get("extra") or {})
        if self.extra:
            extra.update(self.extra)

        # Formatter reads the merged context from extra_data
        if extra:
            extra["extra_data"] = {k: v for k, v in extra.items() if k != "extra_data"}
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging for the application.

    Logs go to stderr so that the rendered report on stdout stays clean
    (and parseable when ``--json`` is used).
    """
    level = logging.DEBUG if verbose else logging.INFO
    if quiet:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(use_colors=True, stream=sys.stderr))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    # Reduce noise from external libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def get_logger(name: str, **context) -> ContextLogger:
    """Get a context-aware logger."""
    logger = logging.getLogger(f"rpc_latency.{name}")
    return ContextLogger(logger, context)
