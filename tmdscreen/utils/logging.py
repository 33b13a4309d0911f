"""
Structured Logging Configuration

All modules log through the ``tmdscreen`` logger tree. Structured context
is passed as ``extra={"context": {...}}`` and rendered as sorted
``key=value`` pairs after the message, e.g.:

    logger.info("assessment completed", extra={"context": {"tier": "high"}})

Context values must be coarse pipeline facts (tiers, codes, timings);
answers and free text never go into a log record.
"""
import logging
import os
import sys
from typing import IO, Any, Mapping, Optional
from datetime import datetime, timezone

PACKAGE_LOGGER = "tmdscreen"
FILE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s%(context_suffix)s'


def _render_context(context: Optional[Mapping[str, Any]]) -> str:
    if not context:
        return ""
    pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
    return f" | {pairs}"


class StructuredFormatter(logging.Formatter):
    """Console formatter: UTC timestamp, padded level, logger name, context pairs."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        record.timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        context = _render_context(getattr(record, "context", None))

        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
        else:
            color = reset = ""

        log_message = (
            f"{color}[{record.timestamp}] "
            f"{record.levelname:8} "
            f"[{record.name}] "
            f"{record.getMessage()}{context}{reset}"
        )

        if record.exc_info:
            log_message += f"\n{self.formatException(record.exc_info)}"

        return log_message


class _ContextSuffixFilter(logging.Filter):
    """Exposes rendered context to %-style formats as ``context_suffix``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context_suffix = _render_context(getattr(record, "context", None))
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the ``tmdscreen`` logger tree.

    Handlers attach to the package logger only, so host applications keep
    control of the root logger. Colour is used only when the console
    stream is a terminal.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        log_file: Optional file path for plain-text log output
        stream: Console stream, stdout by default

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    package_logger.propagate = False

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    stream = stream or sys.stdout
    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(
        StructuredFormatter(use_color=getattr(stream, "isatty", lambda: False)())
    )
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.addFilter(_ContextSuffixFilter())
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the package tree.

    Names outside ``tmdscreen`` are nested under it so every record
    reaches the package handlers.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


# Initialize logging on module import
setup_logging(os.getenv("TMD_LOG_LEVEL", "INFO"))
