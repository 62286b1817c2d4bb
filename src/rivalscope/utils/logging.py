"""
Logging configuration for rivalscope.

Provides:
- Rich console logging
- Optional plain-text file log
- Mission-scoped context prefixes (mission id, competitor)
"""

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("httpx", "httpcore", "mcp", "aiosqlite", "uvicorn.access")


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    rich_tracebacks: bool = True,
    show_path: bool = False,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to mirror logs into
        rich_tracebacks: Render exceptions with rich
        show_path: Show source paths in console output

    Returns:
        Root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=rich_tracebacks,
        show_path=show_path,
        markup=False,
    )
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


class StructuredLogger:
    """
    Logger that prefixes every message with mission context.

    Usage:
        log = StructuredLogger("rivalscope.mission", mission="m-42")
        log.add_context(competitor="Acme").info("Research started")
        # Output: [mission=m-42 competitor=Acme] Research started
    """

    def __init__(self, name: str, **context: Any):
        self.logger = logging.getLogger(name)
        self.context = context

    def _format(self, msg: str) -> str:
        if not self.context:
            return msg
        prefix = " ".join(f"{k}={v}" for k, v in self.context.items())
        return f"[{prefix}] {msg}"

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(self._format(msg), **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(self._format(msg), **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(self._format(msg), **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self.logger.error(self._format(msg), **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self.logger.exception(self._format(msg), **kwargs)

    def add_context(self, **context: Any) -> "StructuredLogger":
        """New logger carrying this logger's context plus the given fields."""
        return StructuredLogger(self.logger.name, **{**self.context, **context})
