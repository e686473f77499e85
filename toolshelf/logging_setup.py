"""Process-wide log file for the desktop backend.

Design
- One append-only file per local day: ``<resource_root>/logs/YYYYMMDD.log``.
- The file handler is the only handler on the root logger, so every module
  logger (``logging.getLogger(__name__)``) ends up in the same file.
  ``TOOLSHELF_LOG_CONSOLE=1`` adds a stderr handler next to it, with the
  level label coloured when stderr is a terminal.
- ``logging.FileHandler`` takes its own lock around each emit, which keeps
  lines from different threads whole.
- Five severities: ERROR, WARN, INFO, DEBUG and TRACE (a custom level below
  DEBUG). Minimum level is DEBUG unless ``TOOLSHELF_LOG`` says otherwise.

Line format::

    2026-10-18 09:30:00 [INFO] toolshelf.commands - Loading CSV file: Linux.csv
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from toolshelf.config import LOGGING, LoggingConfig, PathsConfig

__all__ = [
    "TRACE",
    "LevelColorFormatter",
    "LogSink",
    "init_logging",
    "level_from_env",
    "log_file_name",
    "shutdown_logging",
]

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_LABELS = {
    logging.CRITICAL: "ERROR",
    logging.ERROR: "ERROR",
    logging.WARNING: "WARN",
    logging.INFO: "INFO",
    logging.DEBUG: "DEBUG",
    TRACE: "TRACE",
}

_LEVEL_STYLES = {
    "ERROR": "red",
    "WARN": "yellow",
    "INFO": "green",
    "DEBUG": "blue",
    "TRACE": "cyan",
}

_LEVELS_BY_NAME = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
    "off": logging.CRITICAL + 10,
}

_console = Console(stderr=True)


class LevelColorFormatter(logging.Formatter):
    """Formatter that adds ``%(level_label)s`` and colours it on terminals.

    ``colorize`` is set for the console handler when stderr is a terminal;
    the log file always gets plain text.
    """

    def __init__(self, fmt: str, datefmt: str, *, colorize: bool = False) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.colorize = colorize
        self._render = Console(force_terminal=True, color_system="standard", width=1000)

    def _styled(self, label: str) -> str:
        with self._render.capture() as capture:
            self._render.print(Text(label, style=_LEVEL_STYLES.get(label, "")), end="")
        return capture.get()

    def format(self, record: logging.LogRecord) -> str:
        label = _LEVEL_LABELS.get(record.levelno, record.levelname)
        record.level_label = self._styled(label) if self.colorize else label
        return super().format(record)


@dataclass(frozen=True)
class LogSink:
    path: Path
    handler: logging.FileHandler
    console_handler: logging.StreamHandler | None = None


_SINK: LogSink | None = None
_SINK_LOCK = threading.Lock()


def level_from_env(cfg: LoggingConfig = LOGGING) -> int:
    raw = os.getenv(cfg.level_env_var, "").strip().lower()
    if not raw:
        return cfg.default_level
    return _LEVELS_BY_NAME.get(raw, cfg.default_level)


def log_file_name(now: datetime | None = None, cfg: LoggingConfig = LOGGING) -> str:
    t = now or datetime.now()
    return f"{t.strftime(cfg.file_date_format)}.log"


def _stream_is_terminal(handler: logging.StreamHandler) -> bool:
    stream = getattr(handler, "stream", None)
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


def init_logging(resource_root, cfg: LoggingConfig = LOGGING) -> LogSink:
    """Install ``<resource_root>/logs/<YYYYMMDD>.log`` as the process log sink.

    The file is opened for append and never truncated. Once a sink is
    installed, later calls return it unchanged.
    """

    global _SINK

    with _SINK_LOCK:
        if _SINK is not None:
            return _SINK

        log_dir = PathsConfig(resource_root=resource_root).logs_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_file_name(cfg=cfg)

        _console.print(f"[bold green]Log file location:[/bold green] {escape(str(log_path))}")

        handler = logging.FileHandler(log_path, mode="a", encoding=cfg.encoding)
        handler.setFormatter(LevelColorFormatter(cfg.line_format, cfg.date_format))

        console = None
        if os.getenv(cfg.console_env_var, "").strip() == "1":
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(
                LevelColorFormatter(
                    cfg.line_format,
                    cfg.date_format,
                    colorize=_stream_is_terminal(console),
                )
            )

        root = logging.getLogger()
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.addHandler(handler)
        if console is not None:
            root.addHandler(console)
        root.setLevel(level_from_env(cfg))

        _SINK = LogSink(path=log_path, handler=handler, console_handler=console)
        return _SINK


def shutdown_logging() -> None:
    """Detach and close the log file installed by :func:`init_logging`."""

    global _SINK

    with _SINK_LOCK:
        if _SINK is None:
            return
        root = logging.getLogger()
        root.removeHandler(_SINK.handler)
        _SINK.handler.close()
        if _SINK.console_handler is not None:
            # stderr stays open
            root.removeHandler(_SINK.console_handler)
        _SINK = None
