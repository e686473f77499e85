# toolshelf/config.py

import errno
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

# --- Base paths ---
# Project root can be overridden if needed (e.g. for tests or packaged builds)
BASE_DIR = os.path.abspath(os.getenv("TOOLSHELF_BASE_DIR", os.path.join(os.path.dirname(__file__), "..")))

DOCUMENT_SUBDIR = "document"
CONFIG_SUBDIR = "config"
LOGS_SUBDIR = "logs"


# ---------------------------
# Structured configuration
# ---------------------------

@dataclass(frozen=True)
class PathsConfig:
    """Resource directory layout.

    The resource root is supplied by the desktop shell; when running from a
    checkout it defaults to ``<BASE_DIR>/resources`` and can be overridden via
    the ``TOOLSHELF_RESOURCE_DIR`` environment variable.
    """

    resource_root: str = field(
        default_factory=lambda: os.getenv(
            "TOOLSHELF_RESOURCE_DIR", os.path.join(BASE_DIR, "resources")
        )
    )

    def _subdir(self, name: str) -> Path:
        # An unset root means the shell could not resolve one
        if self.resource_root is None or str(self.resource_root) == "":
            raise FileNotFoundError(errno.ENOENT, "Resource directory cannot be resolved", name)
        return Path(self.resource_root) / name

    def document_dir(self) -> Path:
        return self._subdir(DOCUMENT_SUBDIR)

    def config_dir(self) -> Path:
        return self._subdir(CONFIG_SUBDIR)

    def logs_dir(self) -> Path:
        return self._subdir(LOGS_SUBDIR)

    def document_path(self, filename: str) -> Path:
        return self.document_dir() / filename

    def config_path(self, filename: str) -> Path:
        return self.config_dir() / filename


@dataclass(frozen=True)
class LoggingConfig:
    """Log file settings.

    ``level_env_var`` names the environment variable that overrides the
    minimum severity (``error``, ``warn``, ``info``, ``debug``, ``trace`` or
    ``off``). Setting ``console_env_var`` to ``1`` also echoes log lines to
    stderr, coloured by level when stderr is a terminal.
    """

    level_env_var: str = "TOOLSHELF_LOG"
    console_env_var: str = "TOOLSHELF_LOG_CONSOLE"
    default_level: int = logging.DEBUG
    line_format: str = "%(asctime)s [%(level_label)s] %(name)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_date_format: str = "%Y%m%d"
    encoding: str = "utf-8"


# ---------------------------------------------------------------------------
# Module-level aliases
# ---------------------------------------------------------------------------

PATHS = PathsConfig()
LOGGING = LoggingConfig()

RESOURCE_DIR = PATHS.resource_root