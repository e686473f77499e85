"""Request boundary used by the desktop shell and the HTTP bridge.

Each command returns a tagged result instead of raising. Envelope commands
serialize it to ``{"result": ...}`` or ``{"error": "..."}`` JSON text; the
config and logging commands hand back the :class:`CommandResult` itself.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict

from toolshelf.config import PathsConfig
from toolshelf.csv_reader import filter_records, read_csv_file, read_type_set
from toolshelf.errors import error_message
from toolshelf.folders import folder_files
from toolshelf.logging_setup import TRACE, init_logging

__all__ = [
    "CommandResult",
    "DEFAULT_TAG_COLOR",
    "csv_list",
    "read_csv",
    "read_json_file",
    "read_type",
    "setup_logging",
    "tag_color",
    "tag_colors",
]

logger = logging.getLogger(__name__)

DEFAULT_TAG_COLOR = {"background": "#e0e0e0", "text": "#000000"}
TAG_COLORS_FILENAME = "hashtagColors.json"


@dataclass(frozen=True)
class CommandResult:
    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "CommandResult":
        return cls(result=value)

    @classmethod
    def failure(cls, message: str) -> "CommandResult":
        return cls(error=message)

    def to_envelope(self) -> Dict[str, Any]:
        if self.ok:
            return {"result": self.result}
        return {"error": self.error}

    def to_json(self) -> str:
        return json.dumps(self.to_envelope(), ensure_ascii=False, separators=(",", ":"))


def _run(name: str, fn: Callable[[], Any]) -> CommandResult:
    try:
        return CommandResult.success(fn())
    except Exception as exc:
        logger.error("%s failed: %s", name, exc)
        return CommandResult.failure(error_message(exc))


def read_csv(resource_root: str | Path, filename: str, keyword: str | None = None) -> str:
    """Records of ``document/<filename>`` as a JSON envelope.

    ``keyword`` optionally narrows the records to those containing it.
    """

    logger.info("Loading CSV file: %s", filename)

    def load() -> list:
        records = read_csv_file(resource_root, filename)
        if keyword:
            records = filter_records(records, keyword)
            logger.debug("Keyword %r kept %d records", keyword, len(records))
        return [record.to_json_dict() for record in records]

    return _run("read_csv", load).to_json()


def read_type(resource_root: str | Path, filename: str) -> str:
    """Distinct ``Type`` tags of ``document/<filename>`` as a JSON envelope.

    The set is emitted sorted so identical input gives identical text.
    """

    logger.debug("Reading type set: %s", filename)
    return _run("read_type", lambda: sorted(read_type_set(resource_root, filename))).to_json()


def csv_list(resource_root: str | Path) -> str:
    """Names under ``document/`` as a JSON envelope."""

    def listing() -> list:
        names = folder_files(PathsConfig(resource_root=resource_root).document_dir())
        logger.log(TRACE, "document/ holds %d entries", len(names))
        return names

    return _run("csv_list", listing).to_json()


def read_json_file(resource_root: str | Path, filename: str) -> CommandResult:
    """Raw text of ``config/<filename>``."""

    try:
        config_path = PathsConfig(resource_root=resource_root).config_path(filename)
    except OSError as exc:
        return CommandResult.failure(f"Unable to resolve resource directory: {exc}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Unable to read config file %s: %s", filename, exc)
        return CommandResult.failure(f"Unable to read file: {exc}")

    return CommandResult.success(text)


def setup_logging(resource_root: str | Path) -> CommandResult:
    """Start-up hook: install the log file, reporting failure on stderr only."""

    try:
        sink = init_logging(resource_root)
    except Exception as exc:
        print(f"Failed to setup logging: {exc}", file=sys.stderr)
        return CommandResult.failure(error_message(exc))

    logger.info("Logging to %s", sink.path)
    return CommandResult.success(str(sink.path))


def tag_colors(resource_root: str | Path, filename: str = TAG_COLORS_FILENAME) -> Dict[str, Dict[str, str]]:
    """Tag colour palette from ``config/<filename>``; ``{}`` when unavailable."""

    loaded = read_json_file(resource_root, filename)
    if not loaded.ok:
        return {}
    try:
        palette = json.loads(loaded.result)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid tag colour file %s: %s", filename, exc)
        return {}
    if not isinstance(palette, dict):
        logger.warning("Tag colour file %s is not a JSON object", filename)
        return {}
    return palette


def tag_color(palette: Dict[str, Any], tag: str) -> Dict[str, str]:
    color = palette.get(tag)
    if isinstance(color, dict) and "background" in color and "text" in color:
        return {"background": str(color["background"]), "text": str(color["text"])}
    return dict(DEFAULT_TAG_COLOR)
