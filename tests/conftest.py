"""Pytest configuration to make the project root importable.

This ensures that ``import toolshelf`` and ``import api`` work when tests are
run from the repository root or other locations. Shared fixtures build a
throwaway resource root with ``document/`` and ``config/`` folders.
"""

import json
import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from toolshelf.logging_setup import shutdown_logging  # noqa: E402


SAMPLE_CSV = (
    "Name,Notes,URL,Level,Example,Platform,Type,OS,Language,Category\n"
    'ripgrep,Fast recursive grep,https://github.com/BurntSushi/ripgrep,5,rg --files,"Linux, macOS",CLI,'
    '"Linux, macOS, Windows",Rust,Search\n'
    'Neovim,Modal editor,https://neovim.io,4,,Linux,"Editor, CLI",Linux,"C, Lua",Editor\n'
)

SAMPLE_COLORS = {
    "CLI": {"background": "#263238", "text": "#ffffff"},
    "Editor": {"background": "#ffe082", "text": "#000000"},
}


@pytest.fixture
def resource_root(tmp_path):
    """Resource root with one catalogue CSV and a tag colour palette."""
    (tmp_path / "document").mkdir()
    (tmp_path / "config").mkdir()
    (tmp_path / "document" / "Linux.csv").write_text(SAMPLE_CSV, encoding="utf-8")
    (tmp_path / "config" / "hashtagColors.json").write_text(json.dumps(SAMPLE_COLORS), encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def _release_log_sink():
    yield
    shutdown_logging()
