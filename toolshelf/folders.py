from __future__ import annotations

import os
from pathlib import Path
from typing import List


def _is_text(name: str) -> bool:
    # Undecodable bytes in a file name surface as lone surrogates.
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def folder_files(path: str | Path) -> List[str]:
    """List the names in ``path`` sorted case-insensitively.

    Immediate children only, files and directories alike. Entries whose name
    is not valid text are skipped; failing to open ``path`` itself raises the
    underlying ``OSError``.
    """

    with os.scandir(path) as entries:
        names = [entry.name for entry in entries if _is_text(entry.name)]

    names.sort(key=str.lower)
    return names
