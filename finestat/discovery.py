"""Input file discovery."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Union

from finestat.logging import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = ".json"


def list_input_files(
    directory: Union[str, Path], extension: str = DEFAULT_EXTENSION
) -> List[Path]:
    """List files directly inside ``directory`` whose name ends with ``extension``.

    The match is case-insensitive (``A.JSON`` matches ``.json``). Subdirectories
    are skipped, including ones whose name matches, as are FIFOs, sockets and
    broken symlinks. Symlinks to regular files are kept. Results are sorted by name.

    Args:
        directory: Directory to scan (not recursive).
        extension: File name suffix to keep, including the dot.

    Returns:
        Matching file paths; empty when nothing matches.

    Raises:
        FileNotFoundError: If the directory does not exist.
        NotADirectoryError: If the path is not a directory.
        PermissionError: If the directory cannot be listed.
    """
    root = Path(directory)
    suffix = extension.lower()

    files: List[Path] = []
    with os.scandir(root) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            if entry.name.lower().endswith(suffix):
                files.append(root / entry.name)

    files.sort(key=lambda p: p.name)
    logger.debug(f"Discovered {len(files)} '{extension}' file(s) in {root}")
    return files

