"""
Filesystem Utilities

Turns command line inputs (files, directories, glob patterns) into the list
of files to count, and reads them defensively.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from scnt.core.errors import FileReadError

LOGGER_NAME = "scnt.filesystem"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)


# =============================================================================
# Directory walking
# =============================================================================

DEFAULT_EXCLUDED_DIRS: Set[str] = {
    ".git",
    ".hg",
    ".svn",
    "__pycache__",
    "node_modules",
    ".venv",
    "venv",
    ".idea",
    ".vscode",
}


def should_exclude_directory(
    dir_name: str,
    extra_excludes: Optional[Iterable[str]] = None,
) -> bool:
    """
    Determine whether a directory should be skipped during traversal.
    """
    excludes = set(DEFAULT_EXCLUDED_DIRS)
    if extra_excludes:
        excludes.update(extra_excludes)
    return dir_name in excludes


def walk_files(
    root: Path,
    *,
    exclude_dirs: Optional[Iterable[str]] = None,
) -> Iterator[Path]:
    """
    Recursively yield every file below ``root`` in a stable order.
    """
    for current_root, dirs, files in os.walk(root):
        root_path = Path(current_root)

        # Modify dirs in-place to control recursion
        dirs[:] = sorted(
            d for d in dirs
            if not should_exclude_directory(d, exclude_dirs)
        )

        for f in sorted(files):
            yield root_path / f


def is_excluded(path: Path, patterns: Iterable[re.Pattern[str]]) -> bool:
    text = str(path)
    for pattern in patterns:
        if pattern.search(text):
            logger.debug("File %s matched exclusion %s, skipping", text, pattern.pattern)
            return True
    return False


def expand_inputs(
    inputs: Iterable[str],
    *,
    exclude: Iterable[re.Pattern[str]] = (),
    exclude_dirs: Optional[Iterable[str]] = None,
) -> List[Path]:
    """
    Resolve files, directories and glob patterns into unique absolute paths,
    preserving discovery order.
    """
    patterns = list(exclude)
    seen: Set[Path] = set()
    files: List[Path] = []

    def consider(path: Path) -> None:
        resolved = path.resolve()
        if resolved in seen or is_excluded(resolved, patterns):
            return
        seen.add(resolved)
        files.append(resolved)

    for raw in inputs:
        logger.info("Searching paths for %s", raw)
        candidate = Path(raw)

        if candidate.is_dir():
            for item in walk_files(candidate, exclude_dirs=exclude_dirs):
                consider(item)
            continue

        if candidate.is_file():
            consider(candidate)
            continue

        matches = sorted(glob.glob(raw, recursive=True))
        if not matches:
            logger.warning("No files matched %s", raw)

        for match in matches:
            path = Path(match)
            if path.is_file():
                consider(path)

    return files


# =============================================================================
# Reading
# =============================================================================

def is_binary_file(path: Path, sample_size: int = 1024) -> bool:
    """
    Heuristically determine whether a file is binary by looking for null
    bytes in a small sample.
    """
    try:
        with path.open("rb") as handle:
            return b"\x00" in handle.read(sample_size)
    except OSError:
        return False


def safe_read_text(
    path: Path,
    *,
    encoding: str = "utf-8",
    errors: str = "ignore",
) -> str:
    """
    Read a text file. Binary files read as an empty string.

    Raises:
        FileReadError if the file is missing or cannot be read
    """
    if not path.is_file():
        raise FileReadError(f"Path is not a file: {path}")

    if is_binary_file(path):
        logger.debug("Treating %s as binary", path)
        return ""

    try:
        # newline="" keeps CRLF terminators for the parsers to see
        with path.open("r", encoding=encoding, errors=errors, newline="") as handle:
            return handle.read()
    except OSError as exc:
        raise FileReadError(f"Failed to read file {path}: {exc}") from exc
