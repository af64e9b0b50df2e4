"""
Extension Utilities

Helpers for normalizing and validating the file extensions used to pick a
parser for a file.
"""

from __future__ import annotations

from typing import Any

DISALLOWED_CHARACTERS = frozenset("\0\\/:*'\"<>|.")


def has_extension(name: Any) -> bool:
    """
    Check whether a filename carries a usable extension.

    Hidden files such as ``.gitignore`` and names ending with a dot do not.
    """
    if not isinstance(name, str) or not name:
        return False

    index = name.rfind(".")
    return 1 <= index < len(name) - 1


def clean_extension(ext: Any) -> str:
    """
    Normalize an extension fragment.

    Only the text after the last dot is kept. Returns an empty string if the
    value is not a string or contains a character that cannot appear in an
    extension.
    """
    if not isinstance(ext, str):
        return ""

    candidate = ext.rsplit(".", 1)[-1]
    if any(char in DISALLOWED_CHARACTERS for char in candidate):
        return ""

    return candidate.lower().strip()


def extract_extension(name: Any) -> str:
    """
    Extract the cleaned extension from a filename, or ``""`` if there is none.

    Only the final segment counts: ``multi.ext.file`` gives ``file``.
    """
    if not has_extension(name):
        return ""

    return clean_extension(name[name.rfind(".") + 1:])
