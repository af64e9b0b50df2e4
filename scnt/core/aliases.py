"""
Extension Alias Table

One-hop rewrites from one extension to another, consulted before a parser
is looked up. Resolution never follows chains, so ``a -> b, b -> a`` can
not loop.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import InvalidArgumentError
from .extensions import clean_extension

LOGGER_NAME = "scnt.aliases"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

AliasPairs = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _clean_pair(old: Any, new: Any) -> Tuple[str, str]:
    first = clean_extension(old)
    second = clean_extension(new)

    if not first and not second:
        raise InvalidArgumentError(f"Neither {old!r} nor {new!r} is a valid extension")
    if not first:
        raise InvalidArgumentError(f"Alias source {old!r} is not a valid extension")
    if not second:
        raise InvalidArgumentError(f"Alias target {new!r} is not a valid extension")

    return first, second


def _normalize_pairs(pairs: AliasPairs) -> List[Tuple[str, str]]:
    items = pairs.items() if isinstance(pairs, Mapping) else pairs

    cleaned: List[Tuple[str, str]] = []
    for entry in items:
        if isinstance(entry, str) or not isinstance(entry, (tuple, list)) or len(entry) != 2:
            raise InvalidArgumentError(
                f"Alias entries must be (extension, extension) pairs, got {entry!r}"
            )
        cleaned.append(_clean_pair(entry[0], entry[1]))
    return cleaned


class ExtensionAliasTable:
    def __init__(self, pairs: Optional[AliasPairs] = None):
        self._aliases: Dict[str, str] = {}
        if pairs:
            self.add_many(pairs)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, ext: object) -> bool:
        return clean_extension(ext) in self._aliases

    def add(self, old: str, new: str) -> Optional[str]:
        """
        Alias ``old`` to ``new``.

        Returns the replaced target if ``old`` was already aliased.

        Raises:
            InvalidArgumentError if either side is not a valid extension
        """
        first, second = _clean_pair(old, new)
        previous = self._aliases.get(first)
        self._aliases[first] = second

        if previous is not None and previous != second:
            logger.debug("Alias %s now maps to %s (was %s)", first, second, previous)
        return previous

    def add_many(self, pairs: AliasPairs) -> List[Tuple[str, str]]:
        """
        Add several aliases at once.

        Every entry is validated before any is written. Returns the
        ``(extension, previous_target)`` pairs that were overwritten.
        """
        cleaned = _normalize_pairs(pairs)

        overwritten: List[Tuple[str, str]] = []
        for first, second in cleaned:
            previous = self.add(first, second)
            if previous is not None:
                overwritten.append((first, previous))
        return overwritten

    def remove(self, ext: str) -> bool:
        cleaned = clean_extension(ext)
        if cleaned not in self._aliases:
            return False
        del self._aliases[cleaned]
        return True

    def get(self, ext: str) -> Optional[str]:
        return self._aliases.get(clean_extension(ext))

    def items(self) -> List[Tuple[str, str]]:
        return list(self._aliases.items())

    def clear(self) -> None:
        self._aliases.clear()

    def resolve(self, ext: str) -> str:
        """
        Apply at most one alias substitution to a cleaned extension.
        """
        cleaned = clean_extension(ext)
        return self._aliases.get(cleaned, cleaned)
