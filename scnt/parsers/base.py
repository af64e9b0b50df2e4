"""
Parser Base

Defines the parser interface used by the counter, and the "Plain Text"
parser that every other parser variant builds on. A parser owns the set of
extensions it claims and turns file contents into line and character
statistics with a single pass over the text.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List, Optional, Sequence, Union

from scnt.core.errors import ArgumentTypeError, InvalidInputError
from scnt.core.extensions import clean_extension
from scnt.core.statistics import CharacterStats, LineStats, Statistics

LOGGER_NAME = "scnt.parsers"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)


# =============================================================================
# Character classes
# =============================================================================

class CharacterClass(Enum):
    WHITESPACE = "whitespace"
    NUMERICAL = "numerical"
    ALPHABETICAL = "alphabetical"
    SPECIAL = "special"


WHITESPACE_PATTERN = re.compile(r"\s")
NUMERICAL_PATTERN = re.compile(r"[0-9]")
ALPHABETICAL_PATTERN = re.compile(r"[A-Za-z]")


def classify_character(char: str) -> CharacterClass:
    """
    Classify a single character. Whitespace wins over digits, digits over
    letters, and anything left is special.
    """
    if WHITESPACE_PATTERN.match(char):
        return CharacterClass.WHITESPACE
    if NUMERICAL_PATTERN.match(char):
        return CharacterClass.NUMERICAL
    if ALPHABETICAL_PATTERN.match(char):
        return CharacterClass.ALPHABETICAL
    return CharacterClass.SPECIAL


def tally_character(chars: CharacterStats, kind: CharacterClass) -> None:
    setattr(chars, kind.value, getattr(chars, kind.value) + 1)


def is_crlf_carriage_return(contents: str, index: int) -> bool:
    """
    True when ``contents[index]`` is the ``\\r`` of a CRLF line terminator.
    """
    return contents[index] == "\r" and contents[index + 1:index + 2] == "\n"


# =============================================================================
# Plain text parser
# =============================================================================

ExtensionArg = Union[str, Sequence[str]]


class Parser:
    """
    Plain text parser.

    Lines are empty, whitespace-only or source; there is no notion of
    comments. Subclasses override ``id``/``name`` and ``_scan`` to add
    language awareness.
    """

    id: str = "plain"
    name: str = "Plain Text"
    default_extensions: tuple = ()

    def __init__(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        extensions: Optional[ExtensionArg] = None,
    ):
        if isinstance(id, str) and id:
            self.id = id
        if isinstance(name, str) and name:
            self.name = name

        self._extensions: List[str] = []
        self.add_extension(list(self.default_extensions))

        if extensions is not None:
            self.add_extension(extensions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"

    # -------------------------------------------------------------------------
    # Extensions
    # -------------------------------------------------------------------------

    def get_extensions(self) -> List[str]:
        return list(self._extensions)

    def has_extension(self, ext: str) -> bool:
        cleaned = clean_extension(ext)
        return cleaned != "" and cleaned in self._extensions

    def add_extension(self, ext: ExtensionArg) -> bool:
        """
        Add one extension, or a list of them.

        Returns True if anything was added. Invalid and already-claimed
        extensions are skipped.

        Raises:
            ArgumentTypeError if given neither a string nor a list of strings
        """
        if isinstance(ext, (list, tuple)):
            for item in ext:
                if not isinstance(item, str):
                    raise ArgumentTypeError(
                        "add_extension expected a string or a list of strings, "
                        f"found an item of type {type(item).__name__!r}"
                    )
            results = [self.add_extension(item) for item in ext]
            return any(results)

        if not isinstance(ext, str):
            raise ArgumentTypeError(
                "add_extension expected a string or a list of strings, "
                f"found {type(ext).__name__!r}"
            )

        cleaned = clean_extension(ext)
        if cleaned == "" or cleaned in self._extensions:
            return False

        self._extensions.append(cleaned)
        return True

    def remove_extension(self, ext: str) -> bool:
        cleaned = clean_extension(ext)
        if cleaned == "" or cleaned not in self._extensions:
            return False

        self._extensions.remove(cleaned)
        return True

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    async def parse(self, contents: str) -> Statistics:
        """
        Classify file contents into line and character statistics.

        Raises:
            InvalidInputError if contents are empty
        """
        if not isinstance(contents, str) or len(contents) == 0:
            raise InvalidInputError(f"{self.name} parser received empty contents")

        return self._scan(contents)

    def _scan(self, contents: str) -> Statistics:
        lines = LineStats()
        chars = CharacterStats()

        line_length = 0
        had_char = False

        def close_line() -> None:
            nonlocal line_length, had_char

            if line_length == 0:
                lines.empty += 1
            elif had_char:
                lines.source += 1
            else:
                lines.whitespace += 1

            line_length = 0
            had_char = False

        for index, char in enumerate(contents):
            if char == "\n":
                close_line()
                continue

            if is_crlf_carriage_return(contents, index):
                continue

            kind = classify_character(char)
            tally_character(chars, kind)
            if kind is not CharacterClass.WHITESPACE:
                had_char = True

            line_length += 1

        # Last line has no terminator
        close_line()

        chars.source = chars.numerical + chars.alphabetical + chars.special
        chars.total = chars.source + chars.whitespace

        lines.total_source = lines.source
        lines.total = lines.source + lines.whitespace + lines.empty

        return Statistics(lines, chars)
