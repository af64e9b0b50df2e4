"""
Statistics Model

Line and character tallies produced by a parser, and the arithmetic the
counter needs to apply and undo them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterator, Tuple


def _combine(left: Any, right: Any, sign: int) -> Any:
    values = {
        f.name: getattr(left, f.name) + sign * getattr(right, f.name)
        for f in fields(left)
    }
    return type(left)(**values)


@dataclass
class LineStats:
    """
    Number of lines falling in each category.

    ``total_source`` counts pure source lines plus mixed lines,
    ``total_comments`` counts inline, block and mixed lines.
    """

    total: int = 0
    total_source: int = 0
    source: int = 0
    total_comments: int = 0
    inline_comments: int = 0
    block_comments: int = 0
    mixed: int = 0
    whitespace: int = 0
    empty: int = 0

    def __add__(self, other: "LineStats") -> "LineStats":
        return _combine(self, other, 1)

    def __sub__(self, other: "LineStats") -> "LineStats":
        return _combine(self, other, -1)

    def categorized_total(self) -> int:
        return (
            self.source
            + self.inline_comments
            + self.block_comments
            + self.mixed
            + self.whitespace
            + self.empty
        )

    def is_consistent(self) -> bool:
        return (
            self.total == self.categorized_total()
            and self.total_source == self.source + self.mixed
            and self.total_comments
            == self.inline_comments + self.block_comments + self.mixed
        )

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class CharacterStats:
    """
    Number of characters falling in each class.

    Line terminators are not counted. ``comment`` overlaps the class
    counters: a commented letter counts as both ``alphabetical`` and
    ``comment``.
    """

    total: int = 0
    source: int = 0
    comment: int = 0
    whitespace: int = 0
    numerical: int = 0
    alphabetical: int = 0
    special: int = 0

    def __add__(self, other: "CharacterStats") -> "CharacterStats":
        return _combine(self, other, 1)

    def __sub__(self, other: "CharacterStats") -> "CharacterStats":
        return _combine(self, other, -1)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class Statistics:
    """
    Result of one classification pass.

    Unpacks like a pair::

        lines, chars = stats
    """

    lines: LineStats = field(default_factory=LineStats)
    characters: CharacterStats = field(default_factory=CharacterStats)

    @classmethod
    def empty(cls) -> "Statistics":
        return cls()

    def __iter__(self) -> Iterator:
        yield self.lines
        yield self.characters

    def __add__(self, other: "Statistics") -> "Statistics":
        return Statistics(self.lines + other.lines, self.characters + other.characters)

    def __sub__(self, other: "Statistics") -> "Statistics":
        return Statistics(self.lines - other.lines, self.characters - other.characters)

    def copy(self) -> "Statistics":
        return Statistics(LineStats(**asdict(self.lines)), CharacterStats(**asdict(self.characters)))

    def as_tuple(self) -> Tuple[LineStats, CharacterStats]:
        return self.lines, self.characters

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "lines": self.lines.as_dict(),
            "characters": self.characters.as_dict(),
        }
