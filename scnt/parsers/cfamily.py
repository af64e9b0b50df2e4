"""
C-Family Parser

Comment-aware parser for languages sharing C's ``//`` and ``/* */`` comment
syntax. Detection is naive: string literals and nested comments are not
understood.
"""

from __future__ import annotations

from scnt.core.statistics import CharacterStats, LineStats, Statistics

from .base import (
    CharacterClass,
    Parser,
    classify_character,
    is_crlf_carriage_return,
    logger,
    tally_character,
)

C_FAMILY_EXTENSIONS = (
    # C, C++ and C#
    "c", "cpp", "cc", "cxx", "cs", "h", "hpp", "hx", "hxx",
    # JavaScript / TypeScript
    "js", "mjs", "jsx", "ts", "tsx",
    # Java / Kotlin
    "java", "kt", "kts", "ktm",
    # PHP
    "php", "php5",
    # Apple
    "m", "mm", "swift",
    # Scala
    "scala", "sc",
    # CSS preprocessors
    "sass", "scss", "less",
    "go", "rs",
)

INLINE_OPEN = "//"
BLOCK_OPEN = "/*"
BLOCK_CLOSE = "*/"


class CFamilyParser(Parser):
    id = "cfamily"
    name = "C-Family"
    default_extensions = C_FAMILY_EXTENSIONS

    def _scan(self, contents: str) -> Statistics:
        lines = LineStats()
        chars = CharacterStats()

        in_inline = False
        in_block = False

        line_length = 0
        had_char = False
        had_source = False
        previous = ""

        def close_line() -> None:
            nonlocal in_inline, line_length, had_char, had_source, previous

            if in_inline:
                if had_source:
                    lines.mixed += 1
                else:
                    lines.inline_comments += 1
            elif in_block:
                if had_source:
                    lines.mixed += 1
                else:
                    lines.block_comments += 1
            elif line_length == 0:
                lines.empty += 1
            elif had_char:
                lines.source += 1
            else:
                lines.whitespace += 1

            lines.total += 1

            # Inline comments end with the line, block comments carry over
            in_inline = False
            line_length = 0
            had_char = False
            had_source = False
            previous = ""

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

            pair = previous + char
            previous = char

            if not in_inline and not in_block and pair == INLINE_OPEN:
                in_inline = True
                # The marker's first character was tallied as source before
                # the second arrived; neither half is source.
                chars.source -= 1
                chars.comment += 2
                previous = ""
            elif not in_block and pair == BLOCK_OPEN:
                if in_inline:
                    # The slash is already comment text
                    in_inline = False
                    chars.comment += 1
                else:
                    chars.source -= 1
                    chars.comment += 2
                in_block = True
                previous = ""
            elif in_block and pair == BLOCK_CLOSE:
                in_block = False
                chars.comment += 1
                previous = ""
            elif in_inline or in_block:
                chars.comment += 1
            elif kind is not CharacterClass.WHITESPACE:
                chars.source += 1
                # Only letters and digits confirm source for a mixed line
                if kind in (CharacterClass.NUMERICAL, CharacterClass.ALPHABETICAL):
                    had_source = True

            line_length += 1

        # Last line has no terminator
        close_line()

        chars.total = chars.whitespace + chars.numerical + chars.alphabetical + chars.special

        lines.total_source = lines.source + lines.mixed
        lines.total_comments = lines.inline_comments + lines.block_comments + lines.mixed

        if lines.categorized_total() != lines.total:
            logger.warning(
                "C-Family got inconsistent counts, expected %d lines but got %d",
                lines.total,
                lines.categorized_total(),
            )

        return Statistics(lines, chars)
