"""
Source Counter

The counter owns the parser registry and the extension aliases, dispatches
each file to the parser claiming its extension and keeps running totals
over every file it has seen. Re-processing a file first undoes its previous
contribution, so totals never double count.

The counter does not read files; callers hand it a filename and the
already-read contents.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from scnt.parsers.base import Parser

from .aliases import AliasPairs, ExtensionAliasTable
from .errors import (
    ArgumentTypeError,
    InvalidArgumentError,
    InvalidInputError,
    ScntError,
    UnresolvableParserError,
)
from .extensions import clean_extension, extract_extension
from .statistics import CharacterStats, LineStats, Statistics

LOGGER_NAME = "scnt.counter"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

ParserRef = Union[Parser, str]


# =============================================================================
# Configuration & results
# =============================================================================

@dataclass
class CounterOptions:
    # Reject files without an extension instead of using the default parser
    require_extension: bool = True
    default_parser: Optional[Parser] = None


@dataclass
class CounterStatistics:
    files: Dict[str, Statistics] = field(default_factory=dict)
    lines: LineStats = field(default_factory=LineStats)
    characters: CharacterStats = field(default_factory=CharacterStats)

    def __iter__(self):
        yield self.files
        yield self.lines
        yield self.characters


@dataclass
class ProcessOutcome:
    file_name: str
    statistics: Optional[Statistics] = None
    error: Optional[ScntError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# Counter
# =============================================================================

class SourceCounter:
    DEFAULT_OPTIONS = CounterOptions()

    def __init__(
        self,
        options: Optional[Union[CounterOptions, Mapping[str, Any]]] = None,
        parsers: Optional[Union[Parser, List[Parser]]] = None,
    ):
        self.options = replace(self.DEFAULT_OPTIONS)

        self._parsers: List[Parser] = []
        self._aliases = ExtensionAliasTable()
        self._files_read: Dict[str, Statistics] = {}
        self._line_stats = LineStats()
        self._char_stats = CharacterStats()
        self._lock = asyncio.Lock()

        if options is not None:
            self.apply_options(options)
        if parsers is not None:
            self.add_parser(parsers)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @property
    def files_read(self) -> Dict[str, Statistics]:
        return {name: stats.copy() for name, stats in self._files_read.items()}

    @property
    def line_statistics(self) -> LineStats:
        return replace(self._line_stats)

    @property
    def character_statistics(self) -> CharacterStats:
        return replace(self._char_stats)

    @property
    def statistics(self) -> CounterStatistics:
        return CounterStatistics(
            files=self.files_read,
            lines=self.line_statistics,
            characters=self.character_statistics,
        )

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    def apply_options(
        self,
        options: Optional[Union[CounterOptions, Mapping[str, Any]]] = None,
        **overrides: Any,
    ) -> CounterOptions:
        """
        Merge overrides onto the default options and apply the result.

        Raises:
            InvalidArgumentError on unknown option names
            ArgumentTypeError if the default parser is not a Parser
        """
        if isinstance(options, CounterOptions):
            values = {f.name: getattr(options, f.name) for f in fields(CounterOptions)}
        elif options is None:
            values = {}
        elif isinstance(options, Mapping):
            values = dict(options)
        else:
            raise ArgumentTypeError(
                f"Options must be CounterOptions or a mapping, got {type(options).__name__!r}"
            )
        values.update(overrides)

        known = {f.name for f in fields(CounterOptions)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidArgumentError(f"Unknown counter options: {', '.join(unknown)}")

        default_parser = values.get("default_parser")
        if default_parser is not None and not isinstance(default_parser, Parser):
            raise ArgumentTypeError(
                f"default_parser must be a Parser, got {type(default_parser).__name__!r}"
            )

        self.options = replace(self.DEFAULT_OPTIONS, **values)
        return self.options

    # -------------------------------------------------------------------------
    # Processing
    # -------------------------------------------------------------------------

    def resolve_parser(self, file_name: str) -> Parser:
        """
        Pick the parser for a filename.

        Raises:
            UnresolvableParserError when no parser applies
        """
        default = None
        if not self.options.require_extension:
            default = self.options.default_parser

        ext = extract_extension(file_name)
        if not ext:
            if default is None:
                raise UnresolvableParserError(
                    f"File {file_name!r} has no extension and no default parser is allowed"
                )
            logger.debug("No extension on %s, using default parser %s", file_name, default.id)
            return default

        aliased = self.alias_extension(ext)
        parser = self.get_parser_for_extension(aliased)
        if parser is not None:
            return parser

        if default is None:
            raise UnresolvableParserError(
                f"No parser registered for extension {aliased!r} of {file_name!r}"
            )

        logger.debug("No parser for %s, using default parser %s", aliased, default.id)
        return default

    async def process(self, file_name: str, contents: str) -> Statistics:
        """
        Classify a file and fold its statistics into the totals.

        Processing a filename again replaces its earlier contribution.

        Raises:
            InvalidInputError if contents are empty
            UnresolvableParserError if no parser can handle the file
        """
        if not isinstance(contents, str) or len(contents) == 0:
            raise InvalidInputError(f"Received empty contents for {file_name!r}")

        parser = self.resolve_parser(file_name)
        stats = await parser.parse(contents)

        await self._reconcile(file_name, stats)
        return stats.copy()

    async def process_many(
        self,
        items: Iterable[Tuple[str, str]],
    ) -> List[ProcessOutcome]:
        """
        Classify several files concurrently and fold the results in order.

        Errors are reported per file rather than raised.
        """
        pending = list(items)

        async def classify(file_name: str, contents: str) -> Statistics:
            if not isinstance(contents, str) or len(contents) == 0:
                raise InvalidInputError(f"Received empty contents for {file_name!r}")
            return await self.resolve_parser(file_name).parse(contents)

        results = await asyncio.gather(
            *(classify(name, contents) for name, contents in pending),
            return_exceptions=True,
        )

        outcomes: List[ProcessOutcome] = []
        for (file_name, _), result in zip(pending, results):
            if isinstance(result, ScntError):
                logger.debug("Skipping %s: %s", file_name, result)
                outcomes.append(ProcessOutcome(file_name=file_name, error=result))
                continue
            if isinstance(result, BaseException):
                raise result

            await self._reconcile(file_name, result)
            outcomes.append(ProcessOutcome(file_name=file_name, statistics=result.copy()))

        return outcomes

    async def _reconcile(self, file_name: str, stats: Statistics) -> None:
        async with self._lock:
            lines = self._line_stats
            chars = self._char_stats

            previous = self._files_read.get(file_name)
            if previous is not None:
                logger.debug("Re-processing %s, replacing earlier statistics", file_name)
                lines = lines - previous.lines
                chars = chars - previous.characters

            self._line_stats = lines + stats.lines
            self._char_stats = chars + stats.characters
            self._files_read[file_name] = stats

    def reset(self) -> None:
        self._files_read.clear()
        self._line_stats = LineStats()
        self._char_stats = CharacterStats()

    # -------------------------------------------------------------------------
    # Parser registry
    # -------------------------------------------------------------------------

    def _index_of(self, parser: ParserRef) -> int:
        if isinstance(parser, Parser):
            for index, registered in enumerate(self._parsers):
                if registered is parser or registered.id == parser.id:
                    return index
        elif isinstance(parser, str):
            for index, registered in enumerate(self._parsers):
                if registered.id == parser:
                    return index
        return -1

    def has_parser(self, parser: ParserRef) -> bool:
        return self._index_of(parser) != -1

    def get_parser(self, parser: ParserRef) -> Optional[Parser]:
        index = self._index_of(parser)
        return self._parsers[index] if index != -1 else None

    def add_parser(self, parser: Union[Parser, List[Parser]]) -> bool:
        """
        Register a parser, or a list of them.

        Returns True if anything was added; parsers whose id is already
        registered are skipped.

        Raises:
            ArgumentTypeError on anything that is not a Parser
        """
        if isinstance(parser, (list, tuple)):
            for item in parser:
                if not isinstance(item, Parser):
                    raise ArgumentTypeError(
                        f"add_parser expected Parser instances, found {type(item).__name__!r}"
                    )
            results = [self.add_parser(item) for item in parser]
            return any(results)

        if not isinstance(parser, Parser):
            raise ArgumentTypeError(
                f"add_parser expected a Parser or a list of them, found {type(parser).__name__!r}"
            )

        if self.has_parser(parser.id):
            return False

        self._parsers.append(parser)
        logger.debug("Registered parser %s (%s)", parser.id, parser.name)
        return True

    def remove_parser(self, parser: ParserRef) -> bool:
        index = self._index_of(parser)
        if index == -1:
            return False
        del self._parsers[index]
        return True

    def get_all_parsers(self) -> List[Parser]:
        return list(self._parsers)

    def clear_parsers(self) -> None:
        self._parsers.clear()

    def has_parser_for_extension(self, ext: str) -> bool:
        return self.get_parser_for_extension(ext) is not None

    def get_parser_for_extension(self, ext: str) -> Optional[Parser]:
        """
        First registered parser claiming the extension. Never the default.
        """
        cleaned = clean_extension(ext)
        if not cleaned:
            return None

        for parser in self._parsers:
            if parser.has_extension(cleaned):
                return parser
        return None

    # -------------------------------------------------------------------------
    # Extension aliases
    # -------------------------------------------------------------------------

    def add_extension_alias(self, old: str, new: str) -> Optional[str]:
        return self._aliases.add(old, new)

    def add_extension_aliases(self, pairs: AliasPairs) -> List[Tuple[str, str]]:
        return self._aliases.add_many(pairs)

    def remove_extension_alias(self, ext: str) -> bool:
        return self._aliases.remove(ext)

    def get_extension_alias(self, ext: str) -> Optional[str]:
        return self._aliases.get(ext)

    def get_extension_aliases(self) -> List[Tuple[str, str]]:
        return self._aliases.items()

    def clear_extension_aliases(self) -> None:
        self._aliases.clear()

    def alias_extension(self, ext: str) -> str:
        return self._aliases.resolve(ext)
