"""
CLI Runner

Wires a counter from command line configuration, feeds it the requested
files and collects the outcome for rendering.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from scnt.core.counter import CounterStatistics, SourceCounter
from scnt.core.errors import FileReadError, ScntError
from scnt.parsers.catalog import register_parsers
from scnt.utils.filesystem import expand_inputs, safe_read_text

from .arguments import merge_aliases
from .report import build_report, render

LOGGER_NAME = "scnt.runner"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)


@dataclass
class RunConfiguration:
    paths: List[str] = field(default_factory=list)
    exclude: List[re.Pattern[str]] = field(default_factory=list)
    aliases: Dict[str, str] = field(default_factory=dict)
    parser_ids: Optional[List[str]] = None
    default_parser: Optional[str] = None
    allow_unknowns: bool = False
    dry_run: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfiguration":
        return cls(
            paths=list(args.paths),
            exclude=list(args.exclude),
            aliases=merge_aliases(args.alias),
            parser_ids=args.parsers,
            default_parser=args.default,
            allow_unknowns=args.allow_unknowns,
            dry_run=args.dry,
        )


@dataclass
class RunResult:
    files: List[Path]
    statistics: CounterStatistics
    skipped: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.files) and not self.statistics.files

    def to_report(self) -> Dict:
        return build_report(self.statistics, self.skipped)


def build_counter(config: RunConfiguration) -> SourceCounter:
    counter = SourceCounter()
    register_parsers(
        counter,
        config.parser_ids,
        default_id=config.default_parser,
        allow_unknowns=config.allow_unknowns,
    )
    if config.aliases:
        counter.add_extension_aliases(config.aliases)
    return counter


async def count_paths(
    counter: SourceCounter,
    paths: Sequence[Path],
) -> List[Tuple[str, str]]:
    """
    Process files one at a time, reading the next file while the current one
    is classified. Returns the files that were skipped and why.
    """
    skipped: List[Tuple[str, str]] = []

    def start_read(index: int) -> Optional[asyncio.Future]:
        if index >= len(paths):
            return None
        return asyncio.ensure_future(asyncio.to_thread(safe_read_text, paths[index]))

    pending = start_read(0)
    try:
        for index, path in enumerate(paths):
            current = pending
            pending = start_read(index + 1)

            try:
                contents = await current
            except FileReadError as exc:
                logger.warning("Skipping %s: %s", path, exc)
                skipped.append((str(path), str(exc)))
                continue

            logger.debug("Parsing file %s", path)
            try:
                await counter.process(str(path), contents)
            except ScntError as exc:
                logger.debug("Skipping %s: %s", path, exc)
                skipped.append((str(path), str(exc)))
    finally:
        # An unexpected error leaves the read-ahead in flight
        if pending is not None and not pending.done():
            pending.cancel()
            await asyncio.gather(pending, return_exceptions=True)

    return skipped


def run_analysis(config: RunConfiguration) -> RunResult:
    counter = build_counter(config)
    files = expand_inputs(config.paths, exclude=config.exclude)

    if config.dry_run:
        for path in files:
            logger.info("Would count %s", path)
        return RunResult(files=files, statistics=counter.statistics)

    skipped = asyncio.run(count_paths(counter, files))
    return RunResult(files=files, statistics=counter.statistics, skipped=skipped)


def render_result(result: RunResult, as_json: bool) -> str:
    return render(result.to_report(), as_json)
