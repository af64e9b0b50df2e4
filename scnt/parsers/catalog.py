"""
Parser Catalogue

Known parser variants by id, and the start-up wiring that registers them on
a counter.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Type

from scnt.core.counter import SourceCounter
from scnt.core.errors import InvalidArgumentError

from .base import Parser
from .cfamily import CFamilyParser

LOGGER_NAME = "scnt.parsers.catalog"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

PARSER_TYPES: Dict[str, Type[Parser]] = {
    Parser.id: Parser,
    CFamilyParser.id: CFamilyParser,
}

# Extensions handed to parsers that ship without any
SEED_EXTENSIONS: Dict[str, tuple] = {
    Parser.id: ("txt", "text"),
}


def available_parser_ids() -> List[str]:
    return list(PARSER_TYPES)


def create_parser(parser_id: str) -> Parser:
    """
    Construct a parser by id.

    Raises:
        InvalidArgumentError for unknown ids
    """
    key = parser_id.lower().strip() if isinstance(parser_id, str) else parser_id
    parser_type = PARSER_TYPES.get(key)
    if parser_type is None:
        raise InvalidArgumentError(
            f"Unknown parser id {parser_id!r}, expected one of: {', '.join(PARSER_TYPES)}"
        )

    return parser_type(extensions=list(SEED_EXTENSIONS.get(key, ())))


def register_parsers(
    counter: SourceCounter,
    parser_ids: Optional[Iterable[str]] = None,
    *,
    default_id: Optional[str] = None,
    allow_unknowns: bool = False,
) -> List[Parser]:
    """
    Register the requested parsers (all of them by default) on a counter.

    When ``allow_unknowns`` is set, files without a known extension fall back
    to the default parser (``default_id``, or plain text).

    Returns the parsers that were added.
    """
    ids = list(parser_ids) if parser_ids else available_parser_ids()

    added: List[Parser] = []
    for parser_id in ids:
        parser = create_parser(parser_id)
        if counter.add_parser(parser):
            added.append(parser)
        else:
            logger.debug("Parser %s already registered", parser.id)

    default_parser = None
    if default_id is not None or allow_unknowns:
        default_key = default_id or Parser.id
        default_parser = counter.get_parser(default_key.lower().strip()) or create_parser(default_key)

    counter.apply_options(
        require_extension=not allow_unknowns,
        default_parser=default_parser,
    )

    logger.debug(
        "Registered parsers: %s (default: %s)",
        ", ".join(p.id for p in counter.get_all_parsers()),
        default_parser.id if default_parser else "none",
    )
    return added
