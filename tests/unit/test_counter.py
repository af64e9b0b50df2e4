import asyncio

import pytest

from scnt.core.counter import CounterOptions, CounterStatistics, SourceCounter
from scnt.core.errors import (
    ArgumentTypeError,
    InvalidArgumentError,
    InvalidInputError,
    UnresolvableParserError,
)
from scnt.core.statistics import CharacterStats, LineStats, Statistics
from scnt.parsers.base import Parser
from scnt.parsers.cfamily import CFamilyParser

C_SOURCE = "int a; // note\n/* doc\n */\nreturn 0;\n"


def run(coro):
    return asyncio.run(coro)


def summed(counter: SourceCounter) -> Statistics:
    total = Statistics.empty()
    for stats in counter.files_read.values():
        total = total + stats
    return total


@pytest.fixture
def counter() -> SourceCounter:
    return SourceCounter(parsers=[Parser(extensions=["txt"]), CFamilyParser()])


# =============================================================================
# Construction & options
# =============================================================================

def test_constructs_with_empty_statistics():
    obj = SourceCounter()

    assert obj.line_statistics == LineStats()
    assert obj.character_statistics == CharacterStats()
    assert obj.files_read == {}
    assert obj.statistics == CounterStatistics()


def test_default_options():
    obj = SourceCounter()
    assert obj.options == CounterOptions(require_extension=True, default_parser=None)


def test_apply_options_merges_with_defaults():
    obj = SourceCounter()
    plain = Parser()

    options = obj.apply_options({"default_parser": plain})
    assert options.require_extension is True
    assert options.default_parser is plain

    options = obj.apply_options(require_extension=False)
    assert options == CounterOptions(require_extension=False, default_parser=None)

    assert obj.apply_options({}) == SourceCounter.DEFAULT_OPTIONS


def test_apply_options_rejects_unknown_keys():
    with pytest.raises(InvalidArgumentError):
        SourceCounter().apply_options({"some": "example"})


def test_apply_options_rejects_non_parser_default():
    with pytest.raises(ArgumentTypeError):
        SourceCounter().apply_options(default_parser="plain")


# =============================================================================
# Parser registry
# =============================================================================

def test_parser_registry():
    obj = SourceCounter()
    plain = Parser()
    cfamily = CFamilyParser()

    assert obj.add_parser(plain) is True
    assert obj.add_parser(Parser()) is False
    assert obj.add_parser([plain, cfamily]) is True

    assert obj.has_parser("plain")
    assert obj.has_parser(cfamily)
    assert obj.get_parser("cfamily") is cfamily
    assert obj.get_parser("missing") is None
    assert [p.id for p in obj.get_all_parsers()] == ["plain", "cfamily"]

    assert obj.remove_parser("plain") is True
    assert obj.remove_parser(plain) is False
    assert obj.get_all_parsers() == [cfamily]

    obj.clear_parsers()
    assert obj.get_all_parsers() == []


@pytest.mark.parametrize("value", ["plain", 5, None, [Parser(), "cfamily"]])
def test_add_parser_rejects_non_parsers(value):
    with pytest.raises(ArgumentTypeError):
        SourceCounter().add_parser(value)


def test_get_all_parsers_is_a_snapshot(counter: SourceCounter):
    snapshot = counter.get_all_parsers()
    snapshot.clear()
    assert len(counter.get_all_parsers()) == 2


def test_parser_for_extension():
    obj = SourceCounter(parsers=CFamilyParser())

    assert obj.has_parser_for_extension("jpg") is False
    assert obj.get_parser_for_extension("jpg") is None
    assert obj.has_parser_for_extension(".TS") is True
    assert obj.get_parser_for_extension("c").id == "cfamily"
    assert obj.get_parser_for_extension("bad/ext") is None


def test_parser_for_extension_ignores_default():
    plain = Parser()
    obj = SourceCounter({"require_extension": False, "default_parser": plain})

    assert obj.get_parser_for_extension("txt") is None


def test_first_registered_parser_wins():
    first = Parser("one", "One", ["x"])
    second = Parser("two", "Two", ["x"])
    obj = SourceCounter(parsers=[first, second])

    assert obj.get_parser_for_extension("x") is first


# =============================================================================
# Aliases
# =============================================================================

def test_alias_management(counter: SourceCounter):
    assert counter.add_extension_alias("H", "cpp") is None
    assert counter.add_extension_alias("h", "c") == "cpp"
    assert counter.get_extension_alias(".h") == "c"
    assert counter.get_extension_aliases() == [("h", "c")]

    assert counter.remove_extension_alias("h") is True
    assert counter.remove_extension_alias("h") is False
    assert counter.get_extension_alias("h") is None


def test_add_extension_alias_rejects_invalid():
    with pytest.raises(InvalidArgumentError):
        SourceCounter().add_extension_alias("", "js")
    with pytest.raises(InvalidArgumentError):
        SourceCounter().add_extension_alias("js", "bad/ext")


def test_add_extension_aliases_batch(counter: SourceCounter):
    counter.add_extension_alias("inc", "php")

    overwritten = counter.add_extension_aliases([("inc", "c"), ("vue", "js")])
    assert overwritten == [("inc", "php")]
    assert counter.get_extension_aliases() == [("inc", "c"), ("vue", "js")]

    counter.clear_extension_aliases()
    assert counter.get_extension_aliases() == []


def test_add_extension_aliases_is_all_or_nothing(counter: SourceCounter):
    with pytest.raises(InvalidArgumentError):
        counter.add_extension_aliases([("vue", "js"), ("broken",)])

    assert counter.get_extension_aliases() == []


def test_alias_extension_single_hop(counter: SourceCounter):
    counter.add_extension_aliases({"a": "b", "b": "c"})

    assert counter.alias_extension("a") == "b"
    assert counter.alias_extension("b") == "c"
    assert counter.alias_extension("z") == "z"


# =============================================================================
# Processing
# =============================================================================

def test_process_dispatches_by_extension(counter: SourceCounter):
    stats = run(counter.process("main.c", C_SOURCE))

    assert stats.lines.mixed == 1
    assert stats.lines.block_comments == 1
    assert stats.lines.source == 2
    assert counter.files_read == {"main.c": stats}
    assert counter.line_statistics == stats.lines
    assert counter.character_statistics == stats.characters


def test_process_rejects_empty_contents(counter: SourceCounter):
    with pytest.raises(InvalidInputError):
        run(counter.process("main.c", ""))
    assert counter.files_read == {}


def test_process_rejects_unknown_extension(counter: SourceCounter):
    with pytest.raises(UnresolvableParserError):
        run(counter.process("photo.jpg", "not really"))

    assert counter.files_read == {}
    assert counter.line_statistics == LineStats()


def test_process_rejects_missing_extension(counter: SourceCounter):
    with pytest.raises(UnresolvableParserError):
        run(counter.process("Makefile", "all:\n"))


def test_default_parser_requires_policy(counter: SourceCounter):
    counter.apply_options(default_parser=counter.get_parser("plain"))

    with pytest.raises(UnresolvableParserError):
        run(counter.process("Makefile", "all:\n"))

    counter.apply_options(default_parser=counter.get_parser("plain"), require_extension=False)
    stats = run(counter.process("Makefile", "all:\n"))
    assert stats.lines.source == 1

    stats = run(counter.process("photo.jpg", "// not a comment here"))
    assert stats.lines.source == 1
    assert stats.lines.inline_comments == 0


def test_process_uses_alias(counter: SourceCounter):
    counter.add_extension_alias("vue", "js")

    stats = run(counter.process("App.vue", "// comment"))
    assert stats.lines.inline_comments == 1


def test_alias_is_not_chained(counter: SourceCounter):
    counter.add_extension_aliases([("tpl", "html"), ("html", "txt")])

    with pytest.raises(UnresolvableParserError):
        run(counter.process("page.tpl", "<p>hi</p>"))


def test_reprocessing_same_file_is_idempotent(counter: SourceCounter):
    run(counter.process("main.c", C_SOURCE))
    lines = counter.line_statistics
    chars = counter.character_statistics

    run(counter.process("main.c", C_SOURCE))

    assert counter.line_statistics == lines
    assert counter.character_statistics == chars
    assert len(counter.files_read) == 1


def test_reprocessing_with_new_contents_replaces_old(counter: SourceCounter):
    run(counter.process("notes.txt", "one\ntwo\nthree"))
    run(counter.process("main.c", C_SOURCE))
    run(counter.process("notes.txt", "only"))

    assert counter.files_read["notes.txt"].lines.total == 1
    assert counter.line_statistics == summed(counter).lines
    assert counter.character_statistics == summed(counter).characters


def test_totals_match_sum_of_files(counter: SourceCounter):
    run(counter.process("a.txt", "alpha\n\n  beta"))
    run(counter.process("b.ts", "const x = 1; // one\n"))
    run(counter.process("c.go", "/*\n * doc\n */\nfunc main() {}\n"))

    total = summed(counter)
    assert counter.line_statistics == total.lines
    assert counter.character_statistics == total.characters
    assert counter.line_statistics.is_consistent()


def test_snapshots_do_not_leak_state(counter: SourceCounter):
    run(counter.process("a.txt", "alpha"))

    counter.line_statistics.total = 100
    counter.files_read["a.txt"].lines.total = 100
    counter.files_read.clear()

    assert counter.line_statistics.total == 1
    assert counter.files_read["a.txt"].lines.total == 1


def test_returned_statistics_are_a_copy(counter: SourceCounter):
    stats = run(counter.process("a.txt", "alpha"))
    stats.lines.total = 50

    assert counter.line_statistics.total == 1


def test_statistics_unpack(counter: SourceCounter):
    run(counter.process("a.txt", "alpha"))

    files, lines, chars = counter.statistics
    assert list(files) == ["a.txt"]
    assert lines.total == 1
    assert chars.alphabetical == 5


def test_reset(counter: SourceCounter):
    run(counter.process("a.txt", "alpha"))
    counter.reset()

    assert counter.files_read == {}
    assert counter.line_statistics == LineStats()
    assert counter.character_statistics == CharacterStats()
    assert counter.has_parser("plain")


# =============================================================================
# Batches
# =============================================================================

def test_process_many_matches_sequential(counter: SourceCounter):
    items = [
        ("a.txt", "alpha\nbeta"),
        ("b.c", C_SOURCE),
        ("photo.jpg", "binary-ish"),
        ("empty.txt", ""),
        ("a.txt", "alpha"),
    ]

    outcomes = run(counter.process_many(items))

    assert [o.ok for o in outcomes] == [True, True, False, False, True]
    assert isinstance(outcomes[2].error, UnresolvableParserError)
    assert isinstance(outcomes[3].error, InvalidInputError)

    sequential = SourceCounter(parsers=[Parser(extensions=["txt"]), CFamilyParser()])
    run(sequential.process("b.c", C_SOURCE))
    run(sequential.process("a.txt", "alpha"))

    assert counter.line_statistics == sequential.line_statistics
    assert counter.character_statistics == sequential.character_statistics
    assert counter.files_read == sequential.files_read
