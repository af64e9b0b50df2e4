import re
from pathlib import Path

import pytest

from scnt.core.errors import FileReadError
from scnt.utils.filesystem import (
    expand_inputs,
    is_binary_file,
    safe_read_text,
    should_exclude_directory,
    walk_files,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "src" / "deep").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / "node_modules" / "pkg").mkdir(parents=True)

    (root / "README.txt").write_text("hello\n", encoding="utf-8")
    (root / "src" / "main.c").write_text("int main() {}\n", encoding="utf-8")
    (root / "src" / "deep" / "util.ts").write_text("// util\n", encoding="utf-8")
    (root / ".git" / "config").write_text("[core]\n", encoding="utf-8")
    (root / "node_modules" / "pkg" / "index.js").write_text("x\n", encoding="utf-8")

    return root


# =============================================================================
# Walking
# =============================================================================

def test_should_exclude_directory():
    assert should_exclude_directory(".git")
    assert should_exclude_directory("build", ["build"])
    assert not should_exclude_directory("src")


def test_walk_files_skips_excluded_dirs(source_tree: Path):
    names = [p.name for p in walk_files(source_tree)]

    assert sorted(names) == ["README.txt", "main.c", "util.ts"]


def test_expand_inputs_directory(source_tree: Path):
    files = expand_inputs([str(source_tree)])

    assert [p.name for p in files] == ["README.txt", "main.c", "util.ts"]
    assert all(p.is_absolute() for p in files)


def test_expand_inputs_glob_and_dedupe(source_tree: Path):
    files = expand_inputs([
        str(source_tree / "src" / "**" / "*.ts"),
        str(source_tree / "src" / "deep" / "util.ts"),
    ])

    assert [p.name for p in files] == ["util.ts"]


def test_expand_inputs_exclusion(source_tree: Path):
    files = expand_inputs([str(source_tree)], exclude=[re.compile(r"\.txt$")])

    assert [p.name for p in files] == ["main.c", "util.ts"]


def test_expand_inputs_no_match(tmp_path: Path):
    assert expand_inputs([str(tmp_path / "*.nothing")]) == []


# =============================================================================
# Reading
# =============================================================================

def test_safe_read_text_keeps_crlf(tmp_path: Path):
    path = tmp_path / "dos.txt"
    path.write_bytes(b"one\r\ntwo\r\n")

    assert safe_read_text(path) == "one\r\ntwo\r\n"


def test_binary_files_read_empty(tmp_path: Path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\x00\x01\x02")

    assert is_binary_file(path)
    assert safe_read_text(path) == ""


def test_safe_read_text_missing(tmp_path: Path):
    with pytest.raises(FileReadError):
        safe_read_text(tmp_path / "missing.txt")
