import json
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_cli(*args):
    cmd = [sys.executable, "-m", "scnt.cli.main", *args]
    return subprocess.run(cmd, capture_output=True, text=True, cwd=PROJECT_ROOT)


def test_cli_counts_directory_as_json(tmp_path: Path):
    (tmp_path / "main.c").write_text("int x; // x\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("hello", encoding="utf-8")

    result = run_cli(str(tmp_path), "--json")
    assert result.returncode == 0, result.stderr

    report = json.loads(result.stdout)
    assert report["summary"]["files"] == 2
    assert report["summary"]["lines"]["mixed"] == 1


def test_cli_writes_table_to_file(tmp_path: Path):
    (tmp_path / "a.ts").write_text("const a = 1;\n", encoding="utf-8")
    output = tmp_path / "report.txt"

    result = run_cli(str(tmp_path / "*.ts"), "--output", str(output))
    assert result.returncode == 0, result.stderr
    assert "Total (1 files)" in output.read_text(encoding="utf-8")


def test_cli_list_ids():
    result = run_cli("--list-ids")
    assert result.returncode == 0
    assert "plain" in result.stdout
    assert "cfamily" in result.stdout


def test_cli_requires_paths():
    result = run_cli()
    assert result.returncode == 2
