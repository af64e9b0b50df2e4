import json
from typing import Any, Dict, List, Optional, Tuple

from scnt.core.counter import CounterStatistics

LINE_COLUMNS = (
    ("total", "Lines"),
    ("total_source", "Source"),
    ("total_comments", "Comments"),
    ("mixed", "Mixed"),
    ("whitespace", "Blank"),
    ("empty", "Empty"),
)


def build_report(
    stats: CounterStatistics,
    skipped: Optional[List[Tuple[str, str]]] = None,
) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "summary": {
            "files": len(stats.files),
            "lines": stats.lines.as_dict(),
            "characters": stats.characters.as_dict(),
        },
        "files": [],
        "skipped": [],
    }

    for name, file_stats in stats.files.items():
        report["files"].append({
            "path": name,
            "lines": file_stats.lines.as_dict(),
            "characters": file_stats.characters.as_dict(),
        })

    for name, reason in skipped or []:
        report["skipped"].append({"path": name, "reason": reason})

    return report


def render_table(report: Dict[str, Any]) -> str:
    header = ["File"] + [title for _, title in LINE_COLUMNS] + ["Characters"]
    rows: List[List[str]] = []

    for entry in report["files"]:
        lines = entry["lines"]
        rows.append(
            [entry["path"]]
            + [str(lines[key]) for key, _ in LINE_COLUMNS]
            + [str(entry["characters"]["total"])]
        )

    summary = report["summary"]
    rows.append(
        [f"Total ({summary['files']} files)"]
        + [str(summary["lines"][key]) for key, _ in LINE_COLUMNS]
        + [str(summary["characters"]["total"])]
    )

    widths = [max(len(row[i]) for row in [header] + rows) for i in range(len(header))]

    def format_row(row: List[str]) -> str:
        cells = [row[0].ljust(widths[0])]
        cells += [cell.rjust(width) for cell, width in zip(row[1:], widths[1:])]
        return "  ".join(cells).rstrip()

    out = [format_row(header), "  ".join("-" * w for w in widths)]
    out += [format_row(row) for row in rows[:-1]]
    out.append("  ".join("-" * w for w in widths))
    out.append(format_row(rows[-1]))

    if report["skipped"]:
        out.append("")
        out.append(f"Skipped {len(report['skipped'])} file(s):")
        for entry in report["skipped"]:
            out.append(f"- {entry['path']}: {entry['reason']}")

    return "\n".join(out)


def render(report: Dict[str, Any], as_json: bool) -> str:
    return json.dumps(report, indent=2) if as_json else render_table(report)
