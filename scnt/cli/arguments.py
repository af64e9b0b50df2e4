import argparse
import re
from typing import Dict, List, Optional

from scnt.core.extensions import clean_extension

VERSION = "1.1.0"


def regex_argument(value: str) -> re.Pattern[str]:
    """
    argparse type for --exclude. Surrounding slashes are optional.
    """
    pattern = value
    if len(pattern) >= 2 and pattern.startswith("/") and pattern.endswith("/"):
        pattern = pattern[1:-1]
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise argparse.ArgumentTypeError(f'"{value}" is not a valid regular expression: {exc}')


def alias_argument(value: str) -> Dict[str, str]:
    """
    argparse type for --alias in the form <ext>=<ext>.
    """
    parts = value.split("=")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(
            f'Alias requires the format "<ext>=<ext>", but "{value}" was received instead.'
        )

    first = clean_extension(parts[0])
    second = clean_extension(parts[1])
    if first and second:
        return {first: second}
    if second:
        raise argparse.ArgumentTypeError(f'First part "{parts[0]}" is not a valid extension.')
    if first:
        raise argparse.ArgumentTypeError(f'Second part "{parts[1]}" is not a valid extension.')
    raise argparse.ArgumentTypeError(f'Neither parts of "{value}" are valid extensions.')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scnt",
        description="Count source code lines and characters",
        usage="%(prog)s [options] [<file>|<directory>|<glob>...]",
    )
    parser.add_argument("paths", nargs="*", help="Files, directories or glob patterns")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-d", "--debug", action="store_true", help="extra output info when processing")
    parser.add_argument(
        "-e", "--exclude", type=regex_argument, action="append", default=[],
        metavar="REGEX",
        help="exclude files matching the regular expression, repeatable",
    )
    parser.add_argument(
        "-a", "--alias", type=alias_argument, action="append", default=[],
        metavar="EXT=EXT",
        help="alias one extension for another, repeatable",
    )
    parser.add_argument("-p", "--parsers", nargs="+", metavar="ID", help="parser ids to use, defaults to all")
    parser.add_argument(
        "-u", "--allow-unknowns", action="store_true",
        help="process unknown file types with the default parser",
    )
    parser.add_argument("-D", "--default", metavar="ID", help="parser id used for unknown file types")
    parser.add_argument("--dry", action="store_true", help="do not read any files, only report what would be counted")
    parser.add_argument("--list-ids", action="store_true", help="list the available parser ids and exit")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--output", help="Write output to file")

    return parser


def merge_aliases(aliases: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
    merged: Dict[str, str] = {}
    for entry in aliases or []:
        merged.update(entry)
    return merged
