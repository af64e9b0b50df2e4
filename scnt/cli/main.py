import logging
import sys

from scnt.core.errors import ScntError
from scnt.parsers.catalog import PARSER_TYPES

from .arguments import build_parser
from .runner import RunConfiguration, render_result, run_analysis


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if debug:
        logging.getLogger("scnt").setLevel(logging.DEBUG)
        for name in list(logging.root.manager.loggerDict):
            if name.startswith("scnt."):
                logging.getLogger(name).setLevel(logging.DEBUG)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    if args.list_ids:
        for parser_id, parser_type in PARSER_TYPES.items():
            print(f"{parser_id}\t{parser_type.name}")
        return 0

    if not args.paths:
        parser.error("at least one file, directory or glob is required")

    try:
        result = run_analysis(RunConfiguration.from_args(args))
    except ScntError as exc:
        print(f"scnt: {exc}", file=sys.stderr)
        return 1

    output = render_result(result, args.json)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
    else:
        print(output)

    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
