"""CLI entrypoint for the moddoc command."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .errors import ModdocError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="moddoc",
        description=(
            "Show documentation for a module. Output is printed to standard output; "
            "without a source file the built-in declarations are documented."
        ),
    )
    parser.add_argument(
        "source_file",
        nargs="?",
        default=None,
        help="Path or URL of the module to document.",
    )
    parser.add_argument(
        "filter",
        nargs="?",
        default=None,
        help="Dotted path of a symbol to show, e.g. Runtime.readTextFile.",
    )
    parser.add_argument(
        "--builtin",
        action="store_true",
        help="Document the built-in runtime declarations.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output documentation in JSON format.",
    )
    parser.add_argument(
        "--filter",
        dest="filter_option",
        default=None,
        metavar="NAME",
        help="Dotted path of a symbol to show (same as the positional filter).",
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Output private documentation.",
    )
    parser.add_argument(
        "--import-map",
        default=None,
        metavar="FILE",
        help="Load an import map file to resolve bare specifiers.",
    )
    parser.add_argument(
        "--unstable",
        action="store_true",
        help="Include unstable built-in APIs.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to a .moddoc.yml file or the directory holding it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Also write debug logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for the moddoc command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    source_file = args.source_file
    filter_name = args.filter_option or args.filter
    if args.builtin:
        # ``moddoc --builtin NAME`` means NAME is the filter.
        if source_file is not None and filter_name is None:
            filter_name = source_file
        source_file = None

    try:
        config = load_config(args.config)
        orchestrator = Orchestrator(config=config)
        orchestrator.print_docs(
            source_file,
            as_json=bool(args.json),
            filter_name=filter_name,
            private=bool(args.private),
            unstable=bool(args.unstable),
            import_map=args.import_map,
        )
    except ModdocError as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"moddoc failed: {exc}\nRun with --verbose for more details.\n")


if __name__ == "__main__":
    main(sys.argv[1:])
