#!/usr/bin/env python3
"""
Command line front end for cardmoves.

    cardmoves run tricks.moves --image start.json --output end.json
    cardmoves library tricks.moves

Exit codes: 0 on success, 1 for problems in the inputs (parse problems,
evaluation errors, unreadable files), 2 for usage errors.

Author: xwest
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .cards.errors import PileFormatError
from .cards.image import Image
from .cards.pile import Pile
from .config import MovesConfiguration
from .library.move_library import MoveLibrary
from .parser.parser import parse_file
from .runner import run_source

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_USAGE = 2


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _load_image(path: Optional[str]) -> Image:
    """The image in ``path``, or a single full deck named 'deck'."""
    if path is None:
        return Image([("deck", Pile.full_deck())])
    return Image.from_json(_read_text(path))


def _report_problems(filename: str, problems) -> None:
    for problem in problems:
        print(f"{filename}:{problem}", file=sys.stderr)


def cmd_run(args: argparse.Namespace, config: MovesConfiguration) -> int:
    """Run a moves file against an image."""
    try:
        source = _read_text(args.moves_file)
        image = _load_image(args.image)
    except (OSError, PileFormatError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USER_ERROR

    result = run_source(MoveLibrary.with_primitives(config), image, source,
                        filename=args.moves_file, config=config)
    if result.problems:
        _report_problems(args.moves_file, result.problems)
        return EXIT_USER_ERROR

    evaluation = result.evaluation
    if evaluation.error is not None:
        print(str(evaluation.error), file=sys.stderr)
        return EXIT_USER_ERROR

    output = evaluation.image.to_json(config)
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_USER_ERROR
        logger.info("Wrote %s", args.output)
    else:
        print(output)
    return EXIT_OK


def cmd_library(args: argparse.Namespace, config: MovesConfiguration) -> int:
    """List the definitions a moves file declares, callers before callees."""
    try:
        parsed = parse_file(MoveLibrary.with_primitives(config), args.moves_file, config)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USER_ERROR

    if parsed.has_errors():
        _report_problems(args.moves_file, parsed.problems)
        return EXIT_USER_ERROR

    declared = {definition.identifier for definition in parsed.definitions}
    for definition in parsed.library.to_list_top_sort():
        if definition.identifier not in declared:
            continue
        print(definition.signature)
        if definition.doc:
            for line in definition.doc.splitlines():
                print(f"    {line}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardmoves",
        description="Parse and run card move descriptions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    cardmoves run faro.moves                      # Run against a fresh deck
    cardmoves run faro.moves --image start.json   # Run against a saved image
    cardmoves library faro.moves                  # List the declared moves
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output, including every evaluated move')

    subparsers = parser.add_subparsers(dest='command', required=True)

    run = subparsers.add_parser('run', help='Run a moves file against an image')
    run.add_argument('moves_file', help='Moves source file')
    run.add_argument('--image', help="Image JSON file (default: a full deck named 'deck')")
    run.add_argument('--output', help='Write the resulting image JSON here instead of stdout')
    run.set_defaults(handler=cmd_run)

    library = subparsers.add_parser('library', help='List the definitions of a moves file')
    library.add_argument('moves_file', help='Moves source file')
    library.set_defaults(handler=cmd_library)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cardmoves command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = MovesConfiguration(debug_mode=args.verbose)

    try:
        return args.handler(args, config)
    except KeyboardInterrupt:
        print("\ninterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
