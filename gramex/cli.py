#!/usr/bin/env python3
"""
GRAMEX Command-Line Interface

Loads a grammar file and either lists every terminal sequence derivable
from a start sequence, or searches for derivations of a target sequence.

Usage:
    gramex                              # Expand S from gram.txt, depth 4
    gramex -i anbn.txt -s S -d 6        # Expand S to depth 6
    gramex -i pairs.txt -d -1 --max 3   # No depth bound (finite grammar), length <= 3
    gramex -i swap.txt -d 8 --max 4     # Length <= 4, within 8 rewrites
    gramex -i anbn.txt -v               # Show derivation traces
    gramex -i anbn.txt -o -s aabb       # Find derivations of 'aabb'

Grammar files (gram.txt):
    // Comment
    S->aSb|~

Output:
    Input sequence: S
    Transitions:
      S->aSb
      S->

    Variants:
    'aaabbb'
    ...
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from . import __version__
from .engine import Grammar
from .search import (
    SearchBudget, DEFAULT_DEPTH, DEFAULT_START_SYMBOL, FORWARD, BACKWARD,
    UNBOUNDED_FLAG,
)

DEFAULT_GRAMMAR_FILE = "gram.txt"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gramex",
        description="GRAMEX - Grammar Exploration by String Rewriting",
        epilog="Examples:\n"
               "  gramex -i anbn.txt -d 6           All sequences within 6 rewrites\n"
               "  gramex -i swap.txt -d 8 --max 4   Sequences of length <= 4\n"
               "  gramex -i pairs.txt -d -1 --max 3 Finite grammar, no depth bound\n"
               "  gramex -i anbn.txt -v             Show derivation traces\n"
               "  gramex -i anbn.txt -o -s aabb     Derivations of 'aabb'\n"
               "\n"
               "--max only filters results. With -d -1 a recursive grammar is\n"
               "never exhausted; stop the search with Ctrl+C.\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "-i", "--input",
        default=DEFAULT_GRAMMAR_FILE,
        help=f"Grammar file (default: {DEFAULT_GRAMMAR_FILE})"
    )

    parser.add_argument(
        "-s", "--sequence",
        default=DEFAULT_START_SYMBOL,
        help="Start sequence, or the target sequence with -o (default: S)"
    )

    parser.add_argument(
        "-d", "--depth",
        type=int,
        default=DEFAULT_DEPTH,
        help=f"Max depth, -1 means no limit (default: {DEFAULT_DEPTH})"
    )

    parser.add_argument(
        "--max",
        dest="max_length",
        type=int,
        default=UNBOUNDED_FLAG,
        help="Max length of output sequence, -1 means no limit"
    )

    parser.add_argument(
        "--min",
        dest="min_length",
        type=int,
        default=UNBOUNDED_FLAG,
        help="Min length of output sequence, -1 means no limit"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print the derivation path of each result"
    )

    parser.add_argument(
        "-o", "--search-path",
        action="store_true",
        help="Search derivations of the sequence instead of expanding it"
    )

    parser.add_argument(
        "--start-symbol",
        default=DEFAULT_START_SYMBOL,
        help="Symbol the -o search reduces to (default: S)"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (results only, no header)"
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Diagnostics written to stderr (default: WARNING)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def print_header(grammar: Grammar, sequence: str, out: TextIO) -> None:
    """Print the input sequence and the loaded rules."""
    print(f"Input sequence: {sequence}", file=out)
    print("Transitions:", file=out)
    for rule in grammar:
        print(f"  {rule.pattern}->{rule.replacement}", file=out)
    print(file=out)
    print("Variants:", file=out)


def run(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """
    Run one search as described by parsed arguments.

    Returns:
        Exit code (0 for success)
    """
    out = out or sys.stdout

    if args.depth == UNBOUNDED_FLAG and args.max_length == UNBOUNDED_FLAG:
        print("Error: set -d or --max to a value > -1", file=sys.stderr)
        return 1

    try:
        budget = SearchBudget.from_flags(args.depth, args.min_length, args.max_length)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        grammar = Grammar.from_file(args.input)
    except (OSError, ValueError) as e:
        print(f"Error loading {args.input}: {e}", file=sys.stderr)
        return 1

    mode = BACKWARD if args.search_path else FORWARD
    try:
        results = grammar.search(args.sequence, budget, mode=mode,
                                 start_symbol=args.start_symbol)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print_header(grammar, args.sequence, out)

    try:
        for result in results:
            print(result.format(verbose=args.verbose), file=out)
    except KeyboardInterrupt:
        print("Search interrupted", file=sys.stderr)
        return 130

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
