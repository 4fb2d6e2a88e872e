"""Command-line entry points: `debruijn`, which reports on a λ-term read from a file/stdin (or runs the interactive
shell), and `slash-to-lambda`, which rewrites backslashes to λ so that terms can be typed on any keyboard.
"""

import argparse
import logging
import sys

from debruijn.lang.error import ErrorHandler
from debruijn.lang.session import Session
from debruijn.lang.shell import Shell
from debruijn.pure.lexical import slash_to_lambda

# parsing and converting recurse once per nested abstraction or parenthesis, a couple of frames each
RECURSION_LIMIT = 10000


def build_parser():
    parser = argparse.ArgumentParser(prog="debruijn", description="Converts λ-terms to De Bruijn notation.")
    parser.add_argument("file", help="file holding a single λ-term ('-' or empty reads stdin)", nargs="?")
    parser.add_argument("-i", "--interactive", help="start the interactive shell", action="store_true")
    parser.add_argument("-l", "--levels", help="also print De Bruijn levels", action="store_true")
    parser.add_argument("--no-tree", help="do not dump the syntax tree", action="store_true")
    parser.add_argument("--no-underscore", help="do not treat '_' as part of variable names", action="store_true")
    parser.add_argument("-v", "--verbose", help="log debugging information", action="store_true")
    return parser


def main(argv=None):
    """Runs debruijn. Called from the debruijn console script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                            format="%(levelname)s:%(name)s: %(message)s")

        options = dict(underscore=not args.no_underscore, show_levels=args.levels, show_tree=not args.no_tree)

        if args.interactive or (args.file is None and sys.stdin.isatty()):
            Shell(Session(error_handler, Session.SH_FILE, **options)).cmdloop()
        else:
            Session(error_handler, args.file or Session.STDIN, **options).run()


def slash_main():
    """Copies stdin to stdout, replacing every '\\' with 'λ'. Called from the slash-to-lambda console script."""
    sys.stdout.write(slash_to_lambda(sys.stdin.read()))


if __name__ == "__main__":
    main()
