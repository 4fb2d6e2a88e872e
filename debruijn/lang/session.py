"""Session control for debruijn. Runs the pure pipeline (lex, parse, analyze, convert to De Bruijn) on whole programs,
either read from a file/stdin or fed line by line from the command-line shell.
"""

import logging
import sys
from dataclasses import dataclass

from debruijn.lang.error import GenericException
from debruijn.pure.lexical import Lexer
from debruijn.pure.nameless import Indices, Levels
from debruijn.pure.parser import Parser, ParserError
from debruijn.pure.term import LambdaTerm

logger = logging.getLogger(__name__)


def format_names(names):
    """Renders a set of names deterministically, e.g. {x, y}."""
    return "{" + ", ".join(sorted(names)) + "}"


@dataclass(frozen=True)
class Report:
    """Everything debruijn computes about a single λ-term."""
    term: LambdaTerm
    levels: Levels
    indices: Indices

    @classmethod
    def from_term(cls, term):
        levels = Levels.from_term(term)
        return cls(term, levels, levels.to_indices())

    @property
    def free_variables(self):
        return self.term.free_variables()

    @property
    def bound_variables(self):
        return self.term.bound_variables()

    def lines(self, show_tree=True, show_levels=False):
        yield f"Free Variables: {format_names(self.free_variables)}"
        yield f"Bound Variables: {format_names(self.bound_variables)}"
        if show_tree:
            yield self.term.display()
            yield ""
        yield f"Reconstruction: {self.term}"
        yield f"De Bruijn Indices: {self.indices}"
        if show_levels:
            yield f"De Bruijn Levels: {self.levels}"

    def __str__(self):
        return "\n".join(self.lines())


class Session:
    """Governs a debruijn session: where programs come from, how they are lexed, and what gets printed."""
    SH_FILE = "<in>"  # command-line shell filename
    STDIN = "-"

    def __init__(self, error_handler, path=SH_FILE, underscore=True, show_levels=False, show_tree=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.underscore = underscore    # whether "_" is an identifier character
        self.show_levels = show_levels  # whether De Bruijn levels are printed alongside indices
        self.show_tree = show_tree      # whether the syntax tree is dumped

        self.results = []  # Reports that have not been printed yet

        if path == Session.SH_FILE:
            self.error_handler.fatal = False

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the stripped line and whether it leaves parentheses
        open, in which case the next line continues it.
        """
        line = line.rstrip()
        return line, line.count("(") > line.count(")")

    def read(self):
        """Reads the whole program from self.path (stdin if it is '-')."""
        try:
            if self.path == Session.STDIN:
                return sys.stdin.read()

            with open(self.path, "r", encoding="utf-8") as file:
                return file.read()
        except UnicodeDecodeError as error:
            msg = "'{}' is not valid UTF-8 text (byte {} at offset {})"
            raise GenericException(msg, (self.path, hex(error.object[error.start]), str(error.start)), diagnosis=False)
        except OSError:
            raise GenericException("'{}' could not be opened", self.path, diagnosis=False)

    def add(self, expr, line_num=1):
        """Parses expr as a single λ-term, starting at line_num of self.path, and queues its Report."""
        self.error_handler.register_line(self.path, " ".join(expr.split()), line_num)  # in case error is raised

        try:
            term = Parser(Lexer(expr, self.underscore)).parse()
        except ParserError as error:
            if error.token is not None:
                offset = expr.count("\n", 0, error.token.pos)
                self.error_handler.register_line(self.path, expr.split("\n")[offset].strip(), line_num + offset)
            raise error.within(expr)

        logger.debug("parsed %s from %s:%d", term, self.path, line_num)
        report = Report.from_term(term)
        logger.debug("converted %s to levels %s and indices %s", term, report.levels, report.indices)

        self.results.append(report)
        self.error_handler.remove_line(self.path)  # error was not raised
        return report

    def pop(self):
        """Removes the oldest queued Report and renders it."""
        report = self.results.pop(0)
        return "\n".join(report.lines(self.show_tree, self.show_levels))

    def run(self):
        """Reads and processes the whole program at self.path, printing its report."""
        source = self.read()
        logger.debug("read %d characters from %s", len(source), self.path)

        self.add(source)
        while self.results:
            print(self.pop())
