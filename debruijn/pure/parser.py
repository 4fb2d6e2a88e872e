"""Recursive descent parser of pure lambda calculus.

The grammar is ambiguous as written in pure/term.py, so the parser settles it this way:
- application is juxtaposition and associates to the left: `x y z` is `(x y) z`
- an abstraction's body extends as far right as the enclosing parentheses allow: `λx.x y` is `λx.(x y)`, and in
  `f λx.x y` the abstraction swallows `y`

There is no token lookahead. Instead, paren_index counts the currently open parentheses and every parse_term call is
given the depth it started at as a bound: the call keeps folding juxtaposed terms into applications until a ")"
drops paren_index below that bound, which hands control back to whichever call opened the parenthesis.
"""

from debruijn.lang.error import GenericException
from debruijn.pure.lexical import Lexer, TokenKind
from debruijn.pure.term import Abstraction, Application, Variable


class ParserError(GenericException):
    """Superclass of all parse failures. Subclasses keep their structured fields as attributes and compare by them."""
    msg_template = "invalid λ-term"

    def __init__(self, *exprs, token=None):
        self.token = token
        super().__init__(self.msg_template, [str(expr) for expr in exprs] or None, diagnosis=token is not None)

    @property
    def fields(self):
        return ()

    def within(self, source):
        """Points this error's diagnosis at the offending token inside source, the text that was parsed. Returns self
        so that it can be re-raised directly.
        """
        if self.token is not None:
            # only the line holding the token is shown
            line_start = source.rfind("\n", 0, self.token.pos) + 1
            line_end = source.find("\n", self.token.pos)
            if line_end == -1:
                line_end = len(source)

            self.expr = source[line_start:line_end]
            self.start = self.token.pos - line_start
            self.end = self.start + (len(self.token.text) if self.token.kind is TokenKind.IDENTIFIER else 1)
        return self

    def __eq__(self, other):
        return type(self) is type(other) and self.fields == other.fields

    def __hash__(self):
        return hash((type(self), self.fields))

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(repr(field) for field in self.fields)})"


class PrematureEnd(ParserError):
    """A token was required but the input ran out (or hit an explicit end marker)."""
    msg_template = "λ-term ended prematurely"


class ParenOutOfBounds(ParserError):
    """A ")" closed more parentheses than the current call is responsible for."""
    msg_template = "parenthesis depth {} is out of bounds, expected at least {}"

    def __init__(self, bound, actual):
        self.bound = bound
        self.actual = actual
        super().__init__(actual, bound)

    @property
    def fields(self):
        return (self.bound, self.actual)


class ExpectedIdentifierGot(ParserError):
    msg_template = "expected a variable after 'λ', got '{}'"

    def __init__(self, got):
        self.got = got
        super().__init__(got, token=got)

    @property
    def fields(self):
        return (self.got,)


class ExpectedGot(ParserError):
    msg_template = "expected '{}', got '{}'"

    def __init__(self, expected, got):
        self.expected = expected
        self.got = got
        super().__init__(expected.value, got, token=got)

    @property
    def fields(self):
        return (self.expected, self.got)


class Unexpected(ParserError):
    msg_template = "unexpected '{}'"

    def __init__(self, token):
        super().__init__(token, token=token)

    @property
    def fields(self):
        return (self.token,)


class UnmatchedParens(ParserError):
    """Parsing finished with parentheses still open (remaining > 0) or closed too often (remaining < 0)."""
    msg_template = "mismatched parentheses, depth is {} at the end of the λ-term"

    def __init__(self, remaining):
        self.remaining = remaining
        super().__init__(remaining)

    @property
    def fields(self):
        return (self.remaining,)


class Parser:
    """Consumes a whole Lexer and produces the LambdaTerm it spells. A Parser is single-use, like its Lexer."""

    def __init__(self, lexer):
        self.lexer = lexer
        self.paren_index = 0

    def parse(self):
        """Parses the entire token stream, raising the first ParserError encountered."""
        root_term = self.parse_term(self.paren_index)
        if self.paren_index != 0:
            raise UnmatchedParens(self.paren_index)
        return root_term

    def parse_term(self, bound):
        """Parses a term and everything juxtaposed after it, until the input ends or a ")" closes the parenthesis that
        was open when this call started.
        """
        self.check_bounds(bound)

        token = self.next()
        if token is None or token.kind is TokenKind.EOF:
            raise PrematureEnd()
        elif token.kind is TokenKind.LAMBDA:
            term = self.parse_abstraction(self.paren_index)
        elif token.kind is TokenKind.LPAREN:
            self.paren_index += 1
            term = self.parse_term(self.paren_index)
        elif token.kind is TokenKind.IDENTIFIER:
            term = Variable(token.text)
        else:
            raise Unexpected(token)

        while self.paren_index >= bound:
            token = self.next()
            if token is None:
                break
            elif token.kind is TokenKind.LPAREN:
                self.paren_index += 1
                term = Application(term, self.parse_term(self.paren_index))
            elif token.kind is TokenKind.RPAREN:
                self.paren_index -= 1
            elif token.kind is TokenKind.LAMBDA:
                term = Application(term, self.parse_abstraction(self.paren_index))
            elif token.kind is TokenKind.IDENTIFIER:
                term = Application(term, Variable(token.text))
            elif token.kind is TokenKind.DOT:
                raise Unexpected(token)
            # explicit EOF tokens are part of the stream and are skipped here

        return term

    def parse_abstraction(self, bound):
        """Parses the rest of an abstraction; the caller has already consumed the λ."""
        self.check_bounds(bound)

        bound_variable = self.next()
        if bound_variable is None:
            raise PrematureEnd()
        elif bound_variable.kind is not TokenKind.IDENTIFIER:
            raise ExpectedIdentifierGot(bound_variable)

        dot = self.next()
        if dot is None:
            raise PrematureEnd()
        elif dot.kind is not TokenKind.DOT:
            raise ExpectedGot(TokenKind.DOT, dot)

        return Abstraction(bound_variable.text, self.parse_term(self.paren_index))

    def check_bounds(self, bound):
        if self.paren_index < bound:
            raise ParenOutOfBounds(bound, self.paren_index)

    def next(self):
        """Next token, or None once the lexer is exhausted."""
        return next(self.lexer, None)


def parse(source, underscore=True):
    """Parses source (any iterable of characters) into a LambdaTerm."""
    return Parser(Lexer(source, underscore)).parse()
