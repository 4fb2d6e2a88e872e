"""Lexical analysis of pure lambda calculus: turns a stream of characters into a lazy stream of tokens.

The `pure` directory contains the nameless-conversion core: lexing, parsing, the named syntax tree and its De Bruijn
(nameless) counterpart. Nothing in `pure` prints or reads files.

Tokens are recognized by the following rules, in priority order:

```
"("                ; LPAREN
")"                ; RPAREN
"λ" | "\"          ; LAMBDA (the two binder glyphs are interchangeable)
"."                ; DOT
"\0"               ; EOF, an explicit end marker (running out of characters is *not* an EOF token)
<ident_char>+      ; IDENTIFIER, greedy (<ident_char> is alphanumeric, or "_" if underscores are enabled)
```

Whitespace and any other character are silently skipped: lexing never fails.
"""

from dataclasses import dataclass, field
from enum import Enum

LAMBDA = "λ"
SLASH = "\\"


class TokenKind(Enum):
    LPAREN = "("
    RPAREN = ")"
    LAMBDA = LAMBDA
    DOT = "."
    IDENTIFIER = "<identifier>"
    EOF = "<eof>"


@dataclass(frozen=True)
class Token:
    """A single token. text is only meaningful for identifiers; pos is the offset of the token's first character and
    is ignored when comparing tokens.
    """
    kind: TokenKind
    text: str = ""
    pos: int = field(default=0, compare=False)

    @classmethod
    def identifier(cls, text, pos=0):
        return cls(TokenKind.IDENTIFIER, text, pos)

    def __str__(self):
        if self.kind is TokenKind.IDENTIFIER:
            return self.text
        return self.kind.value


SYMBOLS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    LAMBDA: TokenKind.LAMBDA,
    SLASH: TokenKind.LAMBDA,
    ".": TokenKind.DOT,
    "\0": TokenKind.EOF,
}


class Lexer:
    """Forward-only iterator of Tokens over any iterable of characters (a str, or a text file object, which yields lines
    that are flattened into characters). Reads at most one character ahead, to find the end of an identifier.
    """

    def __init__(self, source, underscore=True):
        self.underscore = underscore  # whether "_" may start or continue an identifier
        self._chars = (char for chunk in source for char in chunk)
        self._peeked = None
        self.pos = 0  # offset of the next character to be consumed

    def is_ident_char(self, char):
        return char.isalnum() or (self.underscore and char == "_")

    def _next_char(self):
        if self._peeked is not None:
            char, self._peeked = self._peeked, None
        else:
            char = next(self._chars, None)
        if char is not None:
            self.pos += 1
        return char

    def _peek(self):
        if self._peeked is None:
            self._peeked = next(self._chars, None)
        return self._peeked

    def __iter__(self):
        return self

    def __next__(self):
        buffer = []
        start = self.pos

        while True:
            char = self._next_char()
            if char is None:
                raise StopIteration

            if char in SYMBOLS:
                return Token(SYMBOLS[char], pos=self.pos - 1)

            if self.is_ident_char(char):
                if not buffer:
                    start = self.pos - 1
                buffer.append(char)

                # λ is alphabetic, so it has to be excluded explicitly
                lookahead = self._peek()
                if lookahead is None or lookahead == LAMBDA or not self.is_ident_char(lookahead):
                    return Token.identifier("".join(buffer), start)


def tokenize(source, underscore=True):
    """Returns the list of all tokens in source. Mostly useful for debugging and tests; the parser pulls tokens lazily."""
    return list(Lexer(source, underscore))


def slash_to_lambda(text):
    """Replaces every backslash in text with λ, leaving everything else untouched."""
    return text.replace(SLASH, LAMBDA)
