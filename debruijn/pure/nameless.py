"""Nameless (De Bruijn) representation of λ-terms.

Names are erased from binders, and every bound occurrence is replaced by a number. Two numbering conventions are
supported, and both use the same tree:

- Levels: the number is the depth of the binding abstraction, counted from the root. The body of the outermost
  abstraction is at depth 1.
- Indices: the number is how many abstractions have to be crossed, walking up from the occurrence, to reach the
  binding one. 1 is the nearest enclosing abstraction.

Example:
    λx. λy. x y  =>  levels  λ λ 1 2
                     indices λ λ 2 1

Occurrences with no binder keep their name as FreeVariables in both conventions.

At an occurrence nested under D abstractions, index = D - level + 1 and level = D - index + 1, so converting in
either direction is the same traversal.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from debruijn.pure import term as named
from debruijn.pure.lexical import LAMBDA

__all__ = ["DBTerm", "Variable", "FreeVariable", "Application", "Abstraction", "Levels", "Indices"]


class DBTerm(ABC):
    """Base class for nameless terms. What a Variable's number means depends on the Levels/Indices wrapper."""

    @property
    @abstractmethod
    def expr(self) -> str:
        """Rendering of this term, using the same parenthesization rules as named terms."""

    @abstractmethod
    def renumber(self, depth: int = 0) -> "DBTerm":
        """Maps every bound number n found under depth abstractions to depth - n + 1."""

    def __str__(self):
        return self.expr


@dataclass(frozen=True)
class Variable(DBTerm):
    """A bound occurrence."""
    number: int

    def __post_init__(self):
        if self.number < 1:
            raise ValueError(f"bound variables are numbered from 1, got {self.number}")

    @property
    def expr(self):
        return str(self.number)

    def renumber(self, depth=0):
        return Variable(depth - self.number + 1)


@dataclass(frozen=True)
class FreeVariable(DBTerm):
    """An occurrence with no enclosing abstraction binding its name."""
    name: str

    @property
    def expr(self):
        return self.name

    def renumber(self, depth=0):
        return self


@dataclass(frozen=True)
class Application(DBTerm):
    function: DBTerm
    argument: DBTerm

    def spine(self):
        """Unwinds f a b c into (f, [a, b, c]) without recursing down the left-nested chain."""
        arguments = []
        term = self
        while isinstance(term, Application):
            arguments.append(term.argument)
            term = term.function
        arguments.reverse()
        return term, arguments

    @property
    def expr(self):
        head, arguments = self.spine()

        parts = [f"({head.expr})" if isinstance(head, Abstraction) else head.expr]
        for argument in arguments:
            if isinstance(argument, (Variable, FreeVariable)):
                parts.append(argument.expr)
            else:
                parts.append(f"({argument.expr})")

        return " ".join(parts)

    def renumber(self, depth=0):
        head, arguments = self.spine()
        result = head.renumber(depth)
        for argument in arguments:
            result = Application(result, argument.renumber(depth))
        return result


@dataclass(frozen=True)
class Abstraction(DBTerm):
    body: DBTerm

    @property
    def expr(self):
        return f"{LAMBDA} {self.body.expr}"

    def renumber(self, depth=0):
        return Abstraction(self.body.renumber(depth + 1))


_UNBOUND = object()


def _erase_names(term, depth, binders):
    """Converts named term, found under depth abstractions, to levels. binders maps each name to the depth of its
    innermost enclosing binder.
    """
    if isinstance(term, named.Variable):
        if term.name in binders:
            return Variable(binders[term.name])
        return FreeVariable(term.name)

    if isinstance(term, named.Application):
        head, arguments = term.spine()
        result = _erase_names(head, depth, binders)
        for argument in arguments:
            result = Application(result, _erase_names(argument, depth, binders))
        return result

    if isinstance(term, named.Abstraction):
        shadowed = binders.get(term.bound, _UNBOUND)
        binders[term.bound] = depth + 1
        try:
            body = _erase_names(term.body, depth + 1, binders)
        finally:
            if shadowed is _UNBOUND:
                del binders[term.bound]
            else:
                binders[term.bound] = shadowed
        return Abstraction(body)

    raise TypeError(f"not a λ-term: {term!r}")


@dataclass(frozen=True)
class Levels:
    """A nameless term whose Variables are De Bruijn levels."""
    term: DBTerm

    @classmethod
    def from_term(cls, term):
        return cls(_erase_names(term, 0, {}))

    def to_indices(self):
        return Indices(self.term.renumber())

    def __str__(self):
        return self.term.expr


@dataclass(frozen=True)
class Indices:
    """A nameless term whose Variables are De Bruijn indices."""
    term: DBTerm

    @classmethod
    def from_term(cls, term):
        return Levels.from_term(term).to_indices()

    def to_levels(self):
        return Levels(self.term.renumber())

    def __str__(self):
        return self.term.expr
