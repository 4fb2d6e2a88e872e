"""Named syntax tree of pure lambda calculus.

Formally, pure lambda calculus can be defined as

```
<λ-term> ::= <name>                     ; "variable"
           | "λ" <name> "." <λ-term>    ; "abstraction"
                                        ; - abstraction bodies are greedy: λx.x y = λx.(x y) != (λx.x) (y)
           | <λ-term> <λ-term>          ; "application"
                                        ; - associating by left: a b c d = (((a b) c) d)
```

Terms are immutable and strictly tree-shaped: no subterm is ever shared between two parents. Parsing lives in
pure/parser.py; this module only knows how to analyze and render an already-built tree.

Sources: https://plato.stanford.edu/entries/lambda-calculus/#Com,
         https://opendsa-server.cs.vt.edu/ODSA/Books/PL/html/Syntax.html
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from debruijn.pure.lexical import LAMBDA

__all__ = ["LambdaTerm", "Variable", "Abstraction", "Application"]


class LambdaTerm(ABC):
    """Represents a valid λ-term: variable, abstraction, or application."""

    @abstractmethod
    def free_variables(self) -> set:
        """Names that occur somewhere in this term without an enclosing abstraction that binds them."""

    @abstractmethod
    def bound_variables(self) -> set:
        """Names bound by some abstraction in this term, whether or not its body uses them."""

    @property
    @abstractmethod
    def nodes(self) -> tuple:
        """Child terms, left to right."""

    @property
    @abstractmethod
    def expr(self) -> str:
        """Canonical rendering of this term. Parsing expr gives back an equal term."""

    def display(self, indents=0):
        """Displays the tree with readable format. Walks the tree with an explicit stack, so long application chains
        can be displayed.

        Format:
        <LambdaTerm>(expr='<expr>', nodes=[
            <LambdaTerm>(expr='<expr>', nodes=[
                ...
                <LambdaTerm>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        lines = []
        stack = [(self, indents, "")]  # (node or closing bracket, indents, trailing separator)
        while stack:
            node, depth, suffix = stack.pop()
            pad = "    " * depth

            if isinstance(node, str):
                lines.append(f"{pad}{node}{suffix}")
                continue

            line = f"{pad}{type(node).__name__}(expr='{node.expr}'"
            if not node.nodes:
                lines.append(f"{line}){suffix}")
                continue

            lines.append(f"{line}, nodes=[")
            stack.append(("])", depth, suffix))
            last = len(node.nodes) - 1
            for idx in range(last, -1, -1):
                stack.append((node.nodes[idx], depth + 1, "," if idx < last else ""))

        return "\n".join(lines)

    def __str__(self):
        return self.expr


@dataclass(frozen=True)
class Variable(LambdaTerm):
    """A reference to the innermost enclosing abstraction binding name, or a free variable if there is none."""
    name: str

    def free_variables(self):
        return {self.name}

    def bound_variables(self):
        return set()

    @property
    def nodes(self):
        return ()

    @property
    def expr(self):
        return self.name


@dataclass(frozen=True)
class Abstraction(LambdaTerm):
    """Binds bound within body. A nested abstraction binding the same name shadows this one."""
    bound: str
    body: LambdaTerm

    def free_variables(self):
        # each abstraction removes only its own name, after its body has been computed independently, so a name
        # rebound deeper down is excluded only inside that deeper scope
        return self.body.free_variables() - {self.bound}

    def bound_variables(self):
        return self.body.bound_variables() | {self.bound}

    @property
    def nodes(self):
        return (self.body,)

    @property
    def expr(self):
        return f"{LAMBDA}{self.bound}. {self.body.expr}"


@dataclass(frozen=True)
class Application(LambdaTerm):
    """Application of function to argument.

    `x y z` parses to Application(Application(x, y), z), so an unparenthesized chain is as deep as it is long. Every
    operation here unwinds that left spine in a loop and only recurses into the head and the arguments.
    """
    function: LambdaTerm
    argument: LambdaTerm

    def spine(self):
        """Unwinds f a b c into (f, [a, b, c]), where f is not an Application."""
        arguments = []
        term = self
        while isinstance(term, Application):
            arguments.append(term.argument)
            term = term.function
        arguments.reverse()
        return term, arguments

    def free_variables(self):
        head, arguments = self.spine()
        names = head.free_variables()
        for argument in arguments:
            names |= argument.free_variables()
        return names

    def bound_variables(self):
        head, arguments = self.spine()
        names = head.bound_variables()
        for argument in arguments:
            names |= argument.bound_variables()
        return names

    @property
    def nodes(self):
        return (self.function, self.argument)

    @property
    def expr(self):
        head, arguments = self.spine()

        parts = [f"({head.expr})" if isinstance(head, Abstraction) else head.expr]
        for argument in arguments:
            parts.append(argument.expr if isinstance(argument, Variable) else f"({argument.expr})")

        return " ".join(parts)
