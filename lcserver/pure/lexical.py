"""Tokenizer and shift/reduce parser for the input notation.

Input is a whitespace-separated token stream. Every token is "(", ")" or a variable name: names are not validated,
so anything that is not a parenthesis becomes a Variable. Groups reduce as soon as their ")" is read:

```
( t )            ; a parenthesized singleton is the term itself
f ( a ... z )    ; the term before the group is applied to the LAST term of the group, the others are dropped
( f a ... z )    ; with nothing before the group, its first term is the head
```

Because the parser only ever builds Variables and Applications from text, the abstraction branch of a group
reduction (substitute into the body instead of building an Application) is reachable only through a term that was
shifted onto the stack with Parser.shift.
"""

import logging
import re
from dataclasses import dataclass

from lcserver.lang.error import ParseError
from lcserver.pure.term import Abstraction, Application, LambdaTerm, Variable

logger = logging.getLogger(__name__)

OPEN_PAREN = "("
CLOSE_PAREN = ")"


@dataclass(frozen=True)
class Token:
    text: str
    start: int

    @property
    def end(self):
        return self.start + len(self.text)


def tokenize(expr):
    """Splits expr on runs of whitespace, keeping the position of every token for error messages."""
    return [Token(match.group(), match.start()) for match in re.finditer(r"\S+", expr)]


class _Marker:
    """Open parenthesis on the parser stack. Remembers its token so unmatched parentheses can be reported."""

    def __init__(self, token):
        self.token = token

    def __repr__(self):
        return f"_Marker({self.token.start})"


class Parser:
    """Stack machine that builds a single LambdaTerm. Every Parser owns its stack, so one instance parses one
    expression and is then thrown away.
    """

    def __init__(self, expr=""):
        self.expr = expr  # used for error messages
        self.stack = []

    def shift(self, entry):
        """Pushes a term (or a marker) onto the stack."""
        self.stack.append(entry)

    def feed(self, token):
        """Consumes a single token."""
        if token.text == OPEN_PAREN:
            self.shift(_Marker(token))
        elif token.text == CLOSE_PAREN:
            self.reduce(token)
        else:
            self.shift(Variable(token.text))

    def reduce(self, token):
        """Collapses the group closed by token."""
        args = []
        while True:
            if not self.stack:
                raise ParseError("'{}' has unmatched ')'", self.expr, start=token.start, end=token.end)
            top = self.stack.pop()
            if isinstance(top, _Marker):
                marker = top
                break
            args.insert(0, top)

        if not args:
            raise ParseError("'{}' contains an empty group", self.expr, start=marker.token.start, end=token.end)

        if len(args) == 1:
            self.shift(args[0])
            return

        if self.stack and isinstance(self.stack[-1], LambdaTerm):
            func_expr = self.stack.pop()
        else:
            func_expr, *args = args

        argument = args[-1]
        if len(args) > 1:
            logger.debug("dropping %d argument(s) before '%s' in group at %d", len(args) - 1, argument,
                         marker.token.start)

        if isinstance(func_expr, Abstraction):
            self.shift(Abstraction(func_expr.parameter, func_expr.apply(argument)))
        else:
            self.shift(Application(func_expr, argument))

    def result(self):
        """Returns the parsed term once every token has been fed."""
        if not self.stack:
            raise ParseError("λ-term cannot be empty", self.expr)

        for entry in self.stack:
            if isinstance(entry, _Marker):
                start = entry.token.start
                raise ParseError("'{}' has unmatched '('", self.expr, start=start, end=start + 1)

        if len(self.stack) > 1:
            start = len(self.expr) - len(self.expr.lstrip())
            raise ParseError("'{}' does not reduce to a single λ-term ({} left over)", (self.expr, len(self.stack)),
                             start=start)

        return self.stack[0]


def parse(expr):
    """Converts expr to a LambdaTerm, raises ParseError if expr is not valid."""
    parser = Parser(expr)
    for token in tokenize(expr):
        parser.feed(token)
    return parser.result()
