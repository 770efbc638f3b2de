"""Pure lambda calculus terms.

```
<λ-term> ::= <name>                    ; "variable"
                                       ; - any run of non-whitespace other than "(" and ")"
           | "(!" <name> "." <λ-term> ")"   ; "abstraction" (printed form only: there is no literal for it in input)
           | "(" <λ-term> " " <λ-term> ")"  ; "application"
```

Terms are immutable. Substitution and reduction always build new trees, so a tree can be shared freely between the
parser, the reducer and the printer without copying. Names are compared structurally: there are no de Bruijn indices
and no alpha-renaming, which makes substitution deliberately NOT capture-avoiding.
"""

from abc import abstractmethod, ABC
from dataclasses import dataclass


class LambdaTerm(ABC):
    """Superclass for variables, abstractions and applications."""

    @abstractmethod
    def sub(self, var, new_term):
        """Returns this term with every free occurrence of var replaced by new_term. An abstraction binding var stops
        the substitution (shadowing), but nothing is renamed, so free variables of new_term can be captured.
        """

    @property
    @abstractmethod
    def is_redex(self):
        """Whether or not this term is an application with an abstraction in head position."""

    def display(self, indents=0):
        """Recursively displays the syntax tree with readable format.

        Format:
        <LambdaTerm>('<expr>', nodes=[
            <LambdaTerm>('<expr>')
            ...
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}('{self}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    @property
    def nodes(self):
        return []


@dataclass(frozen=True)
class Variable(LambdaTerm):
    name: str

    def sub(self, var, new_term):
        if self.name == var.name:
            return new_term
        return self

    @property
    def is_redex(self):
        return False

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Abstraction(LambdaTerm):
    """Single-parameter abstraction. Never produced directly from input text; see Parser.shift."""
    parameter: Variable
    body: LambdaTerm

    def sub(self, var, new_term):
        if self.parameter.name == var.name:
            return self  # var is shadowed, so the body is left alone
        return Abstraction(self.parameter, self.body.sub(var, new_term))

    def apply(self, argument):
        """Beta-reduces (λparameter.body) argument by a single step."""
        return self.body.sub(self.parameter, argument)

    @property
    def is_redex(self):
        return False

    @property
    def nodes(self):
        return [self.parameter, self.body]

    def __str__(self):
        return f"(!{self.parameter}.{self.body})"


@dataclass(frozen=True)
class Application(LambdaTerm):
    left: LambdaTerm
    right: LambdaTerm

    def sub(self, var, new_term):
        return Application(self.left.sub(var, new_term), self.right.sub(var, new_term))

    @property
    def is_redex(self):
        return isinstance(self.left, Abstraction)

    @property
    def nodes(self):
        return [self.left, self.right]

    def __str__(self):
        return f"({self.left} {self.right})"


def substitute(expr, var, value):
    """Functional form of LambdaTerm.sub."""
    return expr.sub(var, value)
