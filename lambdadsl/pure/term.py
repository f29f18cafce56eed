"""Pure lambda calculus terms.

The `pure` directory contains the lambda calculus itself (terms, reduction, bindings), with no knowledge of the
surface syntax of the DSL.

Formally, a term is one of

```
<λ-term> ::= <name>                ; "variable"
           | "λ" <name> "." <λ-term>   ; "abstraction"
           | "(" <λ-term> <λ-term> ")" ; "application"
```

Terms are immutable trees: every node owns its children and nothing points back up, so transformations always build
new trees. Equality (`==`) is syntactic. Two terms that only differ in the names of bound variables are not equal;
use `alpha_equals` for that.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class LambdaTerm(ABC):
    """Superclass for the three kinds of λ-term."""

    @abstractmethod
    def free_variables(self):
        """Names occurring in this term that are not bound by an enclosing abstraction."""

    @abstractmethod
    def all_variables(self):
        """Every name occurring in this term, free or bound (binders included)."""

    @abstractmethod
    def alpha_equals(self, other, mapping=None, other_mapping=None):
        """Whether or not two terms are equal up to renaming of bound variables. mapping maps bound names of self to
        the bound names of other that they correspond to (innermost binder last), other_mapping is the same map seen
        from other.
        """

    def __str__(self):
        return self.display()

    @abstractmethod
    def display(self):
        """Textual form of this term. This is what evaluation prints."""


@dataclass(frozen=True, repr=False)
class Variable(LambdaTerm):
    """Variable: identified by its name only."""
    name: str

    def free_variables(self):
        return frozenset((self.name,))

    def all_variables(self):
        return frozenset((self.name,))

    def alpha_equals(self, other, mapping=None, other_mapping=None):
        if mapping is None:
            mapping = {}
        if other_mapping is None:
            other_mapping = {}

        if not isinstance(other, Variable):
            return False

        bound = mapping.get(self.name)
        other_bound = other_mapping.get(other.name)
        if bound or other_bound:
            # both must be bound, and by binders at the same position
            return bool(bound and other_bound) and bound[-1] == other.name and other_bound[-1] == self.name
        return self.name == other.name

    def display(self):
        return self.name

    def __repr__(self):
        return f"Variable({self.name!r})"


@dataclass(frozen=True, repr=False)
class Abstraction(LambdaTerm):
    """Abstraction: binds param within body."""
    param: str
    body: LambdaTerm

    def free_variables(self):
        return self.body.free_variables() - {self.param}

    def all_variables(self):
        return self.body.all_variables() | {self.param}

    def alpha_equals(self, other, mapping=None, other_mapping=None):
        if mapping is None:
            mapping = {}
        if other_mapping is None:
            other_mapping = {}

        if not isinstance(other, Abstraction):
            return False

        mapping.setdefault(self.param, []).append(other.param)
        other_mapping.setdefault(other.param, []).append(self.param)
        try:
            return self.body.alpha_equals(other.body, mapping, other_mapping)
        finally:
            mapping[self.param].pop()
            other_mapping[other.param].pop()

    def display(self):
        return f"λ{self.param}.{self.body.display()}"

    def __repr__(self):
        return f"Abstraction({self.param!r}, {self.body!r})"


@dataclass(frozen=True, repr=False)
class Application(LambdaTerm):
    """Application of function to argument. Neither side is special until reduction."""
    function: LambdaTerm
    argument: LambdaTerm

    def free_variables(self):
        return self.function.free_variables() | self.argument.free_variables()

    def all_variables(self):
        return self.function.all_variables() | self.argument.all_variables()

    def alpha_equals(self, other, mapping=None, other_mapping=None):
        if mapping is None:
            mapping = {}
        if other_mapping is None:
            other_mapping = {}

        if not isinstance(other, Application):
            return False

        return (self.function.alpha_equals(other.function, mapping, other_mapping)
                and self.argument.alpha_equals(other.argument, mapping, other_mapping))

    def display(self):
        return f"({self.function.display()} {self.argument.display()})"

    def __repr__(self):
        return f"Application({self.function!r}, {self.argument!r})"


def free_variables(term):
    """Returns the free variable names of term."""
    return term.free_variables()


def all_variables(term):
    """Returns every variable name (free and bound) of term."""
    return term.all_variables()
