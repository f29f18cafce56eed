"""Top-level instructions of the lambda DSL: `let NAME = TERM` binds a name, `eval TERM` reduces a term to normal form.

Instructions are processed against one shared `Environment`. An `eval` takes a snapshot of the environment before it
starts reducing, so it only ever sees the bindings made by the `let`s before it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging

from lambdadsl.lang.error import GenericException
from lambdadsl.pure.reduction import NormalOrderReducer
from lambdadsl.pure.term import LambdaTerm

logger = logging.getLogger(__name__)


class StepLimitExceeded(GenericException):
    """Raised when a caller-imposed step limit runs out before a normal form is reached."""

    def __init__(self, term, max_steps, span=None):
        super().__init__("'{}' has no normal form within {} reduction steps", (str(term), str(max_steps)), span=span)
        self.term = term
        self.max_steps = max_steps


class Instruction(ABC):
    """Superclass for let/eval statements."""

    @abstractmethod
    def process(self, environment, max_steps=None):
        """Runs this instruction against environment. Returns the text to output, or None if there is none. max_steps
        bounds the number of reduction steps; None means no bound.
        """

    async def compute(self, environment, max_steps=None):
        """Coroutine version of `process` for concurrent hosts. Reduction itself is not interleaved."""
        return self.process(environment, max_steps)


@dataclass(frozen=True)
class Let(Instruction):
    """`let name = term`: binds term to name. term is not reduced."""
    name: str
    term: LambdaTerm
    span: tuple = field(default=None, compare=False, repr=False)

    def process(self, environment, max_steps=None):
        logger.debug("let %s = %s", self.name, self.term)
        environment.define(self.name, self.term)
        return None

    def __str__(self):
        return f"let {self.name} = {self.term}"


@dataclass(frozen=True)
class Eval(Instruction):
    """`eval term`: reduces term to normal form, with free variables resolved against the environment."""
    term: LambdaTerm
    span: tuple = field(default=None, compare=False, repr=False)

    def process(self, environment, max_steps=None):
        logger.debug("eval %s", self.term)
        reducer = NormalOrderReducer(environment.snapshot())

        if max_steps is None:
            normal_form = reducer.normalize(self.term)
        else:
            for idx, normal_form in enumerate(reducer.reductions(self.term)):
                if idx > max_steps:
                    raise StepLimitExceeded(self.term, max_steps, self.span)

        logger.info("%s reduced to normal form in %d steps", self.term, reducer.steps)
        return str(normal_form)

    def __str__(self):
        return f"eval {self.term}"


def process(instruction, environment, max_steps=None):
    """Runs instruction against environment, see `Instruction.process`."""
    return instruction.process(environment, max_steps)


async def compute(instruction, environment, max_steps=None):
    """Coroutine version of `process`."""
    return await instruction.compute(environment, max_steps)
