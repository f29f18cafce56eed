"""Normal-order beta reduction of λ-terms.

Substitution is capture-avoiding: before a replacement is pushed under a binder whose name occurs free in the
replacement, the binder is renamed to a fresh name (alpha-conversion). Fresh names are the binder's own name followed
by the smallest integer suffix that is not in use, so output is stable from run to run.

Reduction is driven by `step`, one normal-order pass over the whole term, and `normalize`, which repeats `step` until
the term stops changing. There is no step limit: a term without a normal form keeps `normalize` busy forever, which is
the calculus working as intended. Callers that need bounded evaluation iterate `reductions` themselves.

Sources: https://plato.stanford.edu/entries/lambda-calculus/#Com,
         http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR
"""

import logging
from itertools import count

from lambdadsl.pure.term import Abstraction, Application, Variable

logger = logging.getLogger(__name__)


def fresh_name(base, forbidden):
    """Returns base if it is not in forbidden, otherwise the first of base1, base2, ... that is not."""
    if base not in forbidden:
        return base
    for suffix in count(1):
        candidate = f"{base}{suffix}"
        if candidate not in forbidden:
            return candidate


def substitute(term, var, replacement):
    """Returns term with every free occurence of var replaced by replacement. Binders that would capture a free
    variable of replacement are renamed first.
    """
    if isinstance(term, Variable):
        return replacement if term.name == var else term

    if isinstance(term, Application):
        return Application(substitute(term.function, var, replacement), substitute(term.argument, var, replacement))

    param, body = term.param, term.body
    if param == var:
        return term  # var is shadowed, nothing to substitute

    if param in replacement.free_variables():
        fresh = fresh_name(param, term.all_variables() | replacement.all_variables())
        body = substitute(body, param, Variable(fresh))
        return Abstraction(fresh, substitute(body, var, replacement))

    return Abstraction(param, substitute(body, var, replacement))


def step(term, environment=None):
    """One normal-order reduction pass over term. Free variables bound in environment (a mapping of name: λ-term) are
    replaced by their binding. In an application the function position is reduced first; if it is an abstraction, the
    argument is substituted into its body as-is, otherwise the argument is reduced as well.

    Bound names are never looked up in environment, and a binder is renamed rather than capture a free name of an
    inlined binding, e.g. with y bound to free, `(\\x.\\y.(x y) \\z.y)` normalizes to `λy1.free`. Results can
    differ from a binder-blind reduction by the choice of bound names only.
    """
    if environment is None:
        environment = {}

    if isinstance(term, Variable):
        return environment.get(term.name, term)

    if isinstance(term, Abstraction):
        return _step_abstraction(term, environment)

    function = step(term.function, environment)
    if isinstance(function, Abstraction):
        return substitute(function.body, function.param, term.argument)
    return Application(function, step(term.argument, environment))


def _step_abstraction(term, environment):
    """Steps the body of term. term.param shadows any binding of the same name, and is renamed if one of the bindings
    about to be inlined into the body has it free.
    """
    param, body = term.param, term.body
    scope = _without(environment, param)

    inlined = [scope[name] for name in body.free_variables() if name in scope]
    if any(param in binding.free_variables() for binding in inlined):
        fresh = fresh_name(param, term.all_variables().union(*(binding.all_variables() for binding in inlined)))
        body = substitute(body, param, Variable(fresh))
        param = fresh
        scope = _without(scope, param)

    return Abstraction(param, step(body, scope))


def _without(environment, name):
    if name not in environment:
        return environment
    return {key: value for key, value in environment.items() if key != name}


def reductions(term, environment=None):
    """Yields term followed by each successive result of `step`, stopping once a step leaves the term unchanged. The
    last term yielded is the normal form. Never stops if term has no normal form.
    """
    if environment is None:
        environment = {}

    yield term
    while True:
        reduced = step(term, environment)
        if reduced == term:
            return
        term = reduced
        yield term


def normalize(term, environment=None):
    """Reduces term to normal form, i.e. until `step` leaves it unchanged. No iteration bound."""
    for term in reductions(term, environment):
        pass
    return term


class NormalOrderReducer:
    """Normal-order reduction against one fixed set of bindings. The bindings are copied on construction, so later
    changes to the mapping passed in do not affect this reducer.
    """

    def __init__(self, environment=None):
        self.environment = dict(environment) if environment else {}
        self.steps = 0

    def step(self, term):
        """Single reduction pass, see `step`."""
        reduced = step(term, self.environment)
        if reduced != term:
            self.steps += 1
            logger.debug("β %d: %s", self.steps, reduced)
        return reduced

    def reductions(self, term):
        """Reduction sequence of term, see `reductions`. Every step is logged."""
        for idx, reduced in enumerate(reductions(term, self.environment)):
            if idx:
                self.steps += 1
                logger.debug("β %d: %s", self.steps, reduced)
            yield reduced

    def normalize(self, term):
        """Normal form of term, see `normalize`."""
        for term in self.reductions(term):
            pass
        return term

    def __repr__(self):
        return f"NormalOrderReducer(names={sorted(self.environment)}, steps={self.steps})"
