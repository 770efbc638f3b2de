"""Head reduction (call-by-name, leftmost-outermost) of a syntax tree.

Only the redex in head position is ever contracted: the reducer never looks under a binder and never evaluates the
argument of an application. A term is done when its head is a Variable (stuck) or when it is not an application at
all. Whatever the result, it is at most in weak head normal form, not beta normal form.
"""

import logging

from lcserver.lang.error import EvaluationFault, EvaluationLimitExceeded
from lcserver.pure.term import Abstraction, Application

logger = logging.getLogger(__name__)


class HeadReducer:
    """Implements head reduction of a syntax tree.

    max_steps bounds the number of beta steps of a single reduction (None for no bound). reduce_spine makes
    applications headed by an application reducible by first reducing the left spine; without it such a term raises
    EvaluationFault.
    """
    MAX_STEPS = 10000

    def __init__(self, max_steps=MAX_STEPS, reduce_spine=False):
        self.max_steps = max_steps
        self.reduce_spine = reduce_spine

    def reduce(self, term):
        """Returns the head-reduced form of term."""
        result = term
        for result in self.steps(term):
            pass
        return result

    def steps(self, term):
        """Yields term and then every intermediate term of its reduction, the last one being the result."""
        budget = _Budget(self.max_steps, term)
        yield term
        yield from self._steps(term, budget)

    def _steps(self, term, budget):
        while isinstance(term, Application):
            head = term.left

            if isinstance(head, Application):
                if not self.reduce_spine:
                    msg = "'{}' has an application in head position"
                    raise EvaluationFault(msg, str(term), start=1, end=1 + len(str(head)))

                reduced = head
                for reduced in self._steps(head, budget):
                    yield Application(reduced, term.right)
                if not isinstance(reduced, Abstraction):
                    return  # left spine is stuck
                term = Application(reduced, term.right)

            if not term.is_redex:
                return  # stuck: free variable in head position

            budget.spend()
            term = term.left.apply(term.right)
            yield term


class _Budget:
    """Counts beta steps shared by a reduction and the reductions of its left spine."""

    def __init__(self, max_steps, term):
        self.max_steps = max_steps
        self.term = term
        self.spent = 0

    def spend(self):
        self.spent += 1
        if self.max_steps is not None and self.spent > self.max_steps:
            msg = "'{}' was not reduced within {} steps"
            raise EvaluationLimitExceeded(msg, (str(self.term), self.max_steps))
        logger.debug("beta step %d", self.spent)


def evaluate(term):
    """Head-reduces term with the default HeadReducer."""
    return HeadReducer().reduce(term)
