from bnquery.m1 import enumerate_joint_assignments
from bnquery.m2 import Factor
import numpy as np


class CPDFactor(Factor):
    """
    A conditional probability table P(child | parents) implemented via a Factor.
    """

    def __init__(self, parents: tuple, child: str, outcome_spaces: dict, values, tol=1e-6):
        """
        parents: names of the parent rvs (no duplicates)
        child: the name of the child rv
        outcome_spaces: dict mapping rv name to an OutcomeSpace object for that rv
            it should contain the parents and the child, anything else will be ignored
        values: probabilities, either a flat list or an array whose shape is given by
            the cardinalities of the parents (in order) followed by the cardinality of the child;
            flat lists are read in row-major order, the child varying fastest
        tol: a tolerance parameter when checking whether distributions add to 1.0
        """
        self.parents = tuple(parents)
        self.child = child
        scope = self.parents + (child,)
        missing = [rv for rv in scope if rv not in outcome_spaces]
        if missing:
            raise ValueError(f"CPD for {child} refers to unknown rvs: {missing}")
        shape = tuple(len(outcome_spaces[rv]) for rv in scope)
        array = np.asarray(values, dtype=float)
        if array.size != int(np.prod(shape)):
            raise ValueError(f"CPD for {child} needs {int(np.prod(shape))} values, got {array.size}")
        array = array.reshape(shape)
        if not np.allclose(np.sum(array, -1), 1, atol=tol):
            raise ValueError(f"Some distributions in the CPD for {child} are not summing to 1.0")
        table = {
            tuple(assignment.items()): value
            for assignment, value in zip(enumerate_joint_assignments(scope, outcome_spaces), array.flatten())
        }
        super().__init__(scope, table, given=self.parents)
        self.outcome_spaces = {rv: outcome_spaces[rv] for rv in scope}
