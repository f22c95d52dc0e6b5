from bnquery.m1 import OutcomeSpace, Variable, DAG, enumerate_joint_assignments, independent
from bnquery.m3.factor import CPDFactor
import numpy as np


class BayesianNetwork:
    """
    A BN combines a DAG (we use an implementation from bnquery.m1)
     and a collection of CPDs (we use CPDFactor from bnquery.m3).

    The network owns its Variables and CPDs, and nothing changes them after construction,
     so queries can share one network.
    """

    def __init__(self, variables, cpts, tol=1e-6):
        """
        variables: an iterable of (name, outcomes) pairs, outcomes being the rv's domain in order
        cpts: a dict mapping an rv name to a (given, values) pair
            given: the names of the rv's parents, in the order the table enumerates them
            values: flat list of probabilities (parents first, the rv itself varying fastest)
        tol: tolerance when checking that the CPDs are normalized

        Construction happens in two passes: first the rvs and their outcome spaces,
         then the edges and CPDs derived from the CPT definitions.
        """
        self.outcome_spaces = dict()
        for name, outcomes in variables:
            name = str(name)
            if name in self.outcome_spaces:
                raise ValueError(f"Variable {name} is declared twice")
            self.outcome_spaces[name] = OutcomeSpace(outcomes)

        nodes = list(self.outcome_spaces.keys())
        edges = []
        for child, (given, _) in cpts.items():
            if child not in self.outcome_spaces:
                raise ValueError(f"There is a CPT for {child} but no such variable")
            for parent in given:
                if parent not in self.outcome_spaces:
                    raise ValueError(f"The CPT for {child} is given {parent}, which is not a variable")
                edges.append((parent, child))
        without_cpt = [name for name in nodes if name not in cpts]
        if without_cpt:
            raise ValueError(f"Variables without a CPT: {without_cpt}")
        self.dag = DAG(nodes, edges)

        self.cpds = dict()
        for child in nodes:
            given, values = cpts[child]
            self.cpds[child] = CPDFactor(given, child, self.outcome_spaces, values, tol=tol)

        self.variables = {
            name: Variable(name, self.outcome_spaces[name], self.dag.parents[name], self.dag.children[name])
            for name in nodes
        }

    def __contains__(self, rv):
        return rv in self.variables

    def variable(self, rv) -> Variable:
        """Return the Variable called rv"""
        try:
            return self.variables[rv]
        except KeyError:
            raise ValueError(f"Unknown variable {rv}") from None

    def cpd(self, rv) -> CPDFactor:
        """Return the CPD of rv"""
        return self.cpds[self.variable(rv).name]

    def parents(self, rv):
        return self.variable(rv).parents

    def children(self, rv):
        return self.variable(rv).children

    def iterrvs(self):
        """Iterate over (rv, outcome_space) pairs for the rvs in this model (in declaration order)"""
        return iter(self.outcome_spaces.items())

    def iternodes(self):
        """Iterate over the nodes in this model (in declaration order)"""
        return iter(self.dag.nodes)

    def iteredges(self):
        """Iterate over the edges in this model"""
        return iter(self.dag.edges)

    def cardinality(self, rv):
        """The number of outcomes in the sample space of the rv"""
        return len(self.outcome_spaces[rv])

    def iterfactors(self):
        """Iterate over the CPDs in this model (in declaration order)"""
        return iter(self.cpds.values())

    def enumerate_joint_assignments(self, rvs: list):
        """Enumerate joint assignments for the rvs given (in the order given)"""
        return enumerate_joint_assignments(rvs, self.outcome_spaces)

    def evaluate(self, assignment: dict):
        """Return the joint probability of a complete assignment of the rvs."""
        return float(np.prod([cpd.evaluate(assignment) for cpd in self.iterfactors()]))

    def separate(self, a, b, evidence=frozenset()):
        """Test if a and b are independent given the evidence rvs"""
        for rv in (a, b, *evidence):
            self.variable(rv)
        return independent(self.dag, a, b, evidence)

    def __str__(self):
        return str(self.dag)

    def __repr__(self):
        return f"BayesianNetwork({len(self.variables)} variables)"

