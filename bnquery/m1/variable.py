import itertools


class OutcomeSpace:
    """
    A container to hold a countably finite set of outcome objects.
    This container maps an outcome to a unique 0-based identifier (id),
     the id is the position of the outcome in the order the domain was declared,
     which is also the order in which flat probability lists enumerate it.
    """

    def __init__(self, outcomes):
        """
        outcomes: an iterable of objects that can be hashed
            (a variable's domain needs at least two outcomes)
        """
        # Ensure outcomes are unique and preserve order
        self.outcomes = tuple(dict.fromkeys(outcomes))
        if len(self.outcomes) < 2:
            raise ValueError(f"An outcome space needs at least 2 outcomes, got {self.outcomes}")
        # Map each outcome to a unique 0-based id
        self._outcome2id = {outcome: i for i, outcome in enumerate(self.outcomes)}

    def __len__(self):
        """Return the number of outcomes"""
        return len(self.outcomes)

    def __iter__(self):
        """Iterate over outcomes"""
        return iter(self.outcomes)

    def __contains__(self, outcome):
        """Check if an outcome is a member of the outcome space"""
        return outcome in self._outcome2id

    def __getitem__(self, outcome):
        """Get the id corresponding to an outcome"""
        return self._outcome2id[outcome]

    def __eq__(self, other):
        return isinstance(other, OutcomeSpace) and self.outcomes == other.outcomes

    def __hash__(self):
        return hash(self.outcomes)

    def __repr__(self):
        return f"OutcomeSpace({len(self)} outcomes)"

    def __str__(self):
        return "{%s}" % ', '.join(str(o) for o in self.outcomes)

    @classmethod
    def enumerate_joint_outcomes(cls, *spaces):
        """
        Return a generator for joint outcomes in the product space of the given spaces.
        *spaces: an arbitrary number of iterables
          e.g., enumerate_joint_outcomes([1, 2, 3], ('a', 'b'), iter([False, True]))
          yields elements in the cross product space of these 3 iterables
          (the last space varies fastest)
        """
        for joint_outcome in itertools.product(*spaces):
            yield joint_outcome


def enumerate_joint_assignments(rvs: list, outcome_spaces: dict):
    """
    Return a generator for joint assignments (each a dict) of the rvs given.

    rvs: names of the rvs, in order
    outcome_spaces: dict mapping rv name to its OutcomeSpace

    Assignments come in row-major order: the last rv varies fastest and
    each rv's outcomes are enumerated in the order of its outcome space.
    """
    rvs = list(rvs)
    for outcomes in OutcomeSpace.enumerate_joint_outcomes(*(outcome_spaces[rv] for rv in rvs)):
        yield dict(zip(rvs, outcomes))


class Variable:
    """
    A node of a Bayesian network: a name, a domain and the names of its parents and children.

    Parents and children are stored by name, the network resolves them.
    A Variable is not changed after the network that owns it is built.
    """

    def __init__(self, name: str, outcomes, parents=(), children=()):
        self.name = str(name)
        self.outcome_space = outcomes if isinstance(outcomes, OutcomeSpace) else OutcomeSpace(outcomes)
        self.parents = tuple(parents)
        self.children = tuple(children)

    @property
    def outcomes(self):
        return self.outcome_space.outcomes

    def __len__(self):
        return len(self.outcome_space)

    def __eq__(self, other):
        return (
            isinstance(other, Variable)
            and self.name == other.name
            and self.outcome_space == other.outcome_space
            and self.parents == other.parents
            and self.children == other.children
        )

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"Variable({self.name!r}, {self.outcome_space}, parents={self.parents}, children={self.children})"
