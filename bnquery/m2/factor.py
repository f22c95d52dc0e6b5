import numpy as np
from loguru import logger
from tabulate import tabulate


class Assignment:
    """
    An immutable assignment of outcomes to rvs, usable as a key of a factor's table.

    The (rv, outcome) pairs are stored sorted by rv name, so two assignments
    built from the same pairs in a different order are equal and hash the same.
    """

    __slots__ = ("_items", "_hash")

    def __init__(self, pairs=()):
        """
        pairs: a dict mapping rv name to outcome, or an iterable of (rv, outcome) pairs
        """
        items = dict(pairs)
        self._items = tuple(sorted(items.items(), key=lambda item: item[0]))
        self._hash = hash(self._items)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        """Iterate over the rvs assigned"""
        return (rv for rv, _ in self._items)

    def __contains__(self, rv):
        return any(name == rv for name, _ in self._items)

    def __getitem__(self, rv):
        for name, outcome in self._items:
            if name == rv:
                return outcome
        raise KeyError(rv)

    def get(self, rv, default=None):
        for name, outcome in self._items:
            if name == rv:
                return outcome
        return default

    def items(self):
        return self._items

    def as_dict(self) -> dict:
        return dict(self._items)

    def drop(self, rv) -> 'Assignment':
        """Return a new assignment without rv"""
        return Assignment((name, outcome) for name, outcome in self._items if name != rv)

    def merge(self, other: 'Assignment') -> 'Assignment':
        """Return the union of two assignments (other wins on shared rvs)"""
        merged = dict(self._items)
        merged.update(other._items)
        return Assignment(merged)

    def agrees_with(self, other: 'Assignment') -> bool:
        """True if the two assignments give the same outcome to every rv they share"""
        mine = dict(self._items)
        for rv, outcome in other._items:
            if rv in mine and mine[rv] != outcome:
                return False
        return True

    def __eq__(self, other):
        return isinstance(other, Assignment) and self._items == other._items

    def __hash__(self):
        return self._hash

    def __reduce__(self):
        # the hash is recomputed on unpickling, string hashes differ between processes
        return Assignment, (self._items,)

    def __repr__(self):
        return "Assignment(%s)" % ", ".join(f"{rv}={outcome}" for rv, outcome in self._items)


class OperationCounter:
    """
    Accumulates the number of operations performed by factor operations.

    multiplications: one per row emitted by a join
    additions: the number of rows left after each elimination, plus rows - 1 per normalization
        (a counting convention, not the number of scalar additions actually performed)
    """

    def __init__(self):
        self.multiplications = 0
        self.additions = 0

    def __repr__(self):
        return f"OperationCounter(additions={self.additions}, multiplications={self.multiplications})"


class Factor:
    """
    A factor represented as a table mapping a complete assignment of its scope to a non-negative value.

    Factors are values: every operation returns a new Factor and leaves the operands untouched.
    Operations optionally take an OperationCounter to record what they did.
    """

    def __init__(self, scope=(), table=None, given=()):
        """
        scope: names of the rvs in the factor, in order (no repetitions)
            the order matters for display only
        table: dict mapping an Assignment (or a dict) of the scope's rvs to a value,
            every key must assign exactly the rvs in scope
        given: rvs in scope that were conditioning rvs in the CPT this factor came from
        """
        self.scope = tuple(scope)
        assert len(self.scope) == len(set(self.scope)), "No repetitions allowed in scope"
        self.given = tuple(given)
        self.table = dict()
        expected = set(self.scope)
        for key, value in (table or dict()).items():
            if not isinstance(key, Assignment):
                key = Assignment(key)
            if set(key) != expected:
                raise ValueError(f"Assignment {key} does not match the scope {self.scope}")
            self.table[key] = float(value)

    def __contains__(self, rv):
        return rv in self.scope

    def __iter__(self):
        return iter(self.scope)

    def __len__(self):
        """The number of rows in the table"""
        return len(self.table)

    def __eq__(self, other):
        return (
            isinstance(other, Factor)
            and self.scope == other.scope
            and self.given == other.given
            and self.table == other.table
        )

    __hash__ = None

    def copy(self) -> 'Factor':
        return Factor(self.scope, self.table, self.given)

    @property
    def scope_code(self) -> int:
        """Sum of the character codes of all rv names in scope (a deterministic tie-breaker)"""
        return sum(ord(c) for rv in self.scope for c in rv)

    def evaluate(self, assignment: dict) -> float:
        """
        Return the value of the row consistent with the assignment (irrelevant rvs are ignored),
        or 0.0 if the table has no such row.
        """
        key = Assignment((rv, assignment[rv]) for rv in self.scope if rv in assignment)
        return self.table.get(key, 0.0)

    def lookup(self, rv, outcome) -> float:
        """Return the value of the single-rv row rv=outcome, or 0.0 if the table has no such row"""
        return self.table.get(Assignment({rv: outcome}), 0.0)

    def join(self, other: 'Factor', counter: OperationCounter = None) -> 'Factor':
        """
        Multiply two factors, returning a new Factor over the union of their scopes.

        A factor with a single row is treated as a constant: its value multiplies
         every row of the other factor and its rv does not appear in the result
         (it has been fixed already, for example by evidence).
        If both factors have a single row, self is the one treated as a constant.
        """
        union = tuple(dict.fromkeys(self.scope + other.scope))
        if len(self.table) == 1:
            scope = tuple(rv for rv in union if rv in other.scope)
        elif len(other.table) == 1:
            scope = tuple(rv for rv in union if rv in self.scope)
        else:
            scope = union

        table = dict()
        for a1, p1 in self.table.items():
            for a2, p2 in other.table.items():
                if not a1.agrees_with(a2):
                    continue
                if len(self.table) == 1:
                    key = a2
                elif len(other.table) == 1:
                    key = a1
                else:
                    key = a1.merge(a2)
                table[key] = p1 * p2
        result = Factor(scope, table)
        if counter is not None:
            counter.multiplications += len(table)
        logger.debug("Joined factors:\n{}\nand\n{}\ninto\n{}", self, other, result)
        return result

    def eliminate(self, rv, counter: OperationCounter = None) -> 'Factor':
        """
        Sum rv out of this factor, returning a new Factor over the remaining rvs.

        Example:
            φ(A, B, C)  --eliminate B-->  φ'(A, C) = \\sum_b φ(A, B=b, C)
        """
        if rv not in self.scope:
            raise ValueError(f"Cannot eliminate {rv}, it is not in the scope {self.scope}")
        sums = dict()
        for key, value in self.table.items():
            reduced = key.drop(rv)
            sums[reduced] = sums.get(reduced, 0.0) + value
        result = Factor(tuple(v for v in self.scope if v != rv), sums)
        if counter is not None:
            counter.additions += len(result)
        logger.debug("Eliminated {} from\n{}\nresult\n{}", rv, self, result)
        return result

    def restrict(self, rv, outcome) -> 'Factor':
        """
        Fix rv to outcome, returning a new Factor with the rows consistent with it.

        The rv leaves the scope, unless it is the only rv in scope: then the result
         is a single-row factor that keeps its key (`join` treats it as a constant).
        Restricting on an rv that is not in scope returns a copy.
        """
        if rv not in self.scope:
            return self.copy()
        pinned = len(self.scope) == 1
        scope = self.scope if pinned else tuple(v for v in self.scope if v != rv)
        table = dict()
        for key, value in self.table.items():
            if key[rv] == outcome:
                table[key if pinned else key.drop(rv)] = value
        result = Factor(scope, table, tuple(g for g in self.given if g in scope))
        logger.debug("Restricted to evidence {}={}:\n{}", rv, outcome, result)
        return result

    def normalize(self, counter: OperationCounter = None) -> 'Factor':
        """
        Return a normalized copy of the factor (values add up to 1.0).

        The counter gets rows - 1 additions.
        """
        Z = float(np.sum(list(self.table.values())))
        if not Z > 0:
            raise ValueError(f"I need Z > 0, got Z={Z}")
        result = Factor(self.scope, {key: value / Z for key, value in self.table.items()}, self.given)
        if counter is not None:
            counter.additions += len(self.table) - 1
        return result

    def display(self, tablefmt="simple", factor_name="Value"):
        """Render the Factor as a string for visualisation using tabulate"""
        if not self.table:
            return "Factor is empty."
        data = []
        for key, value in self.table.items():
            data.append([key[rv] for rv in self.scope] + [value])
        return tabulate(data, headers=list(self.scope) + [factor_name], tablefmt=tablefmt, floatfmt=".5f")

    def __str__(self):
        return self.display()

    def __repr__(self):
        return f"Factor(scope={self.scope}, rows={len(self.table)})"


def join_all(factors, counter: OperationCounter = None) -> Factor:
    """
    Join a sequence of factors left to right: join(join(join(f1, f2), f3), ...).
    An empty sequence gives an empty Factor, a single factor gives a copy of it.
    """
    factors = list(factors)
    if not factors:
        return Factor()
    result = factors[0].copy()
    for factor in factors[1:]:
        result = result.join(factor, counter)
    return result
