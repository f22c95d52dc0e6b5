from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP
from bnquery.m1 import ancestral_closure, is_reachable
from bnquery.m2 import OperationCounter, join_all
from bnquery.m3 import BayesianNetwork
from loguru import logger


QueryResult = namedtuple("QueryResult", ["probability", "additions", "multiplications"])


def round_half_up(p: float, digits=5) -> float:
    """Round the decimal form of p to `digits` places, ties away from zero (0.123455 -> 0.12346)"""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(float(p))).quantize(quantum, rounding=ROUND_HALF_UP))


def _check_assignment(bn: BayesianNetwork, rv, outcome):
    if outcome not in bn.variable(rv).outcome_space:
        raise ValueError(f"{outcome} is not an outcome of {rv}")


def independence_query(bn: BayesianNetwork, a, b, evidence=frozenset()):
    """
    Return True if a and b are independent given the evidence rvs (only their names matter).

    Bayes ball is run from a to b and from b to a, and both must fail to reach the other end.
    """
    return bn.separate(a, b, set(evidence))


def relevant_variables(bn: BayesianNetwork, query_rv, evidence: dict):
    """
    Return the query rv and the evidence rvs together with all their ancestors.

    The list starts with the query rv's ancestral closure, followed by the nodes
     that each evidence rv's closure adds.
    """
    relevant = []
    for rv in [query_rv, *evidence]:
        for node in ancestral_closure(bn.dag, rv):
            if node not in relevant:
                relevant.append(node)
    return relevant


def prune_independent(bn: BayesianNetwork, rvs, query_rv, evidence: dict):
    """Return the rvs from which Bayes ball reaches the query rv given the evidence (in the order given)."""
    return [rv for rv in rvs if is_reachable(bn.dag, rv, query_rv, set(evidence))]


def split_factors(rv, all_factors):
    """
    Splits all_factors into a list that's relevant to the rv and another that's irrelevant.
    A factor is "relevant" to an rv if that rv is in the factor's scope.
    """
    relevant, irrelevant = [], []
    for factor in all_factors:
        if rv in factor:
            relevant.append(factor)
        else:
            irrelevant.append(factor)
    return relevant, irrelevant


def elimination_key(factor):
    """Smaller tables first, ties broken by the character codes of the rvs in scope"""
    return len(factor), factor.scope_code


def variable_elimination(bn: BayesianNetwork, query_rv, outcome, evidence=dict(), order=(), trace=None):
    """
    Return P(query_rv=outcome | E=e) rounded to 5 decimals, along with operation counts.

    bn: the model we are performing VE for
    query_rv: the query rv Q
    outcome: the outcome of Q we want the probability of
    evidence: a dict representing the evidence assignment E=e
        Q and E are disjoint
    order: the order in which rvs are eliminated
        rvs that are not in the scope of any factor (anymore) are skipped
    trace: if provided, we log here each variable that was eliminated, in order, and the scope
        of the factor from which we eliminated it

    Returns a QueryResult(probability, additions, multiplications), where multiplications counts
     rows produced by joins and additions follows the OperationCounter convention.
    """
    if query_rv in evidence:
        raise ValueError("Q and E should be disjoint")
    _check_assignment(bn, query_rv, outcome)
    for rv, value in evidence.items():
        _check_assignment(bn, rv, value)

    counter = OperationCounter()

    # only the ancestors of Q and E matter, and of those only what is not independent of Q
    relevant = relevant_variables(bn, query_rv, evidence)
    relevant = prune_independent(bn, relevant, query_rv, evidence)
    logger.debug("Relevant variables for P({}={}): {}", query_rv, outcome, relevant)

    factors = [bn.cpd(rv).copy() for rv in relevant]

    # fix the evidence in every factor that mentions it
    for rv, value in evidence.items():
        factors = [factor.restrict(rv, value) if rv in factor else factor for factor in factors]

    # eliminate each rv in order
    for rv in order:
        involved, factors = split_factors(rv, factors)
        if not involved:  # nothing to do here
            continue
        involved.sort(key=elimination_key)
        # take the product of the factors involved in this elimination step
        new_factor = join_all(involved, counter)
        if trace is not None:
            trace.append((rv, new_factor.scope))
        # sum the rv out and keep the factor for future use
        factors.append(new_factor.eliminate(rv, counter))

    final = join_all(factors, counter).normalize(counter)
    if final.scope != (query_rv,):
        logger.warning("Final factor is over {}, not just {}", final.scope, query_rv)
    logger.debug("Final factor:\n{}", final)
    return QueryResult(round_half_up(final.lookup(query_rv, outcome)), counter.additions, counter.multiplications)


def naive_exact_inference(bn: BayesianNetwork, query_rv, evidence=dict()):
    """
    Return the normalized distribution over Q given E=e as a Factor over Q.

    In naive exact inference we build the complete joint factor, condition
    on evidence and then marginalise every other rv.
    """
    if query_rv in evidence:
        raise ValueError("Q and E should be disjoint")
    out = join_all(bn.iterfactors())
    for rv, value in evidence.items():
        out = out.restrict(rv, value)
    for rv in bn.iternodes():
        if rv != query_rv and rv in out:
            out = out.eliminate(rv)
    return out.normalize()
