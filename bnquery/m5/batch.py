from collections import namedtuple
from bnquery.m3 import BayesianNetwork
from bnquery.m4 import QueryResult, independence_query, variable_elimination
from joblib import Parallel, delayed
from loguru import logger


IndependenceQuery = namedtuple("IndependenceQuery", ["a", "b", "evidence"])
IndependenceQuery.__doc__ = "Are a and b independent given the evidence rvs (names only)?"

PosteriorQuery = namedtuple("PosteriorQuery", ["variable", "outcome", "evidence", "order"])
PosteriorQuery.__doc__ = "P(variable=outcome | evidence), eliminating rvs in the given order."

QueryFailure = namedtuple("QueryFailure", ["request", "error"])
QueryFailure.__doc__ = "A request that could not be answered, along with the reason."


def answer(bn: BayesianNetwork, request):
    """
    Answer one request.

    Returns a bool (True for independent) for an IndependenceQuery
     and a QueryResult for a PosteriorQuery.
    """
    if isinstance(request, IndependenceQuery):
        return independence_query(bn, request.a, request.b, request.evidence)
    elif isinstance(request, PosteriorQuery):
        return variable_elimination(
            bn, request.variable, request.outcome, dict(request.evidence), tuple(request.order)
        )
    raise TypeError(f"I do not know how to answer {request!r}")


def answer_safely(bn: BayesianNetwork, request):
    """Answer one request, turning a failure into a QueryFailure so the rest of a batch can go on"""
    if isinstance(request, QueryFailure):  # could not be parsed
        return request
    try:
        result = answer(bn, request)
    except (ValueError, KeyError) as error:
        logger.exception("Failed to answer {}", request)
        return QueryFailure(request, str(error))
    logger.info("{} => {}", request, render(result))
    return result


def answer_batch(bn: BayesianNetwork, requests: list, n_jobs=1):
    """
    Answer all requests, returning one result per request (in the same order).

    n_jobs: if other than 1, requests are answered in parallel by joblib workers
        (-1 uses all cores); the network is only read, so workers can share it
    """
    requests = list(requests)
    if n_jobs == 1:
        results = [answer_safely(bn, request) for request in requests]
    else:
        results = Parallel(n_jobs=n_jobs, backend="loky")(
            delayed(answer_safely)(bn, request) for request in requests
        )
    failures = sum(isinstance(result, QueryFailure) for result in results)
    logger.info("Answered {} requests ({} failed)", len(results), failures)
    return results


def render(result):
    """
    Render a result as a line of output:
        - "yes"/"no" for independence
        - "probability,additions,multiplications" for posteriors, e.g. "0.31000,3,4"
        - "error" for a failed request
    """
    if isinstance(result, QueryFailure):
        return "error"
    if isinstance(result, QueryResult):
        return f"{result.probability:.5f},{result.additions},{result.multiplications}"
    return "yes" if result else "no"
