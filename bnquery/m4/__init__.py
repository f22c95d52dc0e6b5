from .alg import (
    QueryResult,
    round_half_up,
    independence_query,
    relevant_variables,
    prune_independent,
    split_factors,
    elimination_key,
    variable_elimination,
    naive_exact_inference,
)

__all__ = [
    "QueryResult",
    "round_half_up",
    "independence_query",
    "relevant_variables",
    "prune_independent",
    "split_factors",
    "elimination_key",
    "variable_elimination",
    "naive_exact_inference",
]
