from .batch import IndependenceQuery, PosteriorQuery, QueryFailure, answer, answer_safely, answer_batch, render

__all__ = [
    "IndependenceQuery",
    "PosteriorQuery",
    "QueryFailure",
    "answer",
    "answer_safely",
    "answer_batch",
    "render",
]
