from .factor import Assignment, OperationCounter, Factor, join_all

__all__ = [
    "Assignment",
    "OperationCounter",
    "Factor",
    "join_all"
]
