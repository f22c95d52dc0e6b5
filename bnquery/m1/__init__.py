from .graph import DAG, topological_sort, compute_ancestors, ancestral_closure, is_reachable, independent
from .variable import OutcomeSpace, Variable, enumerate_joint_assignments

__all__ = [
    "DAG",
    "topological_sort",
    "compute_ancestors",
    "ancestral_closure",
    "is_reachable",
    "independent",
    "OutcomeSpace",
    "Variable",
    "enumerate_joint_assignments"
]
