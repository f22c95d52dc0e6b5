from .factor import CPDFactor
from .model import BayesianNetwork

__all__ = [
    "CPDFactor",
    "BayesianNetwork"
]
