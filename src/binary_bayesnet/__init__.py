"""
Binary Bayes Net - Inference over Binary Bayesian Networks

Exact inference by variable elimination over bit-indexed factor tables, and
approximate inference by Gibbs sampling over the network's Markov blankets.
"""

__version__ = "0.1.0"

# Factor algebra
from .bits import index_in_factor, overlap_mask, union_ordered
from .factor import Factor, pointwise_product

# Inference engines
from .elimination import VariableElimination, VEConfig
from .gibbs import GibbsConfig, GibbsSampler, SamplingNetwork, SamplingNode

# Network description
from .network import BayesianNetwork
from .example_networks import EXAMPLE_NETWORKS, alarm_network, get_network, reference_network

from .errors import (
    AssignmentLengthMismatchError,
    BayesNetError,
    EvidenceConflictError,
    IncompleteEliminationError,
    MalformedTableError,
    UnknownVariableError,
    ZeroProbabilityEvidenceError,
)

__all__ = [
    "overlap_mask",
    "index_in_factor",
    "union_ordered",
    "Factor",
    "pointwise_product",
    "VariableElimination",
    "VEConfig",
    "GibbsConfig",
    "GibbsSampler",
    "SamplingNetwork",
    "SamplingNode",
    "BayesianNetwork",
    "EXAMPLE_NETWORKS",
    "alarm_network",
    "get_network",
    "reference_network",
    "BayesNetError",
    "MalformedTableError",
    "UnknownVariableError",
    "IncompleteEliminationError",
    "AssignmentLengthMismatchError",
    "EvidenceConflictError",
    "ZeroProbabilityEvidenceError",
]
