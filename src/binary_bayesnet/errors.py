"""
Binary Bayes Net — Error Kinds
==============================
All errors are raised synchronously at the call that detects them. Inference
is deterministic (VE) or only slowly converging (Gibbs), so nothing here is
worth retrying.

Author: Binary Bayes Net contributors
License: MIT
"""


class BayesNetError(ValueError):
    """Base class for every error raised by this package."""


class MalformedTableError(BayesNetError):
    """Table length is not 2^k for k variables, or the variables are invalid."""


class UnknownVariableError(BayesNetError):
    """A query, observation or ordering names a variable not in the network."""


class IncompleteEliminationError(BayesNetError):
    """Elimination did not end with exactly one single-variable factor.

    Signals a malformed elimination ordering (not a permutation of the
    network variables) or a malformed network.
    """


class AssignmentLengthMismatchError(BayesNetError):
    """Probability lookup given the wrong number of boolean values."""


class EvidenceConflictError(BayesNetError):
    """Variable already observed with the opposite value."""


class ZeroProbabilityEvidenceError(BayesNetError):
    """The observed evidence has probability zero under the network."""
