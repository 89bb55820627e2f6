"""
Binary Bayes Net — Factor Tables
================================
A factor is a tabulated function from a joint assignment of a fixed, ordered
set of binary variables to a non-negative weight. Conditional probability
tables, intermediate products and the final posterior of variable elimination
are all factors.

Storage:
    values[index] where bit i of index is the value of variables[i].
    ``variables`` is stored in descending order, so the smallest variable
    occupies the most-significant bit (see :mod:`binary_bayesnet.bits`).

    Factor([0.95, 0.8, 0.05, 0.2], 'B', 'M')

        B      M      phi
        False  False  0.95
        False  True   0.80
        True   False  0.05
        True   True   0.20

Operations never normalise. Normalisation happens once, at the end of a
query.

Usage:
    from binary_bayesnet.factor import Factor, pointwise_product

    phi_b = Factor([0.95, 0.8, 0.05, 0.2], 'B', 'M')
    phi_s = Factor([0.4, 0.6, 0.2, 0.8], 'B', 'S')

    joint = pointwise_product([phi_b, phi_s])   # over B, M, S
    marginal = joint.sum_out('B')              # over M, S
    observed = phi_s.fix_variable('S', True)   # over B

Author: Binary Bayes Net contributors
License: MIT
"""

from functools import reduce
from typing import Hashable, Iterable, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd

from .bits import (
    assignment_to_index,
    index_in_factor,
    index_to_assignment,
    overlap_mask,
    union_ordered,
)
from .errors import AssignmentLengthMismatchError, MalformedTableError


class Factor:
    """Probability table over an ordered set of binary variables.

    Factors are immutable from the outside: product, sum-out and fixing all
    return new Factor objects. Two factors holding identical tables are still
    distinct objects; collections of factors rely on identity, not equality.
    """

    def __init__(self, values: Sequence[float], *variables: Hashable):
        """
        Args:
            values: 2^k weights, indexed by the assignment of ``variables``
                read as a binary number (first variable most significant)
            variables: k distinct variables in ascending order
        """
        table = np.array(values, dtype=np.float64)

        if table.ndim != 1 or table.shape[0] != 2 ** len(variables):
            raise MalformedTableError(
                f"Factor over {len(variables)} variables needs "
                f"{2 ** len(variables)} values, got shape {table.shape}"
            )
        for lower, upper in zip(variables, variables[1:]):
            if not lower < upper:
                raise MalformedTableError(
                    f"Variables must be distinct and in ascending order, "
                    f"got {list(variables)}"
                )
        if not np.all(np.isfinite(table)) or np.any(table < 0):
            raise MalformedTableError("Factor values must be finite and non-negative")

        table.setflags(write=False)
        self._values = table
        # Reversed so that position i matches bit i of the index
        self._variables: Tuple[Hashable, ...] = tuple(reversed(variables))
        self._variable_set = frozenset(variables)

    @classmethod
    def _from_bit_order(cls, values: np.ndarray, variables: Sequence[Hashable]) -> 'Factor':
        return cls(values, *reversed(variables))

    @classmethod
    def constant(cls, value: float) -> 'Factor':
        """Zero-variable factor holding a single scalar."""
        return cls([value])

    # ─────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────

    @property
    def variables(self) -> Tuple[Hashable, ...]:
        """Variables in stored (descending) order; ``variables[i]`` owns bit i."""
        return self._variables

    @property
    def scope(self) -> Tuple[Hashable, ...]:
        """Variables in ascending order, as given to the constructor."""
        return tuple(reversed(self._variables))

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the 2^k table."""
        return self._values

    def contains(self, var: Hashable) -> bool:
        return var in self._variable_set

    __contains__ = contains

    def is_empty(self) -> bool:
        """True once every variable has been summed out or fixed."""
        return not self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def total(self) -> float:
        return float(self._values.sum())

    def probability_of(self, *assignment: bool) -> float:
        """Look up the entry for an assignment listed in ascending variable order."""
        if len(assignment) != len(self._variables):
            raise AssignmentLengthMismatchError(
                f"Expected {len(self._variables)} values for {list(self.scope)}, "
                f"got {len(assignment)}"
            )
        return float(self._values[assignment_to_index(assignment)])

    def evaluate(self, assignment: Mapping[Hashable, bool]) -> float:
        """Look up the entry consistent with a variable -> value mapping.

        Extra keys are ignored; every variable of the factor must be present.
        """
        missing = [v for v in self.scope if v not in assignment]
        if missing:
            raise AssignmentLengthMismatchError(f"No value given for {missing}")
        return self.probability_of(*(assignment[v] for v in self.scope))

    # ─────────────────────────────────────────────────────────────
    # Algebra
    # ─────────────────────────────────────────────────────────────

    def _restrict(self, index: np.ndarray, mask: int) -> np.ndarray:
        """Entries of this factor matching every index of a wider table."""
        local = index_in_factor(index, mask)
        return self._values[np.broadcast_to(local, index.shape)]

    def multiply(self, other: 'Factor') -> 'Factor':
        """Pointwise product over the union of both variable sets."""
        union = union_ordered(self._variables, other._variables)
        index = np.arange(2 ** len(union))

        values = (self._restrict(index, overlap_mask(self._variables, union)) *
                  other._restrict(index, overlap_mask(other._variables, union)))

        return Factor._from_bit_order(values, union)

    __mul__ = multiply

    def _split(self, var: Hashable) -> Tuple[np.ndarray, np.ndarray, Tuple[Hashable, ...]]:
        """Halve the table on ``var``: (false slice, true slice, remaining variables)."""
        bit = self._variables.index(var)
        index = np.arange(len(self._values) // 2)

        below = index & ((1 << bit) - 1)
        above = (index >> bit) << (bit + 1)
        false_index = above | below
        true_index = false_index | (1 << bit)

        remaining = self._variables[:bit] + self._variables[bit + 1:]
        return self._values[false_index], self._values[true_index], remaining

    def sum_out(self, *variables: Hashable) -> 'Factor':
        """Marginalise the given variables out of the table.

        Variables the factor does not contain are skipped; if none of them is
        present the same factor object is returned.
        """
        factor = self
        for var in variables:
            if var not in factor:
                continue
            false_values, true_values, remaining = factor._split(var)
            factor = Factor._from_bit_order(false_values + true_values, remaining)
        return factor

    def fix_variable(self, var: Hashable, value: bool) -> 'Factor':
        """Condition on an observed value, keeping only the consistent half.

        No-op (returns the same object) if ``var`` is not in the factor.
        """
        if var not in self:
            return self
        false_values, true_values, remaining = self._split(var)
        return Factor._from_bit_order(true_values if value else false_values, remaining)

    # ─────────────────────────────────────────────────────────────
    # Display
    # ─────────────────────────────────────────────────────────────

    def to_dataframe(self) -> pd.DataFrame:
        """One row per assignment: a boolean column per variable, then ``phi``."""
        scope = list(self.scope)
        rows = []
        for i, phi in enumerate(self._values):
            row = dict(zip(scope, index_to_assignment(i, len(scope))))
            row['phi'] = float(phi)
            rows.append(row)
        return pd.DataFrame(rows, columns=scope + ['phi'])

    def __str__(self) -> str:
        return self.to_dataframe().to_string(index=False, float_format=lambda x: f"{x:.4f}")

    def __repr__(self) -> str:
        return f"Factor(scope={list(self.scope)}, values={self._values.tolist()})"


def pointwise_product(factors: Iterable[Factor]) -> Factor:
    """Product of one or more factors, reduced pairwise in iteration order."""
    factors = list(factors)
    if not factors:
        raise ValueError("pointwise_product needs at least one factor")
    return reduce(Factor.multiply, factors)
