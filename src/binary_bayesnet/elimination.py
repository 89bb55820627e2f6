"""
Binary Bayes Net — Variable Elimination
=======================================
Exact inference over a set of factor tables, following a caller-supplied
elimination ordering.

Algorithm (one query, on a disposable copy of the live factors):
    for v in ordering:
        collect every factor mentioning v (skip v if there are none)
        multiply them together
        sum v out unless v is the query or an observed variable
        put the result back unless it has no variables left

    The single remaining factor is over the query variable only;
    P(query=true) = phi(true) / (phi(true) + phi(false)).

Evidence is pushed into the live factors as soon as it is observed and
persists across queries until :meth:`VariableElimination.reset_bayes_net`.

Usage:
    from binary_bayesnet.elimination import VariableElimination

    ve = VariableElimination(factors, ['M', 'S', 'C', 'B', 'I'])
    ve.set_evidence_observation('S', True)
    ve.set_evidence_observation('C', False)
    p = ve.compute_query('M')

Author: Binary Bayes Net contributors
License: MIT
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional, Sequence

from .errors import (
    EvidenceConflictError,
    IncompleteEliminationError,
    UnknownVariableError,
    ZeroProbabilityEvidenceError,
)
from .factor import Factor, pointwise_product


@dataclass
class VEConfig:
    """Configuration for variable elimination."""
    reset_after_query: bool = False  # Discard evidence after every query
    verbose: bool = False            # Print each elimination step


class VariableElimination:
    """Variable elimination engine for a network of binary factors.

    The live factor list and hidden-variable list are private working state.
    One engine serves one caller at a time; concurrent queries need separate
    engines.
    """

    def __init__(self,
                 factors: Iterable[Factor],
                 elimination_ordering: Sequence[Hashable],
                 config: Optional[VEConfig] = None):
        """
        Args:
            factors: Base factors of the network (one CPT per variable)
            elimination_ordering: Permutation of all network variables
            config: Engine configuration (defaults if None)
        """
        self.config = config or VEConfig()
        self._base_factors: List[Factor] = list(factors)

        network_vars = set()
        for factor in self._base_factors:
            network_vars.update(factor.scope)
        self.network_variables = sorted(network_vars)

        self.set_elimination_ordering(elimination_ordering)
        self.reset_bayes_net()

    def set_elimination_ordering(self, elimination_ordering: Sequence[Hashable]):
        """Set the order in which variables are multiplied in and summed out.

        Only membership is checked. An ordering that is not a permutation of
        the network variables is reported by :meth:`compute_query` as an
        :class:`IncompleteEliminationError`.
        """
        unknown = [v for v in elimination_ordering if v not in self.network_variables]
        if unknown:
            raise UnknownVariableError(f"Elimination ordering names unknown variables {unknown}")
        self.elimination_ordering = list(elimination_ordering)

    def reset_bayes_net(self):
        """Restore the base factors and hidden variables, dropping all evidence.

        Constant (variable-free) base factors are left out; they scale both
        outcomes of every query alike.
        """
        self.factors: List[Factor] = [f for f in self._base_factors if not f.is_empty()]
        self.hidden_variables: List[Hashable] = list(self.network_variables)
        self.evidence: Dict[Hashable, bool] = {}

    def _check_variable(self, var: Hashable):
        if var not in self.network_variables:
            raise UnknownVariableError(f"Unknown variable: {var!r}")

    def set_evidence_observation(self, var: Hashable, value: bool):
        """Fix ``var`` to ``value`` in every live factor.

        Factors left without free variables are dropped. Re-observing the
        same value is a no-op; observing the opposite value is an error.
        """
        self._check_variable(var)
        value = bool(value)

        if var in self.evidence:
            if self.evidence[var] != value:
                raise EvidenceConflictError(
                    f"{var!r} already observed as {self.evidence[var]}"
                )
            return

        fixed = [factor.fix_variable(var, value) for factor in self.factors]
        self.factors = [factor for factor in fixed if not factor.is_empty()]
        self.hidden_variables.remove(var)
        self.evidence[var] = value

        if self.config.verbose:
            print(f"[VE] Observed {var}={value}, {len(self.factors)} factors live")

    def is_hidden_variable(self, var: Hashable) -> bool:
        return var in self.hidden_variables

    def compute_query(self, var: Hashable) -> float:
        """Return P(var=true | evidence).

        Observed variables short-circuit to 1.0 or 0.0 without elimination.
        """
        self._check_variable(var)

        try:
            if var in self.evidence:
                return 1.0 if self.evidence[var] else 0.0
            return self._eliminate(var)
        finally:
            if self.config.reset_after_query:
                self.reset_bayes_net()

    def _eliminate(self, query: Hashable) -> float:
        factors = list(self.factors)
        hidden = [v for v in self.hidden_variables if v != query]

        for var in self.elimination_ordering:
            collected = [f for f in factors if f.contains(var)]
            if not collected:
                continue
            factors = [f for f in factors if not f.contains(var)]

            factor = pointwise_product(collected)
            if var in hidden:
                factor = factor.sum_out(var)

            if self.config.verbose:
                action = "summed out" if var in hidden else "kept"
                print(f"[VE] {var}: multiplied {len(collected)} factors, {action} "
                      f"-> scope {list(factor.scope)}")

            if not factor.is_empty():
                factors.append(factor)

        if len(factors) != 1:
            raise IncompleteEliminationError(
                f"{len(factors)} factors remain after elimination "
                f"(scopes {[list(f.scope) for f in factors]}); "
                f"check the elimination ordering {self.elimination_ordering}"
            )

        final = factors[0]
        if final.scope != (query,):
            raise IncompleteEliminationError(
                f"Final factor is over {list(final.scope)}, expected [{query!r}]"
            )

        true_value = final.probability_of(True)
        false_value = final.probability_of(False)
        total = true_value + false_value
        if total == 0:
            raise ZeroProbabilityEvidenceError(
                f"Evidence {self.evidence} has probability zero"
            )
        return true_value / total

    def __str__(self) -> str:
        return "\n\n".join(str(factor) for factor in self.factors)
