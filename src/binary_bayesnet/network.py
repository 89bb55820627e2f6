"""
Binary Bayes Net — Network Description
======================================
One description of a binary Bayesian network from which both inference
engines are built: the factor set for variable elimination and the node arena
for Gibbs sampling.

Each variable is declared with its parents and a table of
P(variable=true | parents), the parent assignment read as a binary number
with the first (smallest) parent most significant. Parents must be declared
before their children, which keeps the graph acyclic by construction.

Usage:
    from binary_bayesnet.network import BayesianNetwork

    net = BayesianNetwork('sprinkler')
    net.add_variable('C', [0.5])                              # cloudy
    net.add_variable('R', [0.2, 0.8], parents=['C'])          # rain
    net.add_variable('S', [0.5, 0.1], parents=['C'])          # sprinkler
    net.add_variable('W', [0.0, 0.9, 0.9, 0.99], parents=['R', 'S'])

    ve = net.variable_elimination(['C', 'S', 'R', 'W'])
    ve.set_evidence_observation('W', True)
    ve.compute_query('R')

Author: Binary Bayes Net contributors
License: MIT
"""

import itertools
from dataclasses import dataclass
from typing import Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .bits import index_to_assignment
from .elimination import VariableElimination, VEConfig
from .errors import (
    MalformedTableError,
    UnknownVariableError,
    ZeroProbabilityEvidenceError,
)
from .factor import Factor
from .gibbs import GibbsConfig, GibbsSampler, SamplingNetwork


@dataclass
class VariableSpec:
    """A declared variable: its parents and P(true | parents) table."""
    name: Hashable
    parents: Tuple[Hashable, ...]
    probabilities: Tuple[float, ...]


class BayesianNetwork:
    """Declarative binary Bayesian network."""

    def __init__(self, name: str = ''):
        self.name = name
        self._specs: Dict[Hashable, VariableSpec] = {}

    def add_variable(self,
                     variable: Hashable,
                     probabilities: Sequence[float],
                     parents: Sequence[Hashable] = ()) -> 'BayesianNetwork':
        """Declare a variable; returns the network so calls can be chained."""
        if variable in self._specs:
            raise ValueError(f"Variable {variable!r} already declared")
        for parent in parents:
            if parent not in self._specs:
                raise UnknownVariableError(
                    f"Parent {parent!r} of {variable!r} must be declared first"
                )

        # Validates length, ordering and non-negativity
        table = Factor(probabilities, *parents)
        if np.any(table.values > 1):
            raise MalformedTableError(f"Probabilities for {variable!r} must lie in [0, 1]")

        self._specs[variable] = VariableSpec(
            variable, tuple(parents), tuple(float(p) for p in probabilities)
        )
        return self

    # ─────────────────────────────────────────────────────────────
    # Structure
    # ─────────────────────────────────────────────────────────────

    @property
    def variables(self) -> List[Hashable]:
        """All variables in ascending order."""
        return sorted(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, variable: Hashable) -> bool:
        return variable in self._specs

    def _spec(self, variable: Hashable) -> VariableSpec:
        try:
            return self._specs[variable]
        except KeyError:
            raise UnknownVariableError(f"Unknown variable: {variable!r}") from None

    def parents(self, variable: Hashable) -> Tuple[Hashable, ...]:
        return self._spec(variable).parents

    def children(self, variable: Hashable) -> List[Hashable]:
        self._spec(variable)
        return sorted(v for v, spec in self._specs.items() if variable in spec.parents)

    # ─────────────────────────────────────────────────────────────
    # Engine inputs
    # ─────────────────────────────────────────────────────────────

    def cpt_factor(self, variable: Hashable) -> Factor:
        """Family factor P(variable | parents) over sorted(parents + [variable])."""
        spec = self._spec(variable)
        scope = sorted(spec.parents + (variable,))
        parent_table = Factor(spec.probabilities, *spec.parents)

        values = []
        for index in range(2 ** len(scope)):
            assignment = dict(zip(scope, index_to_assignment(index, len(scope))))
            p_true = parent_table.evaluate(assignment)
            values.append(p_true if assignment[variable] else 1.0 - p_true)

        return Factor(values, *scope)

    def factors(self) -> List[Factor]:
        """One family factor per variable, in ascending variable order."""
        return [self.cpt_factor(v) for v in self.variables]

    def sampling_network(self) -> SamplingNetwork:
        """Fresh node arena for Gibbs sampling."""
        network = SamplingNetwork()
        # Declaration order puts every parent before its children
        for spec in self._specs.values():
            network.add_node(spec.name, spec.probabilities, spec.parents)
        return network

    def variable_elimination(self,
                             elimination_ordering: Sequence[Hashable],
                             config: Optional[VEConfig] = None) -> VariableElimination:
        return VariableElimination(self.factors(), elimination_ordering, config)

    def gibbs_sampler(self,
                      config: Optional[GibbsConfig] = None,
                      rng: Optional[np.random.Generator] = None) -> GibbsSampler:
        return GibbsSampler(self.sampling_network(), config, rng)

    # ─────────────────────────────────────────────────────────────
    # Brute-force enumeration (small networks only)
    # ─────────────────────────────────────────────────────────────

    def joint_probability(self, assignment: Mapping[Hashable, bool]) -> float:
        """Product of every CPT entry for a complete assignment."""
        probability = 1.0
        for spec in self._specs.values():
            table = Factor(spec.probabilities, *spec.parents)
            p_true = table.evaluate(assignment)
            probability *= p_true if assignment[spec.name] else 1.0 - p_true
        return probability

    def enumerate_query(self,
                        query: Hashable,
                        evidence: Optional[Mapping[Hashable, bool]] = None) -> float:
        """P(query=true | evidence) by summing the full joint distribution.

        Exponential in the number of variables; intended as a reference for
        checking the inference engines.
        """
        evidence = dict(evidence or {})
        self._spec(query)
        for var in evidence:
            self._spec(var)

        free = [v for v in self.variables if v not in evidence]
        weights = {True: 0.0, False: 0.0}
        for values in itertools.product((False, True), repeat=len(free)):
            assignment = dict(zip(free, values))
            assignment.update(evidence)
            weights[assignment[query]] += self.joint_probability(assignment)

        total = weights[True] + weights[False]
        if total == 0:
            raise ZeroProbabilityEvidenceError(f"Evidence {evidence} has probability zero")
        return weights[True] / total
