"""
Binary Bayes Net — Gibbs Sampling (MCMC)
========================================
Approximate inference by resampling one variable at a time from its
distribution given its Markov blanket.

Sampling network:
    Nodes live in an arena (a list) owned by :class:`SamplingNetwork`.
    Parent and child links are integer handles into that arena. Current
    assignments and true-counters are numpy arrays indexed by handle.

Markov blanket update for node X with children Y1..Yn:
    w(x) = P(X=x | parents(X)) * prod_i P(Yi=yi | parents(Yi) with X=x)
    P(X=true | blanket) = w(true) / (w(true) + w(false))

Each query averages M independent runs. A run randomises every live node,
performs N round-robin resampling steps (after an optional burn-in) and
records the fraction of counted steps in which the query variable was true.

Usage:
    from binary_bayesnet.gibbs import GibbsSampler, GibbsConfig

    sampler = GibbsSampler(net.sampling_network(),
                           GibbsConfig(n_samples=1000, n_runs=1000, seed=42))
    sampler.set_evidence_observation('S', True)
    p = sampler.compute_query('M')
    summary = sampler.summarize()

Author: Binary Bayes Net contributors
License: MIT
"""

import warnings
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np
from scipy import stats
from tqdm import tqdm

try:
    import matplotlib.pyplot as plt
    import seaborn as sns
    PLOTTING_AVAILABLE = True
except ImportError:
    PLOTTING_AVAILABLE = False

from .errors import EvidenceConflictError, UnknownVariableError
from .factor import Factor


# ═══════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════

@dataclass
class GibbsConfig:
    """Configuration for Gibbs sampling."""
    n_samples: int = 1000          # N: counted resampling steps per run
    n_runs: int = 1000             # M: independent runs averaged together
    burn_in: int = 0               # Uncounted steps at the start of each run
    seed: Optional[int] = None     # Used when no Generator is injected

    reset_after_query: bool = False  # Discard evidence after every query
    progressbar: bool = False        # tqdm bar over runs
    verbose: bool = False


# ═══════════════════════════════════════════════════════════════
# Sampling network
# ═══════════════════════════════════════════════════════════════

@dataclass
class SamplingNode:
    """A variable of the sampling network.

    ``cpt`` holds P(variable=true | parents) over the parent variables;
    ``parents`` lists the parent handles in the same (ascending) order as
    ``cpt.scope``.
    """
    variable: Hashable
    cpt: Factor
    parents: Tuple[int, ...] = ()
    children: List[int] = field(default_factory=list)


class SamplingNetwork:
    """Arena of sampling nodes with their live boolean assignments."""

    def __init__(self):
        self.nodes: List[SamplingNode] = []
        self._handles: Dict[Hashable, int] = {}
        self.assignments = np.zeros(0, dtype=bool)
        self.true_counts = np.zeros(0, dtype=np.int64)

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self,
                 variable: Hashable,
                 probabilities: Sequence[float],
                 parents: Sequence[Hashable] = ()) -> int:
        """Add a node whose parents are already in the arena; return its handle.

        Args:
            variable: New variable label
            probabilities: P(variable=true | parents), 2^len(parents) entries,
                first parent most significant
            parents: Parent variables in ascending order
        """
        if variable in self._handles:
            raise ValueError(f"Variable {variable!r} already in network")
        parent_handles = tuple(self.handle(p) for p in parents)
        cpt = Factor(probabilities, *parents)

        handle = len(self.nodes)
        self.nodes.append(SamplingNode(variable, cpt, parent_handles))
        self._handles[variable] = handle
        for parent in parent_handles:
            self.nodes[parent].children.append(handle)

        self.assignments = np.append(self.assignments, False)
        self.true_counts = np.append(self.true_counts, 0)
        return handle

    def handle(self, variable: Hashable) -> int:
        try:
            return self._handles[variable]
        except KeyError:
            raise UnknownVariableError(f"Unknown variable: {variable!r}") from None

    def _value(self, handle: int, override: Optional[Tuple[int, bool]]) -> bool:
        if override is not None and override[0] == handle:
            return override[1]
        return bool(self.assignments[handle])

    def probability_given_parents(self,
                                  handle: int,
                                  override: Optional[Tuple[int, bool]] = None) -> float:
        """P(node=true) under the current parent assignments.

        ``override`` substitutes a value for one node, as (handle, value).
        """
        node = self.nodes[handle]
        return node.cpt.probability_of(*(self._value(p, override) for p in node.parents))

    def probability_given_markov_blanket(self, handle: int) -> float:
        """P(node=true) given its parents, children and children's parents."""
        p_true = self.probability_given_parents(handle)
        true_weight = p_true
        false_weight = 1.0 - p_true

        for child in self.nodes[handle].children:
            child_value = self.assignments[child]
            p_child_true = self.probability_given_parents(child, (handle, True))
            p_child_false = self.probability_given_parents(child, (handle, False))
            true_weight *= p_child_true if child_value else 1.0 - p_child_true
            false_weight *= p_child_false if child_value else 1.0 - p_child_false

        total = true_weight + false_weight
        if total == 0:
            warnings.warn(
                f"Markov blanket of {self.nodes[handle].variable!r} has zero weight; "
                f"sampling it uniformly"
            )
            return 0.5
        return true_weight / total


# ═══════════════════════════════════════════════════════════════
# Gibbs sampler
# ═══════════════════════════════════════════════════════════════

class GibbsSampler:
    """MCMC query engine over a :class:`SamplingNetwork`.

    A query makes ``n_runs`` independent runs. Every run re-randomises the
    live (unobserved) nodes and restarts the round-robin at the smallest live
    variable, so runs do not share sweep position or state.
    """

    def __init__(self,
                 network: SamplingNetwork,
                 config: Optional[GibbsConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            network: Sampling network (the sampler mutates its assignments)
            config: Sampler configuration (defaults if None)
            rng: Random source; a Generator seeded with ``config.seed`` if None
        """
        self.config = config or GibbsConfig()
        if self.config.n_samples <= 0 or self.config.n_runs <= 0:
            raise ValueError("n_samples and n_runs must be positive")
        if self.config.burn_in < 0:
            raise ValueError("burn_in must be non-negative")

        self.network = network
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.reset_bayes_net()

    def reset_bayes_net(self):
        """Make every node live again and forget all evidence."""
        order = sorted(range(len(self.network)), key=lambda h: self.network.nodes[h].variable)
        self.live_handles: List[int] = order
        self.evidence: Dict[Hashable, bool] = {}
        self.run_estimates = np.zeros(0)
        self.network.true_counts[:] = 0

    def set_evidence_observation(self, var: Hashable, value: bool):
        """Fix ``var`` to ``value`` and stop resampling it."""
        handle = self.network.handle(var)
        value = bool(value)

        if var in self.evidence:
            if self.evidence[var] != value:
                raise EvidenceConflictError(
                    f"{var!r} already observed as {self.evidence[var]}"
                )
            return

        self.live_handles.remove(handle)
        self.network.assignments[handle] = value
        self.evidence[var] = value

    def compute_query(self, var: Hashable) -> float:
        """Estimate P(var=true | evidence) as the mean over ``n_runs`` runs."""
        handle = self.network.handle(var)

        try:
            if var in self.evidence or not self.live_handles:
                self.run_estimates = np.zeros(0)
                return 1.0 if self.network.assignments[handle] else 0.0
            return self._sample(handle)
        finally:
            if self.config.reset_after_query:
                self.reset_bayes_net()

    def _sample(self, query: int) -> float:
        cfg = self.config
        net = self.network
        live = np.array(self.live_handles)
        n_live = len(self.live_handles)
        estimates = np.zeros(cfg.n_runs)

        runs = tqdm(range(cfg.n_runs), desc="[Gibbs] runs", disable=not cfg.progressbar)
        for run in runs:
            net.assignments[live] = self.rng.random(n_live) < 0.5
            net.true_counts[:] = 0

            for step in range(cfg.burn_in + cfg.n_samples):
                handle = self.live_handles[step % n_live]
                p_true = net.probability_given_markov_blanket(handle)
                net.assignments[handle] = self.rng.random() < p_true
                if step >= cfg.burn_in:
                    net.true_counts[live] += net.assignments[live]

            estimates[run] = net.true_counts[query] / cfg.n_samples

        net.true_counts[:] = 0
        self.run_estimates = estimates

        if cfg.verbose:
            print(f"[Gibbs] {net.nodes[query].variable}: mean {estimates.mean():.4f} "
                  f"over {cfg.n_runs} runs x {cfg.n_samples} samples")

        return float(estimates.mean())

    def summarize(self, credible_interval: float = 0.95) -> Dict[str, float]:
        """Mean, spread and Student-t interval of the last query's run estimates."""
        estimates = self.run_estimates
        if len(estimates) == 0:
            raise ValueError("No run estimates available. Run compute_query() first.")

        n = len(estimates)
        mean = float(estimates.mean())
        std = float(estimates.std(ddof=1)) if n > 1 else 0.0
        if n > 1:
            half_width = stats.t.ppf((1 + credible_interval) / 2, n - 1) * std / np.sqrt(n)
        else:
            half_width = 0.0

        return {
            'mean': mean,
            'std': std,
            'ci_lower': mean - float(half_width),
            'ci_upper': mean + float(half_width),
            'n_runs': n,
        }

    def plot_run_estimates(self, save_path: Optional[str] = None):
        """Plot each run's estimate with the running mean across runs."""
        if not PLOTTING_AVAILABLE:
            warnings.warn("Matplotlib/Seaborn not available for plotting")
            return None

        estimates = self.run_estimates
        if len(estimates) == 0:
            raise ValueError("No run estimates available")

        sns.set_style('whitegrid')
        runs = np.arange(1, len(estimates) + 1)
        fig, ax = plt.subplots(figsize=(10, 4))
        ax.plot(runs, estimates, '.', alpha=0.4, label='run estimate')
        ax.plot(runs, np.cumsum(estimates) / runs, label='running mean')
        ax.set_xlabel('run')
        ax.set_ylabel('P(true)')
        ax.legend()
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
        return fig
