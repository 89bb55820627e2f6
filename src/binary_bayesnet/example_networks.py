"""
Binary Bayes Net — Example Networks
===================================
Small networks over the variables B, C, I, M, S used for demonstrations and
as fixtures for checking the engines against known answers.

Reference network (M is the only root):

        M
       / \\
      B   I
     / \\ /
    S   C

Alarm network (textbook burglary example on the same labels):
    B = Burglary, I = Earthquake, C = Alarm, S = JohnCalls, M = MaryCalls

        B   I
         \\ /
          C
         / \\
        S   M

Author: Binary Bayes Net contributors
License: MIT
"""

from typing import Callable, Dict, List

from .network import BayesianNetwork


# Reference query: P(M | S=true, C=false) with ordering M, S, C, B, I
REFERENCE_ORDERING: List[str] = ['M', 'S', 'C', 'B', 'I']
REFERENCE_EVIDENCE: Dict[str, bool] = {'S': True, 'C': False}
REFERENCE_POSTERIOR = 0.04 / 0.4112   # ~0.09728

# P(B | S=true, M=true), the classic "both neighbours called" query
ALARM_ORDERING: List[str] = ['M', 'S', 'I', 'C', 'B']
ALARM_EVIDENCE: Dict[str, bool] = {'S': True, 'M': True}
ALARM_POSTERIOR = 0.284172


def reference_network() -> BayesianNetwork:
    """Five-variable network with M as root."""
    net = BayesianNetwork('reference')
    net.add_variable('M', [0.20])
    net.add_variable('B', [0.05, 0.20], parents=['M'])
    net.add_variable('I', [0.20, 0.80], parents=['M'])
    net.add_variable('C', [0.05, 0.80, 0.80, 0.80], parents=['B', 'I'])
    net.add_variable('S', [0.60, 0.80], parents=['B'])
    return net


def alarm_network() -> BayesianNetwork:
    """Burglary / earthquake / alarm network."""
    net = BayesianNetwork('alarm')
    net.add_variable('B', [0.001])
    net.add_variable('I', [0.002])
    net.add_variable('C', [0.001, 0.29, 0.94, 0.95], parents=['B', 'I'])
    net.add_variable('M', [0.01, 0.70], parents=['C'])
    net.add_variable('S', [0.05, 0.90], parents=['C'])
    return net


EXAMPLE_NETWORKS: Dict[str, Callable[[], BayesianNetwork]] = {
    'reference': reference_network,
    'alarm': alarm_network,
}


def get_network(name: str) -> BayesianNetwork:
    """Build a named example network."""
    if name not in EXAMPLE_NETWORKS:
        raise ValueError(f"Unknown network: {name}. "
                         f"Available: {list(EXAMPLE_NETWORKS.keys())}")
    return EXAMPLE_NETWORKS[name]()
