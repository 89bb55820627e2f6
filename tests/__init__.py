"""
Binary Bayes Net — Test Suite
=============================

Test modules:
- test_bits.py: Bit indexing helpers
- test_factor.py: Factor algebra (product, sum-out, fixing)
- test_elimination.py: Variable elimination engine
- test_gibbs.py: Gibbs sampler
- test_network.py: Network description and example networks
"""
