"""
Unit tests for factor tables
"""

import itertools

import pytest
import numpy as np
import pandas as pd

from binary_bayesnet.errors import AssignmentLengthMismatchError, MalformedTableError
from binary_bayesnet.factor import Factor, pointwise_product


DELTA = 1e-9


@pytest.fixture
def phi_b():
    #                  B,M: FF    FT   TF    TT
    return Factor([0.95, 0.8, 0.05, 0.2], 'B', 'M')


@pytest.fixture
def phi_c():
    return Factor([
        0.95,  # B=F C=F I=F
        0.2,   # F F T
        0.05,  # F T F
        0.8,   # F T T
        0.2,   # T F F
        0.2,   # T F T
        0.8,   # T T F
        0.8,   # T T T
    ], 'B', 'C', 'I')


@pytest.fixture
def phi_i():
    return Factor([0.8, 0.2, 0.2, 0.8], 'I', 'M')


@pytest.fixture
def phi_m():
    return Factor([0.8, 0.2], 'M')


@pytest.fixture
def phi_s():
    return Factor([0.4, 0.6, 0.2, 0.8], 'B', 'S')


class TestConstruction:
    """Test factor construction and validation."""

    def test_variables_stored_reversed(self, phi_c):
        assert phi_c.variables == ('I', 'C', 'B')
        assert phi_c.scope == ('B', 'C', 'I')
        assert len(phi_c) == 3

    def test_wrong_length_rejected(self):
        with pytest.raises(MalformedTableError):
            Factor([0.5, 0.5, 0.5], 'A', 'B')
        with pytest.raises(MalformedTableError):
            Factor([0.1, 0.2, 0.3, 0.4, 0.5], 'A', 'B')

    def test_duplicate_variable_rejected(self):
        with pytest.raises(MalformedTableError):
            Factor([0.1, 0.2, 0.3, 0.4], 'A', 'A')

    def test_descending_variables_rejected(self):
        with pytest.raises(MalformedTableError):
            Factor([0.1, 0.2, 0.3, 0.4], 'B', 'A')

    def test_negative_value_rejected(self):
        with pytest.raises(MalformedTableError):
            Factor([0.5, -0.1], 'A')

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Factor([1.0, 2.0], 'A', 'B')

    def test_values_read_only(self, phi_b):
        with pytest.raises(ValueError):
            phi_b.values[0] = 1.0

    def test_input_not_aliased(self):
        raw = np.array([0.3, 0.7])
        factor = Factor(raw, 'A')
        raw[0] = 0.9
        assert factor.probability_of(False) == pytest.approx(0.3)

    def test_zero_variable_factor(self):
        scalar = Factor.constant(0.25)
        assert scalar.is_empty()
        assert scalar.variables == ()
        assert scalar.probability_of() == pytest.approx(0.25)


class TestLookup:
    """Test probability lookups."""

    def test_probability_of(self, phi_c):
        assert phi_c.probability_of(True, False, True) == pytest.approx(0.2)
        assert phi_c.probability_of(False, True, True) == pytest.approx(0.8)
        assert phi_c.probability_of(False, True, False) == pytest.approx(0.05)

    def test_wrong_assignment_length(self, phi_c):
        with pytest.raises(AssignmentLengthMismatchError):
            phi_c.probability_of(True, False)

    def test_evaluate_mapping(self, phi_c):
        assignment = {'B': True, 'C': False, 'I': True, 'S': False}
        assert phi_c.evaluate(assignment) == pytest.approx(0.2)

    def test_evaluate_missing_variable(self, phi_c):
        with pytest.raises(AssignmentLengthMismatchError):
            phi_c.evaluate({'B': True})

    def test_contains_and_empty(self, phi_b):
        assert phi_b.contains('B')
        assert 'M' in phi_b
        assert not phi_b.contains('S')
        assert not phi_b.is_empty()


class TestSumOut:
    """Test marginalisation."""

    def test_sum_out_known_values(self, phi_c):
        result = phi_c.sum_out('B')
        assert result.variables == ('I', 'C')
        np.testing.assert_allclose(result.values, [1.15, 0.4, 0.85, 1.6], atol=DELTA)

    def test_sum_out_halves_and_preserves_mass(self, phi_c):
        for var in phi_c.scope:
            result = phi_c.sum_out(var)
            assert len(result) == 2
            assert len(result.values) == len(phi_c.values) // 2
            assert result.total() == pytest.approx(phi_c.total())

    def test_sum_out_does_not_mutate(self, phi_c):
        before = phi_c.values.copy()
        phi_c.sum_out('C')
        np.testing.assert_array_equal(phi_c.values, before)
        assert phi_c.variables == ('I', 'C', 'B')

    def test_sum_out_absent_variable_is_noop(self, phi_b):
        assert phi_b.sum_out('S') is phi_b

    def test_sum_out_order_independent(self, phi_c):
        a = phi_c.sum_out('B', 'I')
        b = phi_c.sum_out('I', 'B')
        assert a.variables == b.variables == ('C',)
        np.testing.assert_allclose(a.values, b.values, atol=DELTA)

    def test_sum_out_everything(self, phi_c):
        result = phi_c.sum_out('B', 'C', 'I')
        assert result.is_empty()
        assert result.probability_of() == pytest.approx(phi_c.total())


class TestFixVariable:
    """Test conditioning on evidence."""

    def test_fix_known_values(self, phi_c):
        result = phi_c.fix_variable('C', False)
        assert result.variables == ('I', 'B')
        np.testing.assert_allclose(result.values, [0.95, 0.2, 0.2, 0.2], atol=DELTA)

    def test_fix_true_branch(self, phi_c):
        result = phi_c.fix_variable('C', True)
        np.testing.assert_allclose(result.values, [0.05, 0.8, 0.8, 0.8], atol=DELTA)

    def test_fix_absent_variable_is_noop(self, phi_b):
        assert phi_b.fix_variable('S', True) is phi_b

    def test_fix_both_branches_sum_to_sum_out(self, phi_c):
        for var in phi_c.scope:
            true_branch = phi_c.fix_variable(var, True)
            false_branch = phi_c.fix_variable(var, False)
            summed = phi_c.sum_out(var)
            assert true_branch.variables == summed.variables
            np.testing.assert_allclose(true_branch.values + false_branch.values,
                                       summed.values, atol=DELTA)

    def test_fix_last_variable_leaves_scalar(self, phi_m):
        result = phi_m.fix_variable('M', True)
        assert result.is_empty()
        assert result.probability_of() == pytest.approx(0.2)


class TestPointwiseProduct:
    """Test factor products."""

    def test_known_product(self, phi_s, phi_b):
        result = pointwise_product([phi_s, phi_b])
        assert result.variables == ('S', 'M', 'B')
        expected = [0.95 * 0.4, 0.95 * 0.6, 0.8 * 0.4, 0.8 * 0.6,
                    0.05 * 0.2, 0.05 * 0.8, 0.2 * 0.2, 0.2 * 0.8]
        np.testing.assert_allclose(result.values, expected, atol=DELTA)

    def test_product_matches_restricted_lookup(self, phi_c, phi_i):
        result = phi_c * phi_i
        assert result.scope == ('B', 'C', 'I', 'M')
        for b, c, i, m in itertools.product((False, True), repeat=4):
            expected = phi_c.probability_of(b, c, i) * phi_i.probability_of(i, m)
            assert result.probability_of(b, c, i, m) == pytest.approx(expected)

    def test_product_order_independent(self, phi_b, phi_c, phi_i, phi_m, phi_s):
        factors = [phi_b, phi_c, phi_i, phi_m, phi_s]
        reference = pointwise_product(factors)
        for perm in itertools.permutations(factors, 3):
            rest = [f for f in factors if all(f is not p for p in perm)]
            result = pointwise_product(list(perm) + rest)
            assert result.variables == reference.variables
            np.testing.assert_allclose(result.values, reference.values, atol=DELTA)

    def test_product_is_new_object(self, phi_m):
        result = pointwise_product([phi_m])
        assert result is phi_m
        other = phi_m * Factor.constant(1.0)
        assert other is not phi_m
        np.testing.assert_allclose(other.values, phi_m.values)

    def test_product_with_scalar(self, phi_b):
        result = phi_b * Factor.constant(2.0)
        np.testing.assert_allclose(result.values, 2.0 * phi_b.values)

    def test_product_of_scalars(self):
        result = Factor.constant(2.0) * Factor.constant(3.0)
        assert result.is_empty()
        assert result.probability_of() == pytest.approx(6.0)

    def test_product_of_nothing(self):
        with pytest.raises(ValueError):
            pointwise_product([])

    def test_full_joint_sums_to_one(self, phi_b, phi_c, phi_i, phi_m, phi_s):
        """The five reference CPTs form a normalised joint distribution."""
        joint = pointwise_product([phi_b, phi_c, phi_i, phi_m, phi_s])
        assert len(joint.values) == 32
        assert joint.total() == pytest.approx(1.0)


class TestIdentity:
    """Factors are compared by identity, not contents."""

    def test_equal_tables_are_distinct(self):
        a = Factor([0.5, 0.5], 'A')
        b = Factor([0.5, 0.5], 'A')
        assert a != b
        assert a in [a]
        assert b not in [a]


class TestDisplay:
    """Test tabular rendering."""

    def test_to_dataframe(self, phi_b):
        df = phi_b.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['B', 'M', 'phi']
        assert len(df) == 4
        assert bool(df.iloc[2]['B']) is True
        assert bool(df.iloc[2]['M']) is False
        assert df.iloc[2]['phi'] == pytest.approx(0.05)

    def test_str_contains_values(self, phi_m):
        text = str(phi_m)
        assert 'phi' in text
        assert '0.8000' in text

    def test_repr(self, phi_m):
        assert repr(phi_m) == "Factor(scope=['M'], values=[0.8, 0.2])"
