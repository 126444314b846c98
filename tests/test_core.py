"""
Unit tests for the core building blocks.

Covers polynomial evaluation, ambient convergence, the timed random
sampler and the tick context.
"""

import math

import numpy as np
import pytest

from apu_sim.core.context import UpdateContext
from apu_sim.core.polynomial import evaluate_polynomial, integer_power
from apu_sim.core.randomness import TimedRandom, create_rng
from apu_sim.core.thermal import (
    calculate_towards_ambient_egt,
    calculate_towards_target_temperature,
)


class SequenceRng:
    """Stand-in generator returning successive indices and counting draws."""
    
    def __init__(self):
        self.draws = 0
    
    def integers(self, low, high):
        self.draws += 1
        return self.draws % high


class TestEvaluatePolynomial:
    
    def test_ascending_coefficients(self):
        assert evaluate_polynomial([1.0, 2.0, 3.0], 2.0) == 17.0
    
    def test_constant(self):
        assert evaluate_polynomial([4.5], 123.0) == 4.5
    
    def test_matches_numpy_within_rounding(self):
        coefficients = [0.5, -1.25, 0.125, 0.0625]
        expected = np.polynomial.polynomial.polyval(3.3, coefficients)
        assert evaluate_polynomial(coefficients, 3.3) == pytest.approx(expected)

    def test_powers_built_by_square_and_multiply(self):
        x = 91.37
        x2 = x * x
        x4 = x2 * x2
        x8 = x4 * x4

        assert integer_power(x, 0) == 1.0
        assert integer_power(x, 1) == x
        assert integer_power(x, 6) == x2 * x4
        assert integer_power(x, 13) == x * x4 * x8

    def test_terms_use_integer_powers(self):
        coefficients = [1.5e3, -2.25e1, 3.1e-1, -4.7e-4, 5.3e-9, -6.1e-13]
        x = 87.123

        expected = coefficients[0]
        for power in range(1, len(coefficients)):
            expected += coefficients[power] * integer_power(x, power)

        assert evaluate_polynomial(coefficients, x) == expected


class TestAmbientConvergence:
    
    def test_moves_fraction_of_gap(self):
        result = calculate_towards_target_temperature(100.0, 0.0, 1.0, 1.0)
        assert result == pytest.approx(100.0 * math.exp(-1.0))
    
    def test_warms_towards_higher_target(self):
        result = calculate_towards_target_temperature(0.0, 20.0, 1.0, 0.5)
        assert 0.0 < result < 20.0
    
    def test_never_overshoots(self):
        result = calculate_towards_target_temperature(500.0, 15.0, 1.0, 1000.0)
        assert result == pytest.approx(15.0)
        assert result >= 15.0
    
    def test_zero_delta_keeps_temperature(self):
        assert calculate_towards_target_temperature(42.0, 15.0, 1.0, 0.0) == 42.0
    
    def test_at_target_stays(self):
        assert calculate_towards_target_temperature(15.0, 15.0, 1.0, 3.0) == 15.0
    
    def test_ambient_egt_uses_context(self):
        context = UpdateContext(delta=0.1, ambient_temperature=25.0)
        expected = calculate_towards_target_temperature(300.0, 25.0, 1.0, 0.1)
        assert calculate_towards_ambient_egt(300.0, context) == expected


class TestTimedRandom:
    
    def test_requires_values(self, rng):
        with pytest.raises(ValueError):
            TimedRandom(1.0, [], rng)
    
    def test_initial_value_is_a_candidate(self, rng):
        sampler = TimedRandom(1.0, [114., 115.], rng)
        assert sampler.current_value() in (114., 115.)
    
    def test_resamples_only_when_interval_reached(self):
        fake = SequenceRng()
        sampler = TimedRandom(1.0, ['a', 'b', 'c'], fake)
        assert fake.draws == 1
        
        sampler.update(0.5)
        assert fake.draws == 1
        
        sampler.update(0.5)
        assert fake.draws == 2
    
    def test_overshoot_resamples_once_and_resets(self):
        fake = SequenceRng()
        sampler = TimedRandom(1.0, ['a', 'b', 'c'], fake)
        
        sampler.update(5.0)
        assert fake.draws == 2
        
        sampler.update(0.5)
        assert fake.draws == 2
    
    def test_value_stable_between_resamples(self, rng):
        sampler = TimedRandom(1.0, list(range(100)), rng)
        value = sampler.current_value()
        
        for _ in range(19):
            sampler.update(0.05)
            assert sampler.current_value() == value
    
    def test_current_value_has_no_side_effects(self):
        fake = SequenceRng()
        sampler = TimedRandom(1.0, ['a', 'b', 'c'], fake)
        
        for _ in range(10):
            sampler.current_value()
        
        assert fake.draws == 1
    
    def test_seeded_sequences_reproducible(self):
        first = TimedRandom(1.0, [114., 115., 115., 115., 115.], create_rng(7))
        second = TimedRandom(1.0, [114., 115., 115., 115., 115.], create_rng(7))
        
        for _ in range(50):
            first.update(1.0)
            second.update(1.0)
            assert first.current_value() == second.current_value()


class TestUpdateContext:
    
    def test_negative_delta_rejected(self):
        with pytest.raises(ValueError):
            UpdateContext(delta=-0.1, ambient_temperature=15.0)
    
    def test_is_read_only(self):
        context = UpdateContext(delta=0.1, ambient_temperature=15.0)
        with pytest.raises(AttributeError):
            context.delta = 0.2
