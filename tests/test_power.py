import math

import pytest

from ltetrack.power import SubframePower, compute_rb_power


def _grid(nof_prb, amplitudes):
    """Build a grid where PRB i carries amplitude amplitudes[i] in every symbol."""
    row = [complex(a, 0) for a in amplitudes for _ in range(12)]
    assert len(row) == 12 * nof_prb
    return row * 14


def test_unit_amplitude_gives_zero_db():
    result = compute_rb_power(_grid(3, [1, 1, 1]), 3)
    assert len(result) == 3
    for value in result:
        assert value == pytest.approx(0.0, abs=1e-9)


def test_phase_does_not_matter():
    grid = [1j] * (12 * 2 * 14)
    result = compute_rb_power(grid, 2)
    assert result == pytest.approx([0.0, 0.0], abs=1e-9)


def test_tenfold_amplitude_is_twenty_db_higher():
    result = compute_rb_power(_grid(2, [1, 10]), 2)
    assert result[1] - result[0] == pytest.approx(20.0)


def test_silent_prb_is_minus_infinity():
    result = compute_rb_power(_grid(2, [0, 1]), 2)
    assert result[0] == -math.inf
    assert math.isfinite(result[1])


def test_too_few_symbols_raises():
    with pytest.raises(ValueError):
        compute_rb_power([1 + 0j] * 10, 1)


def test_no_prbs():
    assert compute_rb_power([], 0) == []


def test_subframe_power_tracks_extremes():
    power = SubframePower(3)
    assert power.rb_power_dl == [0.0, 0.0, 0.0]
    result = power.compute(_grid(3, [2, 1, 3]))
    assert power.rb_power_dl == result
    assert power.max == result[2]
    assert power.min == result[1]
    assert power.min <= result[0] <= power.max


def test_subframe_power_recompute_replaces_values():
    power = SubframePower(1)
    first = power.compute(_grid(1, [1]))
    second = power.compute(_grid(1, [10]))
    assert second[0] > first[0]
    assert power.max == power.min == second[0]