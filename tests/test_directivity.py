import math

import numpy as np
import pytest

from hornacoupy.directivity import (
    array_directivity, calculate_from_coverage, calculate_from_polar_pattern, critical_distance,
    distance_factor, find_coverage_angle, frequency_dependent_di, interpolate_pattern,
    room_gain, spl_at_distance,
)
from hornacoupy.errors import InvalidParameterError
from hornacoupy.records import Axis, PolarData


def make_pattern(degrees, magnitudes, axis=Axis.HORIZONTAL):
    return PolarData(
        angles=tuple(math.radians(d) for d in degrees),
        magnitudes=tuple(float(m) for m in magnitudes),
        frequency=1000.0,
        axis=axis,
    )


def test_from_coverage():
    res = calculate_from_coverage(90.0, 40.0)
    assert 0.0 < res.directivity_index < 20.0
    assert res.directivity_factor == pytest.approx(10.0 ** (res.directivity_index / 10.0))
    assert res.coverage.horizontal == 90.0 and res.coverage.vertical == 40.0
    with pytest.raises(InvalidParameterError):
        calculate_from_coverage(0.0, 40.0)


def test_from_coverage_60_by_40():
    res = calculate_from_coverage(60.0, 40.0)
    assert 0.0 < res.directivity_index < 20.0
    assert res.directivity_index == pytest.approx(19.98, abs=0.01)


def test_omnidirectional_pattern_has_unity_q():
    degrees = np.arange(0, 361, 10)
    omni = make_pattern(degrees, np.ones(degrees.size))
    res = calculate_from_polar_pattern(omni, make_pattern(degrees, np.ones(degrees.size), Axis.VERTICAL))
    assert res.directivity_factor == pytest.approx(1.0, rel=1e-2)
    assert res.directivity_index == pytest.approx(0.0, abs=0.05)
    assert res.coverage.horizontal == 180.0


def test_find_coverage_angle():
    degrees = np.arange(-90, 91, 10)
    pattern = make_pattern(degrees, np.cos(np.radians(degrees)))
    # cos(60 deg) = 0.5 is just below -6 dB
    assert find_coverage_angle(pattern, -6.0) == pytest.approx(120.0)
    assert find_coverage_angle(make_pattern([], []), -6.0) == 180.0


def test_interpolate_pattern():
    pattern = PolarData(angles=(2.0, 0.0, 1.0), magnitudes=(0.0, 1.0, 0.5), frequency=1000.0, axis=Axis.HORIZONTAL)
    assert interpolate_pattern(pattern, 0.5) == pytest.approx(0.75)
    assert interpolate_pattern(pattern, 5.0) == pytest.approx(0.0)
    assert interpolate_pattern(pattern, -1.0) == pytest.approx(1.0)


def test_interpolate_pattern_rejects_degenerate_patterns():
    with pytest.raises(InvalidParameterError) as excinfo:
        interpolate_pattern(make_pattern([], []), 0.5)
    assert excinfo.value.constraint == "pattern not empty"
    lopsided = PolarData(angles=(0.0, 1.0), magnitudes=(1.0,), frequency=1000.0, axis=Axis.HORIZONTAL)
    with pytest.raises(InvalidParameterError):
        interpolate_pattern(lopsided, 0.5)
    with pytest.raises(InvalidParameterError):
        calculate_from_polar_pattern(make_pattern([], []), make_pattern([0, 90], [1, 1], Axis.VERTICAL))


def test_frequency_dependent_di_increases():
    sweep = frequency_dependent_di(200.0, 200.0, [100.0, 1000.0, 10000.0])
    di = [p.directivity_index for p in sweep]
    assert di[0] < di[1] < di[2]
    assert [p.frequency for p in sweep] == [100.0, 1000.0, 10000.0]


def test_distance_and_level():
    assert distance_factor(1.0) == 0.0
    assert distance_factor(2.0) == pytest.approx(-6.0206, abs=1e-4)
    assert spl_at_distance(1.0, 1.0, 0.0) == pytest.approx(100.0)
    assert spl_at_distance(10.0, 2.0, 3.0) == pytest.approx(100.0 + 10.0 - 6.0206 + 3.0, abs=1e-4)
    with pytest.raises(InvalidParameterError):
        distance_factor(0.0)


def test_room_helpers():
    dc = critical_distance(10.0, 200.0, 1.0)
    assert dc == pytest.approx(0.141 * math.sqrt(10.0 * 0.161 * 200.0))
    assert room_gain(0.5, 1.0) == 0.0
    assert room_gain(2.0, 1.0) == pytest.approx(10.0 * math.log10(1.25))


class TestArrayDirectivity:
    def test_single_horn_unchanged(self):
        assert array_directivity(1, 0.5, 1000.0, 10.0).directivity_index == pytest.approx(10.0)

    def test_coincident_horns_add_full_gain(self):
        res = array_directivity(4, 0.0, 1000.0, 10.0)
        assert res.directivity_index == pytest.approx(10.0 + 10.0 * math.log10(4))

    @pytest.mark.parametrize("horn_count, spacing", [(0, 0.1), (2.5, 0.1), (True, 0.1), (2, -1.0)])
    def test_invalid(self, horn_count, spacing):
        with pytest.raises(InvalidParameterError):
            array_directivity(horn_count, spacing, 1000.0, 10.0)
