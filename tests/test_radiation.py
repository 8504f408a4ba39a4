import math

import pytest
from scipy import special as sp

from hornacoupy.radiation import (
    DIRECTIVITY_FLOOR, approx_bessel_j1, approx_struve_h1, mouth_impedance,
    piston_directivity, radiation_impedance, rectangular_directivity, superellipse_directivity,
    throat_impedance,
)
from hornacoupy.records import ComplexNumber


@pytest.mark.parametrize("x", [0.1, 0.5, 1.0])
def test_small_argument_approximations(x):
    assert approx_bessel_j1(x) == pytest.approx(sp.j1(x), abs=1e-4)
    assert approx_struve_h1(x) == pytest.approx(sp.struve(1, x), abs=1e-4)


@pytest.mark.parametrize("x", [20.0, 30.0])
def test_large_argument_approximations(x):
    assert approx_bessel_j1(x) == pytest.approx(sp.j1(x), abs=5e-3)
    assert approx_struve_h1(x) == pytest.approx(sp.struve(1, x), abs=5e-3)


def test_radiation_impedance_limits():
    assert radiation_impedance(0.0, 1.0) == 0j
    # low ka: resistance ~ (ka)^2 / 2
    assert radiation_impedance(0.1, 1.0).real == pytest.approx(0.005, rel=1e-2)
    # high ka: resistance tends to the characteristic impedance
    assert radiation_impedance(50.0, 1.0).real == pytest.approx(1.0, abs=1e-2)


def test_throat_and_mouth_impedance():
    z = throat_impedance(0.0125)
    assert isinstance(z, ComplexNumber)
    assert z.real > 0.0 and z.imaginary > 0.0
    throat_area = math.pi * 0.0125 ** 2
    zm = mouth_impedance(0.1, throat_area, 1000.0)
    assert zm.magnitude > 0.0


def test_piston_directivity():
    assert piston_directivity(10.0, 0.0) == 1.0
    assert piston_directivity(0.0, 1.0) == 1.0
    # first zero of J1 at u = 3.8317
    theta = math.asin(3.8317059702 / 10.0)
    assert piston_directivity(10.0, theta) == pytest.approx(DIRECTIVITY_FLOOR)
    assert piston_directivity(2.0, 0.3) == piston_directivity(2.0, -0.3)


def test_rectangular_directivity():
    assert rectangular_directivity(20.0, 0.0) == 1.0
    # first null where kd sin(theta) / 2 = pi
    assert rectangular_directivity(20.0, math.asin(2.0 * math.pi / 20.0)) == pytest.approx(DIRECTIVITY_FLOOR)
    assert rectangular_directivity(20.0, 0.1) == pytest.approx(abs(math.sin(10.0 * math.sin(0.1)) / (10.0 * math.sin(0.1))))
    assert rectangular_directivity(4.0, -0.5) == rectangular_directivity(4.0, 0.5)


@pytest.mark.parametrize("theta", [0.1, 0.3, 0.6, 1.2])
def test_superellipse_limits(theta):
    # n = 2 is the ellipse, which in its own plane is the circular piston
    assert superellipse_directivity(5.0, theta, 2.0) == pytest.approx(piston_directivity(5.0, theta), abs=1e-3)
    # large n approaches the rectangle of width 2a
    assert superellipse_directivity(5.0, theta, 60.0) == pytest.approx(rectangular_directivity(10.0, theta), abs=2e-2)


def test_superellipse_on_axis():
    assert superellipse_directivity(5.0, 0.0, 4.0) == 1.0
    assert superellipse_directivity(0.0, 0.7, 4.0) == 1.0
