import math

import pytest
from scipy import special as sp

from hornacoupy.errors import InvalidParameterError
from hornacoupy.special import (
    bessel_i, bessel_j, bessel_k, bessel_y, hankel1, hankel2, spherical_bessel,
)


class TestBesselJ:
    @pytest.mark.parametrize("n", [0, 1, 2, 3])
    @pytest.mark.parametrize("x", [0.1, 1.0, 2.5, 5.0, 9.5])
    def test_series_matches_scipy(self, n, x):
        assert bessel_j(n, x) == pytest.approx(sp.jv(n, x), abs=1e-10)

    @pytest.mark.parametrize("n", [0, 1])
    @pytest.mark.parametrize("x", [10.0, 15.0, 25.0, 40.0])
    def test_asymptotic_matches_scipy(self, n, x):
        assert bessel_j(n, x) == pytest.approx(sp.jv(n, x), abs=1e-4)

    def test_half_order(self):
        # J_1/2(x) = sqrt(2/(pi x)) sin x
        assert bessel_j(0.5, 2.0) == pytest.approx(sp.jv(0.5, 2.0), rel=1e-10)

    def test_zero_argument(self):
        assert bessel_j(0, 0.0) == 1.0
        assert bessel_j(2, 0.0) == 0.0

    def test_negative_order_and_argument(self):
        assert bessel_j(-1, 2.0) == pytest.approx(-sp.jv(1, 2.0), abs=1e-12)
        assert bessel_j(1, -2.0) == pytest.approx(-sp.jv(1, 2.0), abs=1e-12)
        assert bessel_j(2, -2.0) == pytest.approx(sp.jv(2, 2.0), abs=1e-12)
        assert math.isnan(bessel_j(0.5, -1.0))


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4])
@pytest.mark.parametrize("x", [1.0, 3.0, 7.0, 12.0])
def test_spherical_bessel_matches_scipy(n, x):
    assert spherical_bessel(n, x) == pytest.approx(sp.spherical_jn(n, x), rel=1e-7, abs=1e-12)


def test_spherical_bessel_rejects_bad_order():
    with pytest.raises(InvalidParameterError):
        spherical_bessel(-1, 1.0)
    with pytest.raises(InvalidParameterError):
        spherical_bessel(1.5, 1.0)
    assert spherical_bessel(0, 0.0) == 1.0
    assert spherical_bessel(3, 0.0) == 0.0


class TestBesselY:
    @pytest.mark.parametrize("n", [0, 1, 2, 3])
    @pytest.mark.parametrize("x", [0.5, 1.0, 3.0, 6.0])
    def test_series_matches_scipy(self, n, x):
        assert bessel_y(n, x) == pytest.approx(sp.yn(n, x), rel=1e-8, abs=1e-9)

    @pytest.mark.parametrize("n", [0, 1])
    @pytest.mark.parametrize("x", [10.0, 20.0])
    def test_asymptotic_matches_scipy(self, n, x):
        assert bessel_y(n, x) == pytest.approx(sp.yn(n, x), abs=1e-4)

    def test_non_integer_order(self):
        assert bessel_y(0.5, 2.0) == pytest.approx(sp.yv(0.5, 2.0), rel=1e-9)

    def test_negative_integer_order(self):
        assert bessel_y(-1, 2.0) == pytest.approx(-sp.yn(1, 2.0), rel=1e-8)

    def test_non_positive_argument_is_minus_inf(self):
        assert bessel_y(0, 0.0) == -math.inf
        assert bessel_y(1, -1.0) == -math.inf


@pytest.mark.parametrize("n", [0, 1, 2])
@pytest.mark.parametrize("x", [0.5, 2.0, 5.0, 10.0])
def test_bessel_i_matches_scipy(n, x):
    assert bessel_i(n, x) == pytest.approx(sp.iv(n, x), rel=1e-10)


def test_bessel_i_edges():
    assert bessel_i(0, 0.0) == 1.0
    assert bessel_i(1, 0.0) == 0.0
    assert bessel_i(1, -2.0) == pytest.approx(-sp.iv(1, 2.0), rel=1e-10)


class TestBesselK:
    @pytest.mark.parametrize("n", [0, 1])
    def test_large_argument(self, n):
        assert bessel_k(n, 20.0) == pytest.approx(sp.kv(n, 20.0), rel=1e-3)

    def test_small_argument(self):
        assert bessel_k(0, 0.01) == pytest.approx(sp.kv(0, 0.01), rel=1e-3)
        assert bessel_k(1, 0.01) == pytest.approx(sp.kv(1, 0.01), rel=1e-3)

    def test_non_positive_argument_is_inf(self):
        assert bessel_k(0, 0.0) == math.inf
        assert bessel_k(1, -1.0) == math.inf


def test_hankel_functions():
    h1 = hankel1(1, 2.0)
    h2 = hankel2(1, 2.0)
    assert h1.real == bessel_j(1, 2.0)
    assert h1.imaginary == bessel_y(1, 2.0)
    assert h2.real == h1.real
    assert h2.imaginary == -h1.imaginary
    assert h1.to_complex() == pytest.approx(complex(sp.hankel1(1, 2.0)), rel=1e-8)
    assert hankel1(0, 0.0).imaginary == -math.inf
