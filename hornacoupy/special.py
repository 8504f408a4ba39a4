"""Bessel / Hankel family special functions.

Scalar, pure-Python implementations used by the profile corrections and the
diffraction-based directivity model. References: Abramowitz & Stegun,
Handbook of Mathematical Functions, ch. 9 and 10.

Numerical domain edges return sentinels instead of raising, since these
values are intermediate terms of larger formulas:
  bessel_y(n, x<=0) -> -inf
  bessel_k(n, x<=0) -> +inf
"""
from __future__ import annotations
import math

from .errors import InvalidParameterError
from .records import ComplexNumber

EULER_GAMMA = 0.5772156649015329

# Series caps (number of terms); conventional choices for double precision
# on the ranges where each series is used.
J_SERIES_TERMS = 50
I_SERIES_TERMS = 50
Y_SERIES_TERMS = 20
SERIES_RTOL = 1e-15

# Switch-over points from power series to asymptotic forms
J_ASYMPTOTIC_X = 10.0
Y_ASYMPTOTIC_X = 8.0
K_SMALL_X = 1.0

# Lanczos approximation, g=7, n=9
_LANCZOS_G = 7
_LANCZOS_COEF = (
	0.99999999999980993,
	676.5203681218851,
	-1259.1392167224028,
	771.32342877765313,
	-176.61502916214059,
	12.507343278686905,
	-0.13857109526572012,
	9.9843695780195716e-6,
	1.5056327351493116e-7,
)


def _is_integer(n: float) -> bool:
	return float(n).is_integer()


def _factorial(n: int) -> float:
	if n < 0:
		return math.nan
	result = 1.0
	for i in range(2, int(n) + 1):
		result *= i
	return result


def _gamma(z: float) -> float:
	"""Gamma function; exact for positive integers, Lanczos otherwise.
	Poles (z = 0, -1, -2, ...) return +inf so that 1/Gamma vanishes.
	"""
	if _is_integer(z):
		if z <= 0:
			return math.inf
		return _factorial(int(z) - 1)
	if z < 0.5:
		# reflection formula
		return math.pi / (math.sin(math.pi * z) * _gamma(1.0 - z))
	z -= 1.0
	acc = _LANCZOS_COEF[0]
	for i in range(1, _LANCZOS_G + 2):
		acc += _LANCZOS_COEF[i] / (z + i)
	t = z + _LANCZOS_G + 0.5
	return math.sqrt(2.0 * math.pi) * t ** (z + 0.5) * math.exp(-t) * acc


def _harmonic(n: int) -> float:
	"""H_n = 1 + 1/2 + ... + 1/n (H_0 = 0)."""
	total = 0.0
	for i in range(1, n + 1):
		total += 1.0 / i
	return total


def _hankel_pq(mu: float, x: float) -> tuple[float, float]:
	"""Leading terms of Hankel's asymptotic P and Q, mu = 4 n^2."""
	p = 1.0 - (mu - 1.0) * (mu - 9.0) / (128.0 * x * x)
	q = (mu - 1.0) / (8.0 * x)
	return p, q


# ------------------------------ first kind ------------------------------ #
def bessel_j(n: float, x: float) -> float:
	"""Bessel function of the first kind J_n(x).

	Power series for |x| < 10, three-term Hankel asymptotic form otherwise.
	Negative x uses J_n(-x) = (-1)^n J_n(x); for non-integer n the function
	is not real there and nan is returned.
	"""
	if x == 0:
		return 1.0 if n == 0 else 0.0
	if _is_integer(n) and n < 0:
		m = -int(n)
		return (-1.0) ** m * bessel_j(m, x)
	if x < 0:
		if not _is_integer(n):
			return math.nan
		return (-1.0) ** int(n) * bessel_j(n, -x)
	if x < J_ASYMPTOTIC_X:
		return _bessel_j_series(n, x)
	return _bessel_j_asymptotic(n, x)


def _bessel_j_series(n: float, x: float) -> float:
	half = 0.5 * x
	total = 0.0
	for k in range(J_SERIES_TERMS):
		term = (-1.0) ** k * half ** (2 * k + n) / (_factorial(k) * _gamma(k + n + 1))
		total += term
		if abs(term) < SERIES_RTOL * abs(total):
			break
	return total


def _bessel_j_asymptotic(n: float, x: float) -> float:
	chi = x - 0.5 * n * math.pi - 0.25 * math.pi
	p, q = _hankel_pq(4.0 * n * n, x)
	return math.sqrt(2.0 / (math.pi * x)) * (p * math.cos(chi) - q * math.sin(chi))


def spherical_bessel(n: int, x: float) -> float:
	"""Spherical Bessel function j_n(x), closed forms for n=0,1 and upward
	recurrence j_{i+1} = (2i+1)/x j_i - j_{i-1} above.
	"""
	if n < 0 or not _is_integer(n):
		raise InvalidParameterError("n >= 0 integer", f"spherical_bessel: order must be a non-negative integer, got {n!r}.")
	n = int(n)
	if x == 0:
		return 1.0 if n == 0 else 0.0
	j0 = math.sin(x) / x
	if n == 0:
		return j0
	j1 = math.sin(x) / (x * x) - math.cos(x) / x
	for i in range(1, n):
		j0, j1 = j1, ((2 * i + 1) / x) * j1 - j0
	return j1


# ------------------------------ second kind ----------------------------- #
def bessel_y(n: float, x: float) -> float:
	"""Bessel function of the second kind (Neumann) Y_n(x).

	Integer orders: Y0/Y1 from log term plus series (x < 8) or Hankel
	asymptotics (x >= 8), higher orders by upward recurrence.
	Non-integer orders: (J_n cos(n pi) - J_-n) / sin(n pi), with orders
	within 1e-10 of an integer snapped to it.
	Returns -inf for x <= 0.
	"""
	if x <= 0:
		return -math.inf
	if _is_integer(n):
		order = int(n)
		m = abs(order)
		if m == 0:
			return _bessel_y0(x)
		y_prev, y = _bessel_y0(x), _bessel_y1(x)
		for i in range(1, m):
			y_prev, y = y, (2.0 * i / x) * y - y_prev
		if order < 0 and m % 2:
			return -y
		return y

	sin_pn = math.sin(math.pi * n)
	if abs(sin_pn) < 1e-10:
		return bessel_y(round(n), x)
	return (bessel_j(n, x) * math.cos(math.pi * n) - bessel_j(-n, x)) / sin_pn


def _bessel_y0(x: float) -> float:
	if x < Y_ASYMPTOTIC_X:
		return (2.0 / math.pi) * ((math.log(0.5 * x) + EULER_GAMMA) * bessel_j(0, x) - _y0_series(x))
	chi = x - 0.25 * math.pi
	p, q = _hankel_pq(0.0, x)
	return math.sqrt(2.0 / (math.pi * x)) * (p * math.sin(chi) + q * math.cos(chi))


def _bessel_y1(x: float) -> float:
	if x < Y_ASYMPTOTIC_X:
		return ((2.0 / math.pi) * (math.log(0.5 * x) + EULER_GAMMA) * bessel_j(1, x)
				- 2.0 / (math.pi * x)
				- _y1_series(x) / math.pi)
	chi = x - 0.75 * math.pi
	p, q = _hankel_pq(4.0, x)
	return math.sqrt(2.0 / (math.pi * x)) * (p * math.sin(chi) + q * math.cos(chi))


def _y0_series(x: float) -> float:
	# sum_{k>=1} (-1)^k H_k (x/2)^{2k} / (k!)^2
	half = 0.5 * x
	total = 0.0
	for k in range(1, Y_SERIES_TERMS):
		term = (-1.0) ** k * half ** (2 * k) / _factorial(k) ** 2 * _harmonic(k)
		total += term
		if abs(term) < SERIES_RTOL:
			break
	return total


def _y1_series(x: float) -> float:
	# sum_{k>=0} (-1)^k (H_k + H_{k+1}) (x/2)^{2k+1} / (k! (k+1)!)
	half = 0.5 * x
	total = 0.0
	for k in range(Y_SERIES_TERMS):
		term = ((-1.0) ** k * half ** (2 * k + 1) / (_factorial(k) * _factorial(k + 1))
				* (_harmonic(k) + _harmonic(k + 1)))
		total += term
		if abs(term) < SERIES_RTOL:
			break
	return total


# -------------------------------- modified ------------------------------ #
def bessel_i(n: float, x: float) -> float:
	"""Modified Bessel function of the first kind I_n(x), power series."""
	if x == 0:
		return 1.0 if n == 0 else 0.0
	if _is_integer(n):
		n = abs(int(n))  # I_-n = I_n
	elif x < 0:
		return math.nan
	half = 0.5 * x
	total = 0.0
	for k in range(I_SERIES_TERMS):
		term = half ** (2 * k + n) / (_factorial(k) * _gamma(k + n + 1))
		total += term
		if abs(term) < SERIES_RTOL * abs(total):
			break
	return total


def bessel_k(n: float, x: float) -> float:
	"""Modified Bessel function of the second kind K_n(x).

	Leading-order small-x forms for x < 1 and a two-term large-x expansion
	otherwise; adequate for impedance estimates, not for reference values.
	Returns +inf for x <= 0.
	"""
	if x <= 0:
		return math.inf
	order = abs(n)  # K_-n = K_n
	if x < K_SMALL_X:
		if order == 0:
			return -math.log(0.5 * x) - EULER_GAMMA
		return 0.5 * _gamma(order) * (2.0 / x) ** order
	mu = 4.0 * order * order
	return math.sqrt(math.pi / (2.0 * x)) * math.exp(-x) * (1.0 + (mu - 1.0) / (8.0 * x))


# -------------------------------- Hankel -------------------------------- #
def hankel1(n: float, x: float) -> ComplexNumber:
	"""H1_n(x) = J_n(x) + i Y_n(x). The imaginary part carries the Y sentinel for x <= 0."""
	return ComplexNumber(real=bessel_j(n, x), imaginary=bessel_y(n, x))


def hankel2(n: float, x: float) -> ComplexNumber:
	"""H2_n(x) = J_n(x) - i Y_n(x)."""
	return ComplexNumber(real=bessel_j(n, x), imaginary=-bessel_y(n, x))
