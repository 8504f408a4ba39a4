from __future__ import annotations
import math
import numpy as np

from .constants import RHO0, C0
from .records import ComplexNumber
from .special import bessel_j

# Floor of the diffraction pattern (-80 dB)
DIRECTIVITY_FLOOR = 1e-4
# Midpoint-rule samples across a superellipse aperture
SUPERELLIPSE_SAMPLES = 2000


def approx_bessel_j1(x: float) -> float:
	"""J1 for the radiation impedance: Taylor series below 3, large-x form above."""
	if x < 3.0:
		x2 = x * x
		return x * (0.5 - x2 / 16.0 + x2 * x2 / 384.0)
	return math.sqrt(2.0 / (math.pi * x)) * math.cos(x - 0.75 * math.pi)


def approx_struve_h1(x: float) -> float:
	"""Struve H1: Taylor series (2/pi)(x^2/3 - x^4/45 + x^6/1575) below 3,
	2/pi + Y1(x) with Y1 in its large-x form above.
	"""
	if x < 3.0:
		x2 = x * x
		return (2.0 / math.pi) * (x2 / 3.0 - x2 * x2 / 45.0 + x2 * x2 * x2 / 1575.0)
	return 2.0 / math.pi + math.sqrt(2.0 / (math.pi * x)) * math.sin(x - 0.75 * math.pi)


def radiation_impedance(ka: float, z0: float) -> complex:
	"""Baffled circular piston, Z = Z0 [1 - J1(2ka)/ka + j H1(2ka)/ka].
	Z0 = rho c / S is the characteristic impedance of the radiating area.
	"""
	if ka <= 0:
		return 0j
	x = 2.0 * ka
	R = 1.0 - approx_bessel_j1(x) / ka
	X = approx_struve_h1(x) / ka
	return z0 * complex(R, X)


def throat_impedance(throat_radius_m: float, frequency: float | None = None) -> ComplexNumber:
	"""Radiation impedance seen at the throat (acoustic ohms, Pa·s/m^3).

	Evaluated at the throat cutoff ka = 1/2 unless a frequency is given.
	"""
	S = math.pi * throat_radius_m * throat_radius_m
	z0 = RHO0 * C0 / S
	if frequency is None:
		ka = 0.5
	else:
		ka = 2.0 * math.pi * frequency / C0 * throat_radius_m
	return ComplexNumber.from_complex(radiation_impedance(ka, z0))


def mouth_impedance(mouth_radius_m: float, throat_area: float, frequency: float) -> ComplexNumber:
	"""Mouth radiation load referred to the throat characteristic impedance."""
	z0 = RHO0 * C0 / throat_area
	ka = 2.0 * math.pi * frequency / C0 * mouth_radius_m
	return ComplexNumber.from_complex(radiation_impedance(ka, z0))


def piston_directivity(ka: float, theta_rad: float) -> float:
	"""Circular-aperture diffraction pattern |2 J1(u)/u|, u = ka sin(theta),
	normalized to 1 on axis and floored at DIRECTIVITY_FLOOR.
	"""
	if ka == 0:
		return 1.0
	u = ka * math.sin(abs(theta_rad))
	if u == 0:
		return 1.0
	D = abs(2.0 * bessel_j(1, u) / u)
	return min(1.0, max(DIRECTIVITY_FLOOR, D))


def rectangular_directivity(kd: float, theta_rad: float) -> float:
	"""Uniform slit of width d in the scan plane: |sinc(kd sin(theta) / 2)|."""
	u = 0.5 * kd * math.sin(abs(theta_rad))
	if u == 0:
		return 1.0
	D = abs(math.sin(u) / u)
	return min(1.0, max(DIRECTIVITY_FLOOR, D))


def superellipse_directivity(ka: float, theta_rad: float, exponent: float, samples: int = SUPERELLIPSE_SAMPLES) -> float:
	"""Aperture |x/a|^n + |y/b|^n <= 1 seen in the plane of semi-axis a.

	Only the chord length 2 b (1 - |u|^n)^(1/n) across the scan direction
	matters, so the far field is a 1-D midpoint-rule integral over
	u = x / a. n = 2 gives the ellipse, large n approaches the rectangle.
	"""
	v = ka * math.sin(abs(theta_rad))
	if v == 0:
		return 1.0
	u = (np.arange(samples) + 0.5) / samples * 2.0 - 1.0
	chord = (1.0 - np.abs(u) ** exponent) ** (1.0 / exponent)
	D = abs(float(np.sum(chord * np.cos(v * u)) / np.sum(chord)))
	return min(1.0, max(DIRECTIVITY_FLOOR, D))
