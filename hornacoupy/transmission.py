"""Transmission-matrix (ABCD) solution of the horn.

The profile is cut into short uniform duct segments of mean area
(S1 + S2) / 2. Each segment is the lossless duct matrix

	[ cos(k dz)         j Z0 sin(k dz) ]
	[ j sin(k dz) / Z0  cos(k dz)      ]

with Z0 = rho c / S. Pressure and volume velocity are continuous across
the area steps between segments. The chain product maps mouth pressure
and volume velocity to the throat.
"""
from __future__ import annotations
import logging
import math
from typing import Optional, Sequence
import numpy as np

from .constants import RHO0, C0
from .errors import InvalidParameterError
from .profiles import profile_arrays
from .radiation import radiation_impedance
from .records import ComplexNumber, ProfilePoint, TransmissionLinePoint

logger = logging.getLogger(__name__)

# Floor of |transfer| entering the dB level (-200 dB)
TRANSFER_FLOOR = 1e-10
# Speed of sound at 0 degC and the temperature offset of the Kelvin scale
C_AT_ZERO_CELSIUS = 331.3
KELVIN_OFFSET = 273.15


def speed_of_sound(temperature: float) -> float:
	"""c = 331.3 sqrt(1 + T / 273.15) m/s, T in degC."""
	if not (math.isfinite(temperature) and temperature > -KELVIN_OFFSET):
		raise InvalidParameterError("temperature > -273.15", f"speed_of_sound: temperature {temperature!r} is below absolute zero.")
	return C_AT_ZERO_CELSIUS * math.sqrt(1.0 + temperature / KELVIN_OFFSET)


def _areas(profile: Sequence[ProfilePoint]) -> tuple[np.ndarray, np.ndarray]:
	if len(profile) < 2:
		raise InvalidParameterError("profile has >= 2 points", "Transmission-line solution needs a profile with at least two points.")
	x_mm, r_mm = profile_arrays(profile)
	if not (np.all(np.isfinite(x_mm)) and np.all(np.isfinite(r_mm)) and np.all(r_mm > 0)):
		raise InvalidParameterError("finite profile with radius > 0", "Transmission-line solution needs finite points with positive radii.")
	if np.any(np.diff(x_mm) <= 0):
		raise InvalidParameterError("x strictly increasing", "Transmission-line solution needs strictly increasing x.")
	return x_mm / 1000.0, np.pi * (r_mm / 1000.0) ** 2


def _frequencies(frequencies) -> np.ndarray:
	f = np.atleast_1d(np.asarray(frequencies, dtype=float))
	if f.size == 0 or not np.all(np.isfinite(f)) or np.any(f <= 0):
		raise InvalidParameterError("frequencies > 0", "Transmission-line solution needs positive, finite frequencies.")
	return f


def chain_matrix(profile: Sequence[ProfilePoint], frequencies, rho: float = RHO0, c: float = C0) -> np.ndarray:
	"""Throat-to-mouth ABCD matrices, shape (len(frequencies), 2, 2)."""
	x, S = _areas(profile)
	f = _frequencies(frequencies)
	k = 2.0 * np.pi * f / c
	A = np.ones_like(k, dtype=complex)
	B = np.zeros_like(k, dtype=complex)
	C = np.zeros_like(k, dtype=complex)
	D = np.ones_like(k, dtype=complex)
	for S1, S2, dz in zip(S[:-1], S[1:], np.diff(x)):
		Z0 = rho * c / (0.5 * (S1 + S2))
		cs = np.cos(k * dz)
		sn = 1j * np.sin(k * dz)
		t11, t12, t21, t22 = cs, sn * Z0, sn / Z0, cs
		A, B = A * t11 + B * t21, A * t12 + B * t22
		C, D = C * t11 + D * t21, C * t12 + D * t22
	return np.stack([np.stack([A, B], axis=-1), np.stack([C, D], axis=-1)], axis=-2)


def piston_termination(mouth_radius_m: float, frequencies, rho: float = RHO0, c: float = C0) -> np.ndarray:
	"""Baffled-piston radiation load of the mouth, acoustic ohms."""
	f = _frequencies(frequencies)
	z0 = rho * c / (math.pi * mouth_radius_m * mouth_radius_m)
	return np.array([radiation_impedance(2.0 * math.pi * fi / c * mouth_radius_m, z0) for fi in f], dtype=complex)


def solve_transmission_line(profile: Sequence[ProfilePoint], frequencies,
		termination: Optional[complex] = None, temperature: Optional[float] = None) -> tuple[TransmissionLinePoint, ...]:
	"""Throat impedance and mouth/throat pressure transfer per frequency.

	termination is a constant load at the mouth (acoustic ohms); without
	it the mouth radiates as a baffled piston. A temperature in degC
	replaces the default speed of sound.
	"""
	f = _frequencies(frequencies)
	if np.any(np.diff(f) <= 0):
		raise InvalidParameterError("frequencies increasing", "Transmission-line solution needs strictly increasing frequencies.")
	c = C0 if temperature is None else speed_of_sound(temperature)
	T = chain_matrix(profile, f, RHO0, c)
	A, B, C, D = T[:, 0, 0], T[:, 0, 1], T[:, 1, 0], T[:, 1, 1]
	if termination is None:
		Zt = piston_termination(profile[-1].radius / 1000.0, f, RHO0, c)
	else:
		Zt = np.full(f.shape, complex(termination))
	logger.debug("Transmission line: %d segments, %d frequencies, c = %.1f m/s", len(profile) - 1, f.size, c)

	num = A * Zt + B
	den = C * Zt + D
	eps = 1e-12 + 1e-9 * np.max(np.abs(den))
	den = np.where(np.abs(den) < eps, den + 1j * eps, den)
	Z_throat = num / den
	eps = 1e-12 + 1e-9 * np.max(np.abs(num))
	H = Zt / np.where(np.abs(num) < eps, num + 1j * eps, num)

	level = 20.0 * np.log10(np.maximum(TRANSFER_FLOOR, np.abs(H)))
	phi = np.unwrap(np.angle(H))
	phase = ((np.rad2deg(phi) + 180.0) % 360.0) - 180.0
	delay = np.full(f.shape, np.nan)
	delay[1:] = -np.diff(phi) / (2.0 * np.pi * np.diff(f)) * 1000.0
	return tuple(
		TransmissionLinePoint(
			frequency=float(f[i]),
			transfer=ComplexNumber.from_complex(H[i]),
			throat_impedance=ComplexNumber.from_complex(Z_throat[i]),
			level=float(level[i]),
			phase=float(phase[i]),
			group_delay=None if i == 0 else float(delay[i]),
		)
		for i in range(f.size)
	)
