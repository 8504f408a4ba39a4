from __future__ import annotations
import dataclasses
import logging
import math
from typing import Sequence
import numpy as np

from .constants import RHO0, C0, REFERENCE_SPL_DB, SWEEP_FMIN, SWEEP_FMAX, SWEEP_POINTS
from .errors import InvalidParameterError
from .profiles import profile_arrays
from .radiation import mouth_impedance, throat_impedance
from .records import FrequencyPoint, FrequencyResponseData, GroupDelayPoint, ProfilePoint

logger = logging.getLogger(__name__)

# Lowest efficiency entering the SPL log (-40 dB re 100 %)
EFFICIENCY_FLOOR = 1e-4


def log_frequencies(fmin=SWEEP_FMIN, fmax=SWEEP_FMAX, n=SWEEP_POINTS):
	return np.logspace(np.log10(fmin), np.log10(fmax), int(n))


def cutoff_frequency(throat_radius_m: float) -> float:
	"""fc = c / (4 pi a), throat radius in meters."""
	if not throat_radius_m > 0:
		raise InvalidParameterError("throat_radius > 0", f"cutoff_frequency: throat radius must be > 0, got {throat_radius_m!r}.")
	return C0 / (4.0 * math.pi * throat_radius_m)


def _check_profile(profile: Sequence[ProfilePoint]) -> None:
	if len(profile) < 2:
		raise InvalidParameterError("profile has >= 2 points", "Response analysis needs a profile with at least two points.")


def horn_loading(profile: Sequence[ProfilePoint], frequency: float) -> float:
	"""Loading factor in [0, 1] of the horn at one frequency.

	Approximates the Webster equation by a cascade of short uniform ducts:
	each step contributes sqrt(1 - r^2) cos(k dx), r being the reflection
	coefficient between neighboring characteristic impedances rho c / S.
	Phase between steps is not tracked, so this is not an exact
	transmission-matrix solution.
	"""
	x_mm, r_mm = profile_arrays(profile)
	x = x_mm / 1000.0
	S = np.pi * (r_mm / 1000.0) ** 2
	Z = RHO0 * C0 / S
	k = 2.0 * np.pi * frequency / C0
	refl = (Z[1:] - Z[:-1]) / (Z[1:] + Z[:-1])
	transmission = np.sqrt(1.0 - refl * refl) * np.cos(k * np.diff(x))
	return min(1.0, abs(float(np.prod(transmission))))


def efficiency(loading: float, frequency: float, fc: float) -> float:
	"""Loading shaped by a 4th-order rolloff below cutoff and a gentle HF rolloff above."""
	if frequency < fc:
		return loading * (frequency / fc) ** 4
	return loading / (1.0 + (frequency / (10.0 * fc)) ** 2)


def phase_response(profile: Sequence[ProfilePoint], frequency: float) -> float:
	"""Horn length in wavelengths times 360, wrapped to [-180, 180) degrees."""
	length_m = profile[-1].x / 1000.0
	wavelength = C0 / frequency
	p = (length_m / wavelength) * 360.0
	return ((p + 180.0) % 360.0) - 180.0


def frequency_point(profile: Sequence[ProfilePoint], frequency: float, fc: float) -> FrequencyPoint:
	loading = horn_loading(profile, frequency)
	eff = efficiency(loading, frequency, fc)
	spl = REFERENCE_SPL_DB + 10.0 * math.log10(max(EFFICIENCY_FLOOR, eff))
	throat_area = math.pi * (profile[0].radius / 1000.0) ** 2
	Z = mouth_impedance(profile[-1].radius / 1000.0, throat_area, frequency)
	return FrequencyPoint(frequency=float(frequency), spl=spl, phase=phase_response(profile, frequency), impedance=Z)


def average_efficiency(response: Sequence[FrequencyPoint]) -> float:
	"""log10(f)-weighted mean efficiency in percent, recovered from the SPL.

	The lowest sweep point is left out of the mean.
	"""
	if len(response) < 2:
		return 0.0
	f = np.array([p.frequency for p in response[1:]], dtype=float)
	spl = np.array([p.spl for p in response[1:]], dtype=float)
	w = np.log10(f)
	if w.sum() <= 0:
		return 0.0
	eff = 10.0 ** ((spl - REFERENCE_SPL_DB) / 10.0)
	return float(np.sum(eff * w) / np.sum(w) * 100.0)


def calculate_response(profile: Sequence[ProfilePoint], throat_radius: float | None = None) -> FrequencyResponseData:
	"""Frequency response over 20 Hz .. 20 kHz (100 log-spaced points).

	throat_radius is in mm and sets the cutoff; it defaults to the first
	profile radius.
	"""
	_check_profile(profile)
	a = (profile[0].radius if throat_radius is None else throat_radius) / 1000.0
	fc = cutoff_frequency(a)
	freqs = log_frequencies()
	logger.debug("Response sweep: %d points, fc = %.1f Hz, %d profile points", freqs.size, fc, len(profile))
	response = tuple(frequency_point(profile, f, fc) for f in freqs)
	return FrequencyResponseData(
		cutoff_frequency=fc,
		response=response,
		impedance_at_throat=throat_impedance(a, fc),
		efficiency=average_efficiency(response),
	)


def group_delay(response: Sequence[FrequencyPoint]) -> tuple[GroupDelayPoint, ...]:
	"""Central-difference group delay -dphi/domega of the unwrapped phase, ms.

	The phase grows with frequency, so the propagation delay shows up negative.

	Valid only where the phase advances by less than 180 deg between
	neighboring sweep points; above that the unwrap picks the wrong branch.
	"""
	if len(response) < 3:
		return ()
	f = np.array([p.frequency for p in response], dtype=float)
	phi = np.unwrap(np.deg2rad([p.phase for p in response]))
	delay = -(phi[2:] - phi[:-2]) / (2.0 * np.pi * (f[2:] - f[:-2])) * 1000.0
	return tuple(GroupDelayPoint(frequency=float(fi), delay=float(d)) for fi, d in zip(f[1:-1], delay))


def power_response(response: Sequence[FrequencyPoint], directivity_index: float) -> tuple[FrequencyPoint, ...]:
	"""SPL shifted by a constant directivity index (dB)."""
	return tuple(dataclasses.replace(p, spl=p.spl + directivity_index) for p in response)


def impedance_array(response: Sequence[FrequencyPoint]) -> np.ndarray:
	"""Complex impedances of a response as an ndarray, for plotting/export."""
	return np.array([p.impedance.to_complex() for p in response], dtype=complex)
