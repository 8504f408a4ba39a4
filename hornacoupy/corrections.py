"""Physically corrected profile variants.

Same contract as the generators in hornacoupy.profiles; selected through
get_profile(..., corrected=True).
"""
from __future__ import annotations
import logging
import math
import numpy as np

from .constants import C0, TWOPI
from .profiles import (
	DEFAULT_CUTOFF_HZ,
	ProfileFunction,
	_extra,
	_finalize,
	_sample,
	_smoothstep,
	validate_profile_parameters,
)
from .records import ProfileParameters, ProfilePoint, ProfileType
from .special import spherical_bessel

logger = logging.getLogger(__name__)

# Waslo's optimization factor and phase linearization for the JMLC law
WASLO_T_FACTOR = 0.996
PHASE_CORRECTION = 0.82
# Cutoffs above this get a small high-frequency ripple correction
JMLC_HF_THRESHOLD_HZ = 800.0
# Fraction of the horn at each end eased in/out by manufacturing constraints
EDGE_FRACTION = 0.1
# Number of points after the throat blended in by the tractrix variant
TRACTRIX_THROAT_BLEND_POINTS = 4


def _clamped_smoothstep(t):
	return _smoothstep(np.clip(t, 0.0, 1.0))


def corrected_le_cleach(params: ProfileParameters) -> list[ProfilePoint]:
	"""Exponential law with a spherical-wave correction j1(kx)/j0(kx), decaying along x."""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	fc = _extra(params.cutoff_frequency, DEFAULT_CUTOFF_HZ)
	t, x = _sample(params)
	k = TWOPI * fc / (C0 * 1000.0)     # 1/mm
	wavelength = C0 * 1000.0 / fc       # mm
	amplitude = wavelength / (4.0 * math.pi * T)

	correction = np.ones_like(x)
	for i, kr in enumerate(k * x):
		if kr <= 0:
			continue
		j0 = spherical_bessel(0, kr)
		if abs(j0) < 1e-12:
			logger.debug("j0 zero at x = %.3f mm, correction skipped", x[i])
			continue
		correction[i] = 1.0 + amplitude * (spherical_bessel(1, kr) / j0) * math.exp(-kr / 10.0)

	m = math.log(M / T) / L
	r = np.clip(T * np.exp(m * x) * correction, T, M)
	r = T + (r - T) * _smoothstep(t)
	return _finalize(x, r, params)


def _manufacturing_constraints(r: np.ndarray, T: float, M: float, t: np.ndarray) -> np.ndarray:
	# ease into the throat and out to the mouth over the first/last tenth
	r = np.clip(r, T, M)
	head = T + (r - T) * _clamped_smoothstep(t / EDGE_FRACTION)
	tail = M - (M - r) * _clamped_smoothstep((1.0 - t) / EDGE_FRACTION)
	return np.where(t < EDGE_FRACTION, head, np.where(t > 1.0 - EDGE_FRACTION, tail, r))


def corrected_jmlc(params: ProfileParameters) -> list[ProfilePoint]:
	validate_profile_parameters(params)
	T, M = params.throat_radius, params.mouth_radius
	fc = _extra(params.cutoff_frequency, DEFAULT_CUTOFF_HZ)
	t, x = _sample(params)

	waslo = WASLO_T_FACTOR - 0.004 * math.log(1.0 + fc / 1000.0)
	phase = 1.0 + PHASE_CORRECTION * (1.0 - np.cos(math.pi * t)) / 2.0
	r = T * (M / T) ** (t * waslo) * phase
	if fc > JMLC_HF_THRESHOLD_HZ:
		r = r * (1.0 + 0.05 * (fc / 1000.0 - 0.8) * np.sin(TWOPI * t))
	return _finalize(x, _manufacturing_constraints(r, T, M, t), params)


def corrected_tractrix(params: ProfileParameters) -> list[ProfilePoint]:
	"""True tractrix with the mouth radius as asymptote a.

	Distance from the mouth for a radius r is
	a ln((a + sqrt(a^2-r^2)) / r) - sqrt(a^2-r^2); the radius is swept
	uniformly from throat to mouth and the axial positions are scaled to
	the requested length.
	"""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	t, _ = _sample(params)
	a = M
	r = T + (M - T) * t
	s = np.sqrt(np.maximum(0.0, a * a - r * r))
	from_mouth = a * np.log((a + s) / r) - s
	axial = from_mouth[0] - from_mouth
	x = axial * (L / axial[-1])

	n_blend = min(TRACTRIX_THROAT_BLEND_POINTS, r.size - 2)
	if n_blend > 0:
		blend = _clamped_smoothstep(t[1:n_blend + 1] * 10.0)
		r[1:n_blend + 1] = T + (r[1:n_blend + 1] - T) * blend
	return _finalize(x, r, params)


def corrected_parabolic(params: ProfileParameters) -> list[ProfilePoint]:
	"""r0 sqrt(1 + (x/x0)^2) with x0 chosen so that r(L) is the mouth radius."""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	t, x = _sample(params)
	x0 = L / math.sqrt((M / T) ** 2 - 1.0)
	return _finalize(x, T * np.sqrt(1.0 + (x / x0) ** 2), params)


def hyperbolic_profile(params: ProfileParameters) -> list[ProfilePoint]:
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	t, x = _sample(params)
	m = math.acosh(M / T) / L
	return _finalize(x, T * np.cosh(m * x), params)


CORRECTED_GENERATORS: dict[ProfileType, ProfileFunction] = {
	ProfileType.LE_CLEACH: corrected_le_cleach,
	ProfileType.JMLC: corrected_jmlc,
	ProfileType.TRACTRIX: corrected_tractrix,
	ProfileType.PARABOLIC: corrected_parabolic,
	ProfileType.HYPERBOLIC_EXPONENTIAL: hyperbolic_profile,
}
