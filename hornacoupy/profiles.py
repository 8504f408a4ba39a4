"""Horn flare-curve generators.

Every generator takes validated ProfileParameters (mm) and returns
segments+1 ProfilePoint from the throat (x=0) to the mouth (x=length).
First and last radius are pinned to the requested throat and mouth radius,
the radius never decreases, and non-finite points are dropped.
"""
from __future__ import annotations
import logging
import math
import numbers
import warnings
from typing import Callable, Iterable, Sequence
import numpy as np

from .constants import C0, TWOPI
from .errors import InvalidParameterError, UnknownProfileWarning
from .records import ProfileParameters, ProfilePoint, ProfileType

logger = logging.getLogger(__name__)

ProfileFunction = Callable[[ProfileParameters], list[ProfilePoint]]

# Defaults for the profile-specific extras
DEFAULT_CUTOFF_HZ = 500.0
DEFAULT_T_FACTOR = 0.7
DEFAULT_BLEND_FACTOR = 0.5
DEFAULT_ECCENTRICITY = 0.5
DEFAULT_WAVE_PARAMETER = 1.0

# Le Cleac'h moving-average half width (samples on either side)
SMOOTHING_WINDOW = 3

# Tractrix sweep, kept clear of the singular ends of (0, pi/2)
TRACTRIX_THETA_MIN = 0.1
TRACTRIX_THETA_MAX = 0.5 * math.pi - 0.01

# Empirical blend ratios of the semi-empirical laws (not physically derived)
OBLATE_SPHEROID_BLEND = 0.7     # spheroid share, rest is linear
SPHERICAL_WAVE_BLEND = 0.8      # computed curve share, rest is smoothstep target
JMLC_THROAT_RAMP = 5.0
SPHERICAL_WAVE_RAMP = 3.0

PROFILE_DISPLAY_NAMES = {
	ProfileType.CONICAL: "Conical (Linear)",
	ProfileType.EXPONENTIAL: "Exponential",
	ProfileType.MODIFIED_EXPONENTIAL: "Modified Exponential",
	ProfileType.PARABOLIC: "Parabolic",
	ProfileType.TRACTRIX: "Tractrix (Constant Directivity)",
	ProfileType.HYPERBOLIC_EXPONENTIAL: "Hyperbolic-Exponential",
	ProfileType.LE_CLEACH: "Le Cléac'h (Spherical Wave)",
	ProfileType.JMLC: "JMLC (Modified Le Cléac'h)",
	ProfileType.OBLATE_SPHEROID: "Oblate Spheroid",
	ProfileType.SPHERICAL_WAVE: "Spherical Wave",
}


# ------------------------------ validation ------------------------------ #
def _require_number(name: str, value) -> float:
	if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
		raise InvalidParameterError(f"{name} finite", f"{name} must be a finite number, got {value!r}.")
	return float(value)


def validate_profile_parameters(params: ProfileParameters) -> None:
	"""Raise InvalidParameterError naming the first violated constraint."""
	throat = _require_number("throat_radius", params.throat_radius)
	mouth = _require_number("mouth_radius", params.mouth_radius)
	length = _require_number("length", params.length)
	if throat <= 0:
		raise InvalidParameterError("throat_radius > 0", "Throat radius must be greater than 0.")
	if mouth <= throat:
		raise InvalidParameterError("mouth_radius > throat_radius", "Mouth radius must be greater than throat radius.")
	if length <= 0:
		raise InvalidParameterError("length > 0", "Length must be greater than 0.")
	seg = params.segments
	if isinstance(seg, bool) or not isinstance(seg, numbers.Integral) or seg <= 0:
		raise InvalidParameterError("segments > 0", f"Segments must be a positive integer, got {seg!r}.")

	if params.cutoff_frequency is not None and _require_number("cutoff_frequency", params.cutoff_frequency) <= 0:
		raise InvalidParameterError("cutoff_frequency > 0", "Cutoff frequency must be greater than 0.")
	if params.t_factor is not None and _require_number("t_factor", params.t_factor) <= 0:
		raise InvalidParameterError("t_factor > 0", "T-factor must be greater than 0.")
	if params.blend_factor is not None and not (0.0 <= _require_number("blend_factor", params.blend_factor) <= 1.0):
		raise InvalidParameterError("0 <= blend_factor <= 1", "Blend factor must be between 0 and 1.")
	if params.eccentricity is not None and not (0.0 <= _require_number("eccentricity", params.eccentricity) < 1.0):
		raise InvalidParameterError("0 <= eccentricity < 1", "Eccentricity must be between 0 and 1 (exclusive of 1).")
	if params.wave_parameter is not None and _require_number("wave_parameter", params.wave_parameter) <= 0:
		raise InvalidParameterError("wave_parameter > 0", "Wave parameter must be greater than 0.")


def _extra(value, default: float) -> float:
	return float(default if value is None else value)


# ---------------------------- shared helpers ---------------------------- #
def sanitize_profile_points(points: Iterable[ProfilePoint]) -> list[ProfilePoint]:
	"""Drop points with a non-finite coordinate or a non-positive radius."""
	return [p for p in points if math.isfinite(p.x) and math.isfinite(p.radius) and p.radius > 0]


def profile_arrays(points: Sequence[ProfilePoint]) -> tuple[np.ndarray, np.ndarray]:
	"""(x, radius) as float ndarrays, mm."""
	x = np.fromiter((p.x for p in points), dtype=float, count=len(points))
	r = np.fromiter((p.radius for p in points), dtype=float, count=len(points))
	return x, r


def _sample(params: ProfileParameters) -> tuple[np.ndarray, np.ndarray]:
	t = np.linspace(0.0, 1.0, int(params.segments) + 1)
	return t, t * params.length


def _finalize(x: np.ndarray, radius: np.ndarray, params: ProfileParameters) -> list[ProfilePoint]:
	# pin the ends, clamp into [throat, mouth], then running maximum
	T, M = float(params.throat_radius), float(params.mouth_radius)
	x = np.array(x, dtype=float)
	r = np.array(radius, dtype=float)
	x[0] = 0.0
	x[-1] = float(params.length)
	r[0] = T
	r[-1] = M
	r = np.clip(r, T, M)
	r = np.fmax.accumulate(r)
	return sanitize_profile_points(ProfilePoint(float(xi), float(ri)) for xi, ri in zip(x, r))


def _moving_average(values: np.ndarray, half_width: int) -> np.ndarray:
	# centered window, shrinking at both ends
	n = values.size
	idx = np.arange(n)
	lo = np.maximum(0, idx - half_width)
	hi = np.minimum(n, idx + half_width + 1)
	csum = np.concatenate(([0.0], np.cumsum(values)))
	return (csum[hi] - csum[lo]) / (hi - lo)


def _smoothstep(t: np.ndarray) -> np.ndarray:
	return t * t * (3.0 - 2.0 * t)


# ------------------------------ generators ------------------------------ #
def conical_profile(params: ProfileParameters) -> list[ProfilePoint]:
	validate_profile_parameters(params)
	T, M = params.throat_radius, params.mouth_radius
	t, x = _sample(params)
	return _finalize(x, T + (M - T) * t, params)


def exponential_profile(params: ProfileParameters) -> list[ProfilePoint]:
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	t, x = _sample(params)
	m = math.log(M / T) / L
	return _finalize(x, T * np.exp(m * x), params)


def modified_exponential_profile(params: ProfileParameters) -> list[ProfilePoint]:
	"""Exponential growth reshaped by the T-factor curve (e^(tf t)-1)/(e^tf-1)."""
	validate_profile_parameters(params)
	T, M = params.throat_radius, params.mouth_radius
	tf = _extra(params.t_factor, DEFAULT_T_FACTOR)
	t, x = _sample(params)
	shape = np.expm1(tf * t) / math.expm1(tf)
	return _finalize(x, T + (M - T) * shape, params)


def parabolic_profile(params: ProfileParameters) -> list[ProfilePoint]:
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	t, x = _sample(params)
	k = (M - T) / math.sqrt(L)
	return _finalize(x, T + k * np.sqrt(x), params)


def tractrix_profile(params: ProfileParameters) -> list[ProfilePoint]:
	"""Tractrix x = a(ln tan(theta/2 + pi/4) - cos theta), r = a sin theta.

	The curve is swept uniformly in theta and built in its natural
	parameterization, whose length has nothing to do with the requested one.
	It is then rescaled: axially to the requested length, radially by
	mouth/throat, and blended from the throat radius along the axis.
	"""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	t, _ = _sample(params)
	theta = TRACTRIX_THETA_MIN + (TRACTRIX_THETA_MAX - TRACTRIX_THETA_MIN) * t
	x_nat = T * (np.log(np.tan(0.5 * theta + 0.25 * math.pi)) - np.cos(theta))
	r_nat = T * np.sin(theta)

	x = (x_nat - x_nat[0]) * (L / (x_nat[-1] - x_nat[0]))
	r = r_nat * (M / T)
	r = T + (r - T) * (x / L)
	return _finalize(x, np.minimum(r, M), params)


def hyperbolic_exponential_profile(params: ProfileParameters) -> list[ProfilePoint]:
	"""Blend of cosh and exp growth, blend_factor 0 = hyperbolic, 1 = exponential."""
	validate_profile_parameters(params)
	T, M = params.throat_radius, params.mouth_radius
	b = _extra(params.blend_factor, DEFAULT_BLEND_FACTOR)
	t, x = _sample(params)
	ln_ratio = math.log(M / T)
	hyperbolic = np.cosh(t * ln_ratio)
	exponential = np.exp(t * ln_ratio)
	shape = (1.0
			+ b * (np.cosh(t) - 1.0) / 2.0
			+ (1.0 - b) * (hyperbolic - 1.0) * 0.1
			+ b * (exponential - 1.0) * 0.1)
	r = T + (M - T) * t * shape
	return _finalize(x, np.minimum(r, M), params)


def le_cleach_profile(params: ProfileParameters) -> list[ProfilePoint]:
	"""Exponential law times a spherical-wave correction driven by the cutoff.

	The correction 1 + lambda/(4 pi r_t) sin(kx) is ramped in along the horn,
	capped by the conical envelope and then smoothed with a centered moving
	average.
	"""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	fc = _extra(params.cutoff_frequency, DEFAULT_CUTOFF_HZ)
	t, x = _sample(params)
	# lambda and k in SI units against mm geometry
	wavelength = C0 / fc
	k = TWOPI * fc / C0
	m = math.log(M / T) / L
	correction = 1.0 + (wavelength / (4.0 * math.pi * T)) * np.sin(k * x)
	r = T * np.exp(m * x) * correction
	r = T + (r - T) * t
	r = np.minimum(r, T + (M - T) * t)
	return _finalize(x, _moving_average(r, SMOOTHING_WINDOW), params)


def jmlc_profile(params: ProfileParameters) -> list[ProfilePoint]:
	"""Le Cleac'h variant after J.-M. Le Cleac'h's later horns (JMLC)."""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	fc = _extra(params.cutoff_frequency, DEFAULT_CUTOFF_HZ)
	t, x = _sample(params)

	fc_throat = C0 / (TWOPI * T)
	nf = fc / fc_throat
	rate = math.log(M / T) / L * (0.91 + 0.09 * math.tanh(nf))
	r = T * np.exp(rate * x) * (1.0 + (0.25 / nf) * np.sin(TWOPI * t))
	r = T + (r - T) * (1.0 - np.exp(-JMLC_THROAT_RAMP * t))
	r = np.minimum(r, T + (M - T) * t)

	# stretch so that the ends land on throat and mouth
	span = r[-1] - r[0]
	if span > 0:
		scale = (M - T) / span
		r = r * scale + (T - r[0] * scale)
	return _finalize(x, r, params)


def oblate_spheroid_profile(params: ProfileParameters) -> list[ProfilePoint]:
	"""Ellipsoidal law a sqrt(1-(z/c)^2) with eccentricity adjustment, blended with a cone."""
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	e = _extra(params.eccentricity, DEFAULT_ECCENTRICITY)
	t, z = _sample(params)
	a, c = M, L
	ratio = np.sqrt(np.maximum(0.0, 1.0 - (z / c) ** 2))
	spheroid = a * ratio * (1.0 - e * (1.0 - ratio))
	# a == mouth, so the rescale into [T, M] is the identity; kept for other a
	spheroid = T + (spheroid - T) * ((M - T) / (a - T))
	linear = T + (M - T) * t
	r = OBLATE_SPHEROID_BLEND * spheroid + (1.0 - OBLATE_SPHEROID_BLEND) * linear
	return _finalize(z, r, params)


def spherical_wave_profile(params: ProfileParameters) -> list[ProfilePoint]:
	validate_profile_parameters(params)
	T, M, L = params.throat_radius, params.mouth_radius, params.length
	fc = _extra(params.cutoff_frequency, DEFAULT_CUTOFF_HZ)
	wp = _extra(params.wave_parameter, DEFAULT_WAVE_PARAMETER)
	t, x = _sample(params)

	wavelength = C0 / fc
	x0 = (T * TWOPI) / wavelength * wp
	natural_mouth = T * math.sqrt(1.0 + (L / x0) ** 2)
	r = T * np.sqrt(1.0 + (x / x0) ** 2)
	r = T + (r - T) * ((M - T) / (natural_mouth - T))
	r = T + (r - T) * (1.0 - np.exp(-SPHERICAL_WAVE_RAMP * t))
	r = np.minimum(r, T + (M - T) * t ** 0.9)

	target = T + (M - T) * _smoothstep(t)
	r = SPHERICAL_WAVE_BLEND * r + (1.0 - SPHERICAL_WAVE_BLEND) * target
	return _finalize(x, r, params)


# ------------------------------- dispatch ------------------------------- #
_GENERATORS: dict[ProfileType, ProfileFunction] = {
	ProfileType.CONICAL: conical_profile,
	ProfileType.EXPONENTIAL: exponential_profile,
	ProfileType.MODIFIED_EXPONENTIAL: modified_exponential_profile,
	ProfileType.PARABOLIC: parabolic_profile,
	ProfileType.TRACTRIX: tractrix_profile,
	ProfileType.HYPERBOLIC_EXPONENTIAL: hyperbolic_exponential_profile,
	ProfileType.LE_CLEACH: le_cleach_profile,
	ProfileType.JMLC: jmlc_profile,
	ProfileType.OBLATE_SPHEROID: oblate_spheroid_profile,
	ProfileType.SPHERICAL_WAVE: spherical_wave_profile,
}


def _normalize_tag(tag) -> str:
	return "".join(ch for ch in str(tag).lower() if ch.isalnum())


_TAGS = {_normalize_tag(member.value): member for member in ProfileType}


def resolve_profile_type(profile_type) -> ProfileType | None:
	"""ProfileType for a tag, tolerant of case and separators ("le-cleach"); None if unknown."""
	if isinstance(profile_type, ProfileType):
		return profile_type
	if profile_type is None:
		return None
	return _TAGS.get(_normalize_tag(profile_type))


def fallback_to_exponential(tag) -> ProfileType:
	"""Unknown-tag policy: warn and generate an exponential horn instead."""
	msg = f"Unknown profile type: {tag!r}, falling back to exponential"
	logger.warning(msg)
	warnings.warn(msg, UnknownProfileWarning, stacklevel=3)
	return ProfileType.EXPONENTIAL


# Swap for a raising callable to make unknown tags a hard error.
UNKNOWN_PROFILE_POLICY: Callable[[object], ProfileType] = fallback_to_exponential


def get_profile(profile_type, params: ProfileParameters, corrected: bool = False) -> list[ProfilePoint]:
	"""Generate the flare curve for a profile tag.

	corrected=True selects the physically corrected variant where one
	exists (see hornacoupy.corrections), otherwise the plain law.
	"""
	resolved = resolve_profile_type(profile_type)
	if resolved is None:
		resolved = UNKNOWN_PROFILE_POLICY(profile_type)
	if corrected:
		from .corrections import CORRECTED_GENERATORS
		generator = CORRECTED_GENERATORS.get(resolved)
		if generator is not None:
			logger.debug("Using corrected %s profile", resolved.value)
			return generator(params)
	return _GENERATORS[resolved](params)


def available_profiles() -> list[ProfileType]:
	return list(ProfileType)


def profile_display_name(profile_type) -> str:
	resolved = resolve_profile_type(profile_type)
	if resolved is None:
		return str(profile_type)
	return PROFILE_DISPLAY_NAMES[resolved]
