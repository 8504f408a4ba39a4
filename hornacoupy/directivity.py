"""Directivity index / Q and room-acoustics helpers."""
from __future__ import annotations
import logging
import math
import numbers
from typing import Sequence
import numpy as np

from .constants import BEAMWIDTH_K, BEAMWIDTH_MAX_DEG, C0, FARFIELD_DIST_M, MM_TO_INCH
from .errors import InvalidParameterError
from .records import Coverage, DirectivityResult, DirectivitySweepPoint, PolarData

logger = logging.getLogger(__name__)

# Sabine absorption constant (s/m) and critical-distance factor 0.141 = 1/sqrt(16 pi)
SABINE_CONSTANT = 0.161
CRITICAL_DISTANCE_FACTOR = 0.141
# Integration grid step, degrees
INTEGRATION_STEP_DEG = 1.0
DEFAULT_SENSITIVITY_DB = 100.0


def _positive(name: str, value: float) -> float:
	if isinstance(value, bool) or not isinstance(value, numbers.Real) or not (value > 0 and math.isfinite(value)):
		raise InvalidParameterError(f"{name} > 0", f"{name} must be a positive number, got {value!r}.")
	return float(value)


def calculate_from_coverage(horizontal_coverage: float, vertical_coverage: float) -> DirectivityResult:
	"""DI and Q for a rectangular coverage pattern (degrees).

	Solid angle 2 pi (1 - cos(v/2)) (h/pi), Q = 4 pi / solid angle.
	"""
	h = _positive("horizontal_coverage", horizontal_coverage)
	v = _positive("vertical_coverage", vertical_coverage)
	h_rad = math.radians(h)
	v_rad = math.radians(v)
	solid_angle = 2.0 * math.pi * (1.0 - math.cos(v_rad / 2.0)) * (h_rad / math.pi)
	Q = 4.0 * math.pi / solid_angle
	return DirectivityResult(
		directivity_index=10.0 * math.log10(Q),
		directivity_factor=Q,
		coverage=Coverage(horizontal=h, vertical=v),
	)


def interpolate_pattern(pattern: PolarData, angles):
	"""Linear interpolation of a polar pattern; clamps to the edge samples outside its range."""
	a = np.asarray(pattern.angles, dtype=float)
	m = np.asarray(pattern.magnitudes, dtype=float)
	if a.size == 0:
		raise InvalidParameterError("pattern not empty", "interpolate_pattern: pattern has no samples.")
	if a.shape != m.shape:
		raise InvalidParameterError("len(angles) == len(magnitudes)",
			f"interpolate_pattern: {a.size} angles but {m.size} magnitudes.")
	order = np.argsort(a)
	return np.interp(angles, a[order], m[order])


def _integrate_directivity_factor(horizontal: PolarData, vertical: PolarData) -> float:
	# Q = 4 pi / sum |h(phi) v(theta)|^2 sin(theta) dtheta dphi on a 1 deg grid,
	# theta over [0, pi], phi over [0, 2 pi]. The grid is separable.
	step = math.radians(INTEGRATION_STEP_DEG)
	theta = np.radians(np.arange(0.0, 180.0 + INTEGRATION_STEP_DEG / 2, INTEGRATION_STEP_DEG))
	phi = np.radians(np.arange(0.0, 360.0 + INTEGRATION_STEP_DEG / 2, INTEGRATION_STEP_DEG))
	h = interpolate_pattern(horizontal, phi)
	v = interpolate_pattern(vertical, theta)
	integral = float(np.sum(h * h) * np.sum(v * v * np.sin(theta)) * step * step)
	if integral <= 0:
		logger.warning("Polar patterns integrate to zero, assuming Q = 1")
		return 1.0
	return 4.0 * math.pi / integral


def find_coverage_angle(pattern: PolarData, db_down: float = -6.0) -> float:
	"""Total angle (degrees) inside which the pattern stays above on-axis + db_down.

	Scans outward from on-axis; 180 if the pattern never drops below.
	"""
	angles = np.asarray(pattern.angles, dtype=float)
	mags = np.asarray(pattern.magnitudes, dtype=float)
	if angles.size == 0:
		return 180.0
	threshold = 10.0 ** (db_down / 20.0)
	near_axis = np.flatnonzero(np.abs(angles) < 0.01)
	on_axis = int(near_axis[0]) if near_axis.size else 0
	target = (mags[on_axis] if near_axis.size else 1.0) * threshold
	for i in range(on_axis, mags.size):
		if mags[i] < target:
			return abs(math.degrees(angles[i])) * 2.0
	return 180.0


def calculate_from_polar_pattern(horizontal_pattern: PolarData, vertical_pattern: PolarData) -> DirectivityResult:
	"""DI and Q by numerical integration over separable polar patterns."""
	Q = _integrate_directivity_factor(horizontal_pattern, vertical_pattern)
	return DirectivityResult(
		directivity_index=10.0 * math.log10(Q),
		directivity_factor=Q,
		coverage=Coverage(
			horizontal=find_coverage_angle(horizontal_pattern, -6.0),
			vertical=find_coverage_angle(vertical_pattern, -6.0),
		),
	)


def frequency_dependent_di(mouth_width: float, mouth_height: float, frequencies: Sequence[float]) -> tuple[DirectivitySweepPoint, ...]:
	"""DI/Q per frequency from the empirical beamwidth law, capped at 180 deg."""
	w_in = _positive("mouth_width", mouth_width) * MM_TO_INCH
	h_in = _positive("mouth_height", mouth_height) * MM_TO_INCH
	out = []
	for f in frequencies:
		f = _positive("frequency", f)
		h = min(BEAMWIDTH_MAX_DEG, BEAMWIDTH_K / (w_in * f))
		v = min(BEAMWIDTH_MAX_DEG, BEAMWIDTH_K / (h_in * f))
		res = calculate_from_coverage(h, v)
		out.append(DirectivitySweepPoint(frequency=f, directivity_index=res.directivity_index, directivity_factor=res.directivity_factor))
	return tuple(out)


def distance_factor(distance: float, reference_distance: float = FARFIELD_DIST_M) -> float:
	"""Inverse-square level change in dB from reference_distance to distance."""
	return 20.0 * math.log10(_positive("reference_distance", reference_distance) / _positive("distance", distance))


def spl_at_distance(power: float, distance: float, directivity_index: float, sensitivity: float = DEFAULT_SENSITIVITY_DB) -> float:
	"""SPL = sensitivity + 10 log10(P) + DI - 20 log10(d)."""
	return (sensitivity + 10.0 * math.log10(_positive("power", power))
			+ directivity_index - 20.0 * math.log10(_positive("distance", distance)))


def critical_distance(Q: float, room_volume: float, rt60: float) -> float:
	"""Distance where direct and reverberant fields are equal (m), Sabine absorption."""
	absorption = SABINE_CONSTANT * _positive("room_volume", room_volume) / _positive("rt60", rt60)
	return CRITICAL_DISTANCE_FACTOR * math.sqrt(_positive("Q", Q) * absorption)


def room_gain(distance: float, critical_distance: float) -> float:
	"""Reverberant-field gain in dB; zero inside the critical distance."""
	ratio = _positive("distance", distance) / _positive("critical_distance", critical_distance)
	if ratio < 1.0:
		return 0.0
	return 10.0 * math.log10(1.0 + (critical_distance / distance) ** 2)


def array_directivity(horn_count: int, spacing: float, frequency: float, single_horn_di: float) -> DirectivityResult:
	"""Line-array DI: single-horn DI plus 10 log10(N) weighted by |sinc(spacing/lambda)|."""
	if isinstance(horn_count, bool) or not isinstance(horn_count, numbers.Integral) or horn_count < 1:
		raise InvalidParameterError("horn_count >= 1", f"horn_count must be a positive integer, got {horn_count!r}.")
	if not spacing >= 0:
		raise InvalidParameterError("spacing >= 0", f"spacing must not be negative, got {spacing!r}.")
	wavelength = C0 / _positive("frequency", frequency)
	narrowing = float(np.sinc(spacing / wavelength))
	total_di = single_horn_di + 10.0 * math.log10(horn_count) * abs(narrowing)
	Q = 10.0 ** (total_di / 10.0)
	single_q = 10.0 ** (single_horn_di / 10.0)
	return DirectivityResult(
		directivity_index=total_di,
		directivity_factor=Q,
		coverage=Coverage(horizontal=180.0 / math.sqrt(Q), vertical=180.0 / math.sqrt(single_q)),
	)
