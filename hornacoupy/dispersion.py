"""Horn dispersion: beamwidth, mouth sizing and polar patterns.

Beamwidth follows the empirical rule  theta = K / (d f)  with d the mouth
dimension in inches, f in Hz and K = 29000.
"""
from __future__ import annotations
import logging
import math
import numpy as np

from .constants import (
	BEAMWIDTH_K, BEAMWIDTH_MAX_DEG, BEAMWIDTH_MIN_DEG, C0, DI_MAX_DB, INCH_TO_MM, MM_TO_INCH,
)
from .directivity import _positive, find_coverage_angle
from .errors import InvalidParameterError
from .radiation import (
	DIRECTIVITY_FLOOR, piston_directivity, rectangular_directivity, superellipse_directivity,
)
from .records import (
	ApertureShape, Axis, CoverageArea, DispersionResult, DispersionSweepPoint, MouthSize, PolarData, PolarMetrics,
)

logger = logging.getLogger(__name__)

POLAR_STEP_DEG = 5
DEFAULT_SIDELOBE_DB = -40.0


def calculate_beamwidth(mouth_dimension: float, frequency: float) -> float:
	"""-6 dB beamwidth in degrees for a mouth dimension in mm, clamped to [10, 180].

	A zero dimension or frequency means no pattern control: 180.
	"""
	dimension_in = mouth_dimension * MM_TO_INCH
	if dimension_in == 0 or frequency == 0:
		return BEAMWIDTH_MAX_DEG
	beamwidth = BEAMWIDTH_K / (dimension_in * frequency)
	return min(BEAMWIDTH_MAX_DEG, max(BEAMWIDTH_MIN_DEG, beamwidth))


def calculate_directivity_index(horizontal_beamwidth: float, vertical_beamwidth: float) -> float:
	"""DI = 10 log10(4 pi / (h v)), beamwidths in radians, clamped to [0, 40] dB."""
	solid_angle = math.radians(horizontal_beamwidth) * math.radians(vertical_beamwidth)
	if solid_angle == 0:
		return DI_MAX_DB
	di = 10.0 * math.log10(4.0 * math.pi / solid_angle)
	return min(DI_MAX_DB, max(0.0, di))


def _mouth_dimension_for(beamwidth: float, frequency: float) -> float:
	# inverse of the beamwidth rule, mm
	return BEAMWIDTH_K / (frequency * beamwidth) * INCH_TO_MM


def calculate_required_mouth_size(horizontal_angle: float, vertical_angle: float, frequency: float,
		mouth_width: float, mouth_height: float) -> DispersionResult:
	"""Mouth width/height (mm) giving the target angles at frequency, alongside
	the beamwidths and DI the current mouth achieves there.
	"""
	_positive("horizontal_angle", horizontal_angle)
	_positive("vertical_angle", vertical_angle)
	_positive("frequency", frequency)
	h = calculate_beamwidth(mouth_width, frequency)
	v = calculate_beamwidth(mouth_height, frequency)
	logger.debug("Mouth %.1f x %.1f mm at %.0f Hz: %.1f x %.1f deg", mouth_width, mouth_height, frequency, h, v)
	return DispersionResult(
		required_width=_mouth_dimension_for(horizontal_angle, frequency),
		required_height=_mouth_dimension_for(vertical_angle, frequency),
		horizontal_beamwidth=h,
		vertical_beamwidth=v,
		directivity_index=calculate_directivity_index(h, v),
	)


def calculate_dispersion_pattern(frequency: float, axis: Axis | str, mouth_dimension: float) -> PolarData:
	"""Circular-aperture diffraction pattern from -90 to +90 deg in 5 deg steps."""
	wavelength = C0 * 1000.0 / _positive("frequency", frequency)  # mm
	ka = math.pi * mouth_dimension / wavelength
	degrees = np.arange(-90, 91, POLAR_STEP_DEG)
	angles = tuple(math.radians(d) for d in degrees)
	magnitudes = tuple(piston_directivity(ka, th) for th in angles)
	return PolarData(angles=angles, magnitudes=magnitudes, frequency=float(frequency), axis=Axis(axis))


def calculate_aperture_pattern(frequency: float, axis: Axis | str, mouth_width: float, mouth_height: float,
		shape: ApertureShape | str = ApertureShape.CIRCLE, exponent: float = 2.0) -> PolarData:
	"""Diffraction pattern of a non-circular mouth, -90 to +90 deg in 5 deg steps.

	The horizontal plane scans across mouth_width, the vertical one across
	mouth_height. A circle takes the larger dimension as its diameter;
	exponent only matters to the superellipse.
	"""
	try:
		shape = ApertureShape(shape)
	except ValueError:
		raise InvalidParameterError("shape in " + ", ".join(s.value for s in ApertureShape),
			f"calculate_aperture_pattern: unknown aperture shape {shape!r}.")
	axis = Axis(axis)
	wavelength = C0 * 1000.0 / _positive("frequency", frequency)  # mm
	width = _positive("mouth_width", mouth_width)
	height = _positive("mouth_height", mouth_height)
	if shape is ApertureShape.CIRCLE:
		dimension = max(width, height)
	else:
		dimension = width if axis is Axis.HORIZONTAL else height
	kd = 2.0 * math.pi * dimension / wavelength
	angles = tuple(math.radians(d) for d in np.arange(-90, 91, POLAR_STEP_DEG))
	if shape is ApertureShape.RECTANGLE:
		magnitudes = tuple(rectangular_directivity(kd, th) for th in angles)
	elif shape is ApertureShape.SUPERELLIPSE:
		n = _positive("exponent", exponent)
		magnitudes = tuple(superellipse_directivity(0.5 * kd, th, n) for th in angles)
	else:
		magnitudes = tuple(piston_directivity(0.5 * kd, th) for th in angles)
	logger.debug("%s aperture, %s plane: %.1f mm at %.0f Hz", shape.value, axis.value, dimension, frequency)
	return PolarData(angles=angles, magnitudes=magnitudes, frequency=float(frequency), axis=axis)


def frequency_dependent_dispersion(mouth_width: float, mouth_height: float,
		fmin: float, fmax: float, steps: int) -> tuple[DispersionSweepPoint, ...]:
	"""Beamwidths and DI over a log-spaced frequency range."""
	_positive("fmin", fmin)
	_positive("fmax", fmax)
	if int(steps) < 2:
		raise InvalidParameterError("steps >= 2", f"frequency_dependent_dispersion: need at least 2 steps, got {steps!r}.")
	out = []
	for f in np.logspace(math.log10(fmin), math.log10(fmax), int(steps)):
		h = calculate_beamwidth(mouth_width, f)
		v = calculate_beamwidth(mouth_height, f)
		out.append(DispersionSweepPoint(
			frequency=float(f), horizontal_beamwidth=h, vertical_beamwidth=v,
			directivity_index=calculate_directivity_index(h, v)))
	return tuple(out)


def coverage_area(horizontal_beamwidth: float, vertical_beamwidth: float, distance: float) -> CoverageArea:
	"""Width, height (m) and area (m^2) covered at distance (m)."""
	width = 2.0 * distance * math.tan(math.radians(horizontal_beamwidth) / 2.0)
	height = 2.0 * distance * math.tan(math.radians(vertical_beamwidth) / 2.0)
	return CoverageArea(width=width, height=height, area=width * height)


def optimal_mouth_size(target_width: float, target_height: float, distance: float, frequency: float) -> MouthSize:
	"""Mouth size (mm) covering a target_width x target_height area (m) at distance (m)."""
	_positive("distance", distance)
	_positive("frequency", frequency)
	h = math.degrees(2.0 * math.atan(_positive("target_width", target_width) / (2.0 * distance)))
	v = math.degrees(2.0 * math.atan(_positive("target_height", target_height) / (2.0 * distance)))
	return MouthSize(mouth_width=_mouth_dimension_for(h, frequency), mouth_height=_mouth_dimension_for(v, frequency))


def analyze_polar_pattern(polar: PolarData) -> PolarMetrics:
	"""-6 dB beamwidth, first side lobe and front-to-back ratio of a pattern."""
	angles = np.asarray(polar.angles, dtype=float)
	mags = np.asarray(polar.magnitudes, dtype=float)
	beamwidth = find_coverage_angle(polar, -6.0)

	# first null then first maximum, walking outward from on-axis
	sidelobe = DEFAULT_SIDELOBE_DB
	on_axis = int(np.argmin(np.abs(angles))) if angles.size else 0
	found_null = False
	for i in range(max(on_axis, 1), mags.size - 1):
		if not found_null and mags[i] < mags[i - 1] and mags[i] < mags[i + 1]:
			found_null = True
		elif found_null and mags[i] > mags[i - 1] and mags[i] > mags[i + 1]:
			sidelobe = 20.0 * math.log10(max(DIRECTIVITY_FLOOR, mags[i]))
			break

	front = mags[on_axis] if mags.size else 1.0
	back_idx = np.flatnonzero(np.abs(angles) > 0.9 * math.pi)
	back = mags[back_idx[0]] if back_idx.size else DIRECTIVITY_FLOOR
	ratio = 20.0 * math.log10(front / max(back, DIRECTIVITY_FLOOR))
	return PolarMetrics(beamwidth=beamwidth, sidelobe_level=sidelobe, front_to_back_ratio=max(0.0, ratio))
