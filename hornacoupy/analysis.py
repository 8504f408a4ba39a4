from __future__ import annotations
import logging
from typing import Optional

from .directivity import calculate_from_polar_pattern
from .dispersion import calculate_aperture_pattern, calculate_dispersion_pattern, calculate_required_mouth_size
from .profiles import get_profile, resolve_profile_type, validate_profile_parameters
from .records import ApertureShape, Axis, HornAnalysis, ProfileParameters, ProfileType
from .response import calculate_response

logger = logging.getLogger(__name__)


def analyze_horn(params: ProfileParameters, profile_type, mouth_width: Optional[float] = None,
		mouth_height: Optional[float] = None, analysis_frequency: float = 1000.0,
		target_angles: Optional[tuple[float, float]] = None, corrected: bool = False,
		aperture: ApertureShape | str = ApertureShape.CIRCLE, aperture_exponent: float = 2.0) -> HornAnalysis:
	"""Profile, response and directivity of one horn in a single bundle.

	mouth_width/mouth_height (mm) default to the mouth diameter.
	target_angles is (horizontal, vertical) in degrees; without it the
	required mouth size is reported for the angles the mouth achieves.
	aperture selects the mouth shape of the polar patterns; a circle uses
	the width and height as the diameter of each plane.
	"""
	validate_profile_parameters(params)
	points = get_profile(profile_type, params, corrected=corrected)
	resolved = resolve_profile_type(profile_type)
	if resolved is None:
		# get_profile already applied the unknown-tag policy
		resolved = ProfileType.EXPONENTIAL

	width = 2.0 * params.mouth_radius if mouth_width is None else mouth_width
	height = 2.0 * params.mouth_radius if mouth_height is None else mouth_height

	response = calculate_response(points, params.throat_radius)
	if aperture == ApertureShape.CIRCLE:
		h_pattern = calculate_dispersion_pattern(analysis_frequency, Axis.HORIZONTAL, width)
		v_pattern = calculate_dispersion_pattern(analysis_frequency, Axis.VERTICAL, height)
	else:
		h_pattern = calculate_aperture_pattern(analysis_frequency, Axis.HORIZONTAL, width, height, aperture, aperture_exponent)
		v_pattern = calculate_aperture_pattern(analysis_frequency, Axis.VERTICAL, width, height, aperture, aperture_exponent)
	directivity = calculate_from_polar_pattern(h_pattern, v_pattern)

	if target_angles is None:
		current = calculate_required_mouth_size(180.0, 180.0, analysis_frequency, width, height)
		target_angles = (current.horizontal_beamwidth, current.vertical_beamwidth)
	dispersion = calculate_required_mouth_size(target_angles[0], target_angles[1], analysis_frequency, width, height)

	logger.debug("Analyzed %s horn: fc = %.1f Hz, DI = %.1f dB", resolved.value,
			response.cutoff_frequency, directivity.directivity_index)
	return HornAnalysis(
		parameters=params,
		profile_type=resolved,
		points=tuple(points),
		frequency_response=response,
		horizontal_pattern=h_pattern,
		vertical_pattern=v_pattern,
		directivity=directivity,
		dispersion=dispersion,
	)
