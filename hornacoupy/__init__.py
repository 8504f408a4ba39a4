# import things so they will be available:
# import hornacoupy as hp
# hp.get_profile("exponential", hp.ProfileParameters(12.5, 100.0, 300.0))

from .records import (
    ProfileType, Axis, ApertureShape, ProfilePoint, ProfileParameters, ComplexNumber,
    FrequencyPoint, FrequencyResponseData, GroupDelayPoint, TransmissionLinePoint,
    PolarData, Coverage, DirectivityResult, DirectivitySweepPoint,
    DispersionResult, DispersionSweepPoint, CoverageArea, MouthSize, PolarMetrics,
    HornAnalysis,
)
from .errors import InvalidParameterError, UnknownProfileWarning

from .special import (
    bessel_j, spherical_bessel, bessel_y, bessel_i, bessel_k, hankel1, hankel2,
)

from .profiles import (
    conical_profile, exponential_profile, modified_exponential_profile,
    parabolic_profile, tractrix_profile, hyperbolic_exponential_profile,
    le_cleach_profile, jmlc_profile, oblate_spheroid_profile, spherical_wave_profile,
    validate_profile_parameters, get_profile, available_profiles, profile_display_name,
    sanitize_profile_points, profile_arrays, resolve_profile_type, UNKNOWN_PROFILE_POLICY,
)
from .corrections import (
    corrected_le_cleach, corrected_jmlc, corrected_tractrix, corrected_parabolic,
    hyperbolic_profile,
)

from .radiation import (
    approx_bessel_j1, approx_struve_h1, radiation_impedance, throat_impedance,
    mouth_impedance, piston_directivity, rectangular_directivity, superellipse_directivity,
)
from .transmission import (
    solve_transmission_line, chain_matrix, piston_termination, speed_of_sound,
)
from .response import (
    calculate_response, cutoff_frequency, log_frequencies, frequency_point,
    horn_loading, efficiency, phase_response, average_efficiency,
    group_delay, power_response, impedance_array,
)
from .dispersion import (
    calculate_beamwidth, calculate_required_mouth_size, calculate_dispersion_pattern, calculate_aperture_pattern,
    calculate_directivity_index, frequency_dependent_dispersion, coverage_area,
    optimal_mouth_size, analyze_polar_pattern,
)
from .directivity import (
    calculate_from_coverage, calculate_from_polar_pattern, find_coverage_angle,
    interpolate_pattern, frequency_dependent_di, distance_factor, spl_at_distance,
    critical_distance, room_gain, array_directivity,
)
from .analysis import analyze_horn

# import ALL public constants directly
from .constants import PROGRAMNAME, TWOPI, RHO0, C0, FARFIELD_DIST_M, REFERENCE_SPL_DB, BEAMWIDTH_K

__all__ = [
    # records
    "ProfileType", "Axis", "ApertureShape", "ProfilePoint", "ProfileParameters", "ComplexNumber",
    "FrequencyPoint", "FrequencyResponseData", "GroupDelayPoint", "TransmissionLinePoint",
    "PolarData", "Coverage", "DirectivityResult", "DirectivitySweepPoint",
    "DispersionResult", "DispersionSweepPoint", "CoverageArea", "MouthSize", "PolarMetrics",
    "HornAnalysis",
    # errors
    "InvalidParameterError", "UnknownProfileWarning",
    # special functions
    "bessel_j", "spherical_bessel", "bessel_y", "bessel_i", "bessel_k", "hankel1", "hankel2",
    # profiles
    "conical_profile", "exponential_profile", "modified_exponential_profile",
    "parabolic_profile", "tractrix_profile", "hyperbolic_exponential_profile",
    "le_cleach_profile", "jmlc_profile", "oblate_spheroid_profile", "spherical_wave_profile",
    "validate_profile_parameters", "get_profile", "available_profiles", "profile_display_name",
    "sanitize_profile_points", "profile_arrays", "resolve_profile_type", "UNKNOWN_PROFILE_POLICY",
    # corrections
    "corrected_le_cleach", "corrected_jmlc", "corrected_tractrix", "corrected_parabolic",
    "hyperbolic_profile",
    # radiation / response
    "approx_bessel_j1", "approx_struve_h1", "radiation_impedance", "throat_impedance",
    "mouth_impedance", "piston_directivity", "rectangular_directivity", "superellipse_directivity",
    "solve_transmission_line", "chain_matrix", "piston_termination", "speed_of_sound",
    "calculate_response", "cutoff_frequency", "log_frequencies", "frequency_point",
    "horn_loading", "efficiency", "phase_response", "average_efficiency",
    "group_delay", "power_response", "impedance_array",
    # dispersion / directivity
    "calculate_beamwidth", "calculate_required_mouth_size", "calculate_dispersion_pattern", "calculate_aperture_pattern",
    "calculate_directivity_index", "frequency_dependent_dispersion", "coverage_area",
    "optimal_mouth_size", "analyze_polar_pattern",
    "calculate_from_coverage", "calculate_from_polar_pattern", "find_coverage_angle",
    "interpolate_pattern", "frequency_dependent_di", "distance_factor", "spl_at_distance",
    "critical_distance", "room_gain", "array_directivity",
    # analysis
    "analyze_horn",
    # constants
    "PROGRAMNAME", "TWOPI", "RHO0", "C0", "FARFIELD_DIST_M", "REFERENCE_SPL_DB", "BEAMWIDTH_K",
]
