import math

import pytest

from hornacoupy.analysis import analyze_horn
from hornacoupy.corrections import corrected_tractrix
from hornacoupy.errors import InvalidParameterError, UnknownProfileWarning
from hornacoupy.records import Axis, ProfileParameters, ProfileType

PARAMS = ProfileParameters(throat_radius=12.5, mouth_radius=100.0, length=300.0, segments=50)


def test_analyze_horn_bundle():
    res = analyze_horn(PARAMS, "exponential")
    assert res.profile_type is ProfileType.EXPONENTIAL
    assert res.parameters == PARAMS
    assert len(res.points) == 51
    assert len(res.frequency_response.response) == 100
    assert res.horizontal_pattern.axis is Axis.HORIZONTAL
    assert res.vertical_pattern.axis is Axis.VERTICAL
    assert res.horizontal_pattern.frequency == 1000.0
    assert math.isfinite(res.directivity.directivity_index)
    assert res.dispersion.required_width > 0.0 and res.dispersion.required_height > 0.0


def test_target_angles():
    res = analyze_horn(PARAMS, "conical", mouth_width=300.0, mouth_height=150.0,
            analysis_frequency=2000.0, target_angles=(90.0, 40.0))
    assert res.dispersion.required_width == pytest.approx(29000.0 / (2000.0 * 90.0) * 25.4)
    assert res.dispersion.required_height == pytest.approx(29000.0 / (2000.0 * 40.0) * 25.4)
    assert res.horizontal_pattern.frequency == 2000.0


def test_corrected_profile():
    res = analyze_horn(PARAMS, "tractrix", corrected=True)
    assert list(res.points) == corrected_tractrix(PARAMS)


def test_unknown_tag():
    with pytest.warns(UnknownProfileWarning):
        res = analyze_horn(PARAMS, "no-such-horn")
    assert res.profile_type is ProfileType.EXPONENTIAL


def test_invalid_parameters():
    with pytest.raises(InvalidParameterError):
        analyze_horn(ProfileParameters(100.0, 12.5, 300.0), "exponential")


def test_rectangular_mouth():
    res = analyze_horn(PARAMS, "conical", mouth_width=400.0, mouth_height=150.0,
            analysis_frequency=2000.0, aperture="rectangle")
    assert res.directivity.coverage.horizontal < res.directivity.coverage.vertical
    circle = analyze_horn(PARAMS, "conical", mouth_width=400.0, mouth_height=150.0, analysis_frequency=2000.0)
    assert res.horizontal_pattern.magnitudes != circle.horizontal_pattern.magnitudes


def test_unknown_aperture():
    with pytest.raises(InvalidParameterError):
        analyze_horn(PARAMS, "conical", aperture="hexagon")
