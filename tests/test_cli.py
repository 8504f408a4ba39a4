import pandas as pd
import pytest

from hornacoupy.cli import build_dispersion, build_parameters, main
from hornacoupy.errors import InvalidParameterError
from hornacoupy.profiles import validate_profile_parameters
from hornacoupy.yaml_utils import (
    TAB_DESCRIPTION, find_yaml_offenses, load_yaml_config, sanitize_yaml_text,
)

CONFIG = """\
horn:
  profile: le-cleach
  corrected: true
  throat_radius: 12.5
  mouth_radius: 100
  length: 300
  segments: 60
  cutoff_frequency: 600
dispersion:
  frequency: 2000
  mouth_width: 250
  target_horizontal: 90
  target_vertical: 40
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "horn.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def test_build_parameters(config_file):
    params, profile, corrected = build_parameters(load_yaml_config(config_file))
    assert profile == "le-cleach"
    assert corrected is True
    assert params.throat_radius == 12.5
    assert params.segments == 60
    assert params.cutoff_frequency == 600.0
    assert params.t_factor is None


def test_build_dispersion(config_file):
    kwargs = build_dispersion(load_yaml_config(config_file))
    assert kwargs["analysis_frequency"] == 2000.0
    assert kwargs["mouth_width"] == 250.0
    assert kwargs["mouth_height"] is None
    assert kwargs["target_angles"] == (90.0, 40.0)
    assert build_dispersion({}) == {"mouth_width": None, "mouth_height": None}
    kwargs = build_dispersion({"dispersion": {"aperture": " Superellipse", "aperture_exponent": 4}})
    assert kwargs["aperture"] == "superellipse"
    assert kwargs["aperture_exponent"] == 4.0
    with pytest.raises(ValueError, match="'aperture'"):
        build_dispersion({"dispersion": {"aperture": 3}})


@pytest.mark.parametrize("cfg, fragment", [
    ({}, "'horn'"),
    ({"horn": {"throat_radius": 1, "mouth_radius": 2, "length": 3}}, "'profile'"),
    ({"horn": {"profile": "conical", "mouth_radius": 2, "length": 3}}, "'throat_radius'"),
    ({"horn": {"profile": "conical", "throat_radius": "wide", "mouth_radius": 2, "length": 3}}, "'throat_radius'"),
    ({"horn": {"profile": "conical", "throat_radius": 1, "mouth_radius": 2, "length": 3, "corrected": "false"}}, "'corrected'"),
    ({"horn": {"profile": "conical", "throat_radius": 1, "mouth_radius": 2, "length": 3, "corrected": 1}}, "'corrected'"),
])
def test_build_parameters_errors(cfg, fragment):
    with pytest.raises(ValueError, match=fragment):
        build_parameters(cfg)


@pytest.mark.parametrize("segments", [2.7, True, "60"])
def test_segments_are_not_coerced(segments):
    cfg = {"horn": {"profile": "conical", "throat_radius": 1, "mouth_radius": 2, "length": 3, "segments": segments}}
    params, _, _ = build_parameters(cfg)
    assert params.segments is segments
    with pytest.raises(InvalidParameterError) as excinfo:
        validate_profile_parameters(params)
    assert excinfo.value.constraint == "segments > 0"


def test_main_rejects_fractional_segments(tmp_path):
    path = tmp_path / "frac.yaml"
    path.write_text("horn:\n  profile: conical\n  throat_radius: 10\n  mouth_radius: 50\n  length: 100\n  segments: 2.7\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main([str(path), "--csv", "--outdir", str(tmp_path)])
    assert excinfo.value.code == 2


def test_build_dispersion_needs_both_targets():
    with pytest.raises(ValueError):
        build_dispersion({"dispersion": {"target_horizontal": 90}})


class TestYamlSanitizing:
    def test_tab_indentation_is_normalized(self):
        text = "horn:\n\tprofile: conical\n"
        assert find_yaml_offenses(text)[0].description == TAB_DESCRIPTION
        assert sanitize_yaml_text(text) == "horn:\n  profile: conical"

    def test_strict_raises(self):
        with pytest.raises(ValueError, match="line 2, col 1"):
            sanitize_yaml_text("horn:\n\tprofile: conical\n", strict=True)

    def test_odd_whitespace(self):
        offenses = find_yaml_offenses("a:\u00a01\n")
        assert (offenses[0].line, offenses[0].col) == (1, 3)
        assert sanitize_yaml_text("a:\u00a01\n") == "a: 1"

    def test_offense_names(self):
        offenses = find_yaml_offenses("a:\u00a01\u200b\n")
        assert [o.description for o in offenses] == ["NO-BREAK SPACE (U+00A0)", "ZERO WIDTH SPACE (U+200B)"]
        assert offenses[1].col == 5

    def test_clean_text_untouched(self):
        assert sanitize_yaml_text(CONFIG) == CONFIG

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_yaml_config(path)


def test_main_writes_csv(config_file, tmp_path, capsys):
    outdir = tmp_path / "out"
    assert main([str(config_file), "--outdir", str(outdir), "--csv", "--prefix", "demo"]) == 0
    csv_path = outdir / "demo_DATA.csv"
    assert csv_path.exists()
    header = [line for line in csv_path.read_text(encoding="utf-8").splitlines() if line.startswith("#")]
    assert header[0] == "# Program: HornAcouPy"
    df = pd.read_csv(csv_path, comment="#")
    assert len(df) == 100
    assert df.columns[0] == "Frequency (Hz)"
    assert df["Group Delay (ms)"].isna().sum() == 2
    assert "CSV" in capsys.readouterr().out


def test_main_writes_transmission_line(config_file, tmp_path, capsys):
    assert main([str(config_file), "--outdir", str(tmp_path), "--tl"]) == 0
    df = pd.read_csv(tmp_path / "TL.csv", comment="#")
    assert len(df) == 100
    assert df.columns[1] == "Transfer (dB)"
    assert df["Group Delay (ms)"].isna().sum() == 1
    assert "TL" in capsys.readouterr().out


def test_main_writes_plots(config_file, tmp_path):
    assert main([str(config_file), "--outdir", str(tmp_path), "--png"]) == 0
    for name in ("PROFILE", "SPL", "IMPEDANCE", "POLAR"):
        assert (tmp_path / f"{name}.png").exists()


@pytest.mark.parametrize("extra", [
    [],                                   # no output format
    ["--csv", "--timezone", "Mars/Olympus_Mons"],
])
def test_main_usage_errors(config_file, extra):
    with pytest.raises(SystemExit) as excinfo:
        main([str(config_file)] + extra)
    assert excinfo.value.code == 2


def test_main_missing_config(tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.yaml"), "--csv"])


def test_main_invalid_geometry(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("horn:\n  profile: conical\n  throat_radius: 50\n  mouth_radius: 10\n  length: 100\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        main([str(path), "--csv", "--outdir", str(tmp_path)])
