from __future__ import annotations
import argparse, os
import datetime, pytz, csv
import logging
import numpy as np
import pandas as pd
from importlib.metadata import version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict
import matplotlib.pyplot as plt
import yaml

from .analysis import analyze_horn
from .constants import PROGRAMNAME, FARFIELD_DIST_M
from .errors import InvalidParameterError
from .plotting import plot_impedance, plot_polar, plot_profile, plot_spl
from .profiles import profile_arrays, profile_display_name
from .records import HornAnalysis, ProfileParameters
from .response import group_delay, impedance_array, log_frequencies
from .transmission import solve_transmission_line
from .yaml_utils import load_yaml_config

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Zurich"
EXTRA_KEYS = ("cutoff_frequency", "t_factor", "blend_factor", "eccentricity", "wave_parameter")

def _get_version() -> str:
	try:
		return version("hornacoupy")
	except PackageNotFoundError:
		return "unknown"

# ---------------- YAML ----------------
def load_config(path: str) -> dict:
	return load_yaml_config(path)

def _number(section: Dict[str, Any], key: str, where: str, required: bool = True):
	val = section.get(key)
	if val is None:
		if required:
			raise ValueError(f"{where} '{key}' is missing.")
		return None
	try:
		return float(val)
	except (TypeError, ValueError):
		raise ValueError(f"{where} '{key}' is not a number: {val!r}")

def build_parameters(cfg: dict) -> tuple[ProfileParameters, str, bool]:
	"""Horn section -> (ProfileParameters, profile tag, corrected flag)."""
	horn = cfg.get("horn")
	if not isinstance(horn, dict):
		raise ValueError("Config must define a 'horn' section.")
	profile = horn.get("profile")
	if not isinstance(profile, str) or not profile.strip():
		raise ValueError("Horn 'profile' is missing.")
	corrected = horn.get("corrected", False)
	if not isinstance(corrected, bool):
		raise ValueError(f"Horn 'corrected' must be true or false, got {corrected!r}")
	extras = {k: _number(horn, k, "Horn", required=False) for k in EXTRA_KEYS}
	params = ProfileParameters(
		throat_radius=_number(horn, "throat_radius", "Horn"),
		mouth_radius=_number(horn, "mouth_radius", "Horn"),
		length=_number(horn, "length", "Horn"),
		segments=horn.get("segments", 100),
		**extras,
	)
	return params, profile.strip(), corrected

def build_dispersion(cfg: dict) -> Dict[str, Any]:
	"""Optional dispersion section -> keyword arguments of analyze_horn."""
	disp = cfg.get("dispersion") or {}
	if not isinstance(disp, dict):
		raise ValueError("'dispersion' must be a mapping.")
	kwargs: Dict[str, Any] = {
		"mouth_width": _number(disp, "mouth_width", "Dispersion", required=False),
		"mouth_height": _number(disp, "mouth_height", "Dispersion", required=False),
	}
	freq = _number(disp, "frequency", "Dispersion", required=False)
	if freq is not None:
		kwargs["analysis_frequency"] = freq
	th = _number(disp, "target_horizontal", "Dispersion", required=False)
	tv = _number(disp, "target_vertical", "Dispersion", required=False)
	if (th is None) != (tv is None):
		raise ValueError("Dispersion needs both 'target_horizontal' and 'target_vertical', or neither.")
	if th is not None:
		kwargs["target_angles"] = (th, tv)
	aperture = disp.get("aperture")
	if aperture is not None:
		if not isinstance(aperture, str):
			raise ValueError(f"Dispersion 'aperture' must be a shape name, got {aperture!r}")
		kwargs["aperture"] = aperture.strip().lower()
	exponent = _number(disp, "aperture_exponent", "Dispersion", required=False)
	if exponent is not None:
		kwargs["aperture_exponent"] = exponent
	return kwargs

def write_response_csv(res: HornAnalysis, outdir: str, pre: str, timezone: str = DEFAULT_TIMEZONE) -> str:
	"""write frequency-response data to CSV
	"""
	outpath = os.path.join(outdir, f"{pre}DATA.csv")
	resp = res.frequency_response.response
	f = np.array([p.frequency for p in resp])
	Z = impedance_array(resp)
	gd = pd.Series({p.frequency: p.delay for p in group_delay(resp)}, dtype=float)
	df = pd.DataFrame({
		"Frequency (Hz)": f,
		f"SPL (dB-SPL @ 1 W / {FARFIELD_DIST_M:g} m)": [p.spl for p in resp],
		"Phase (degrees)": [p.phase for p in resp],
		"Impedance Magnitude (Pa·s/m³)": np.abs(Z),
		"Impedance Phase (degrees)": np.rad2deg(np.angle(Z)),
		"Group Delay (ms)": gd.reindex(f).to_numpy(),
	})
	tz = pytz.timezone(timezone)
	timestamp = datetime.datetime.now(tz).isoformat()
	header_lines = [
		f"# Program: {PROGRAMNAME}",
		f"# Version: {_get_version()}",
		f"# Generated: {timestamp}",
		f"# Profile: {profile_display_name(res.profile_type)}",
		f"# Cutoff frequency (Hz): {res.frequency_response.cutoff_frequency:.2f}",
		f"# Average efficiency (%): {res.frequency_response.efficiency:.4f}",
		f"# Directivity index (dB): {res.directivity.directivity_index:.2f}",
	]
	with open(outpath, "w", encoding="utf-8") as fh:
		for line in header_lines:
			fh.write(line + "\n")
	df.to_csv(outpath, mode="a", index=False, quoting=csv.QUOTE_NONE, escapechar="\\")
	return outpath

def write_transmission_csv(res: HornAnalysis, outdir: str, pre: str, timezone: str = DEFAULT_TIMEZONE) -> str:
	"""write the transmission-matrix solution over the response sweep to CSV
	"""
	outpath = os.path.join(outdir, f"{pre}TL.csv")
	solution = solve_transmission_line(res.points, log_frequencies())
	Z = np.array([p.throat_impedance.to_complex() for p in solution], dtype=complex)
	df = pd.DataFrame({
		"Frequency (Hz)": [p.frequency for p in solution],
		"Transfer (dB)": [p.level for p in solution],
		"Transfer Phase (degrees)": [p.phase for p in solution],
		"Throat Impedance Magnitude (Pa·s/m³)": np.abs(Z),
		"Throat Impedance Phase (degrees)": np.rad2deg(np.angle(Z)),
		"Group Delay (ms)": [np.nan if p.group_delay is None else p.group_delay for p in solution],
	})
	timestamp = datetime.datetime.now(pytz.timezone(timezone)).isoformat()
	with open(outpath, "w", encoding="utf-8") as fh:
		fh.write(f"# Program: {PROGRAMNAME}\n")
		fh.write(f"# Version: {_get_version()}\n")
		fh.write(f"# Generated: {timestamp}\n")
		fh.write(f"# Profile: {profile_display_name(res.profile_type)}\n")
		fh.write("# Model: transmission matrix, baffled-piston mouth\n")
	df.to_csv(outpath, mode="a", index=False, quoting=csv.QUOTE_NONE, escapechar="\\")
	return outpath

def write_plots(res: HornAnalysis, outdir: str, pre: str, fmt: str) -> None:
	resp = res.frequency_response
	f = np.array([p.frequency for p in resp.response])
	x, r = profile_arrays(res.points)
	name = profile_display_name(res.profile_type)
	figs = [
		plot_profile(x, r, outfile=os.path.join(outdir, f"{pre}PROFILE.{fmt}"), title=f"{name} profile"),
		plot_spl(f, np.array([p.spl for p in resp.response]), outfile=os.path.join(outdir, f"{pre}SPL.{fmt}"),
				title=f"SPL ({name})", cutoff=resp.cutoff_frequency),
		plot_impedance(f, impedance_array(resp.response), outfile=os.path.join(outdir, f"{pre}IMPEDANCE.{fmt}")),
		plot_polar([res.horizontal_pattern, res.vertical_pattern], outfile=os.path.join(outdir, f"{pre}POLAR.{fmt}"),
				title=f"Dispersion at {res.horizontal_pattern.frequency:.0f} Hz"),
	]
	for fig in figs:
		plt.close(fig)

def main(argv=None):
	parser = argparse.ArgumentParser(prog='hornacoupy', description=f"{PROGRAMNAME}: Horn loudspeaker profiles, frequency response and dispersion from a YAML config")
	parser.add_argument("config", help="YAML config file")
	parser.add_argument("--outdir", default=str(Path.cwd()), help="Output directory for plots and data")
	parser.add_argument("--prefix", default="", help="Filename prefix")
	parser.add_argument("--png", action="store_true", help="Write PNG plots")
	parser.add_argument("--pdf", action="store_true", help="Write PDF plots")
	parser.add_argument("--csv", action="store_true", help="Write response data to CSV file")
	parser.add_argument("--tl", action="store_true", help="Write the transmission-matrix solution to CSV file")
	parser.add_argument("--timezone", default=DEFAULT_TIMEZONE, help="Time zone of the CSV timestamp")
	parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
	args = parser.parse_args(argv)
	if not (args.png or args.pdf or args.csv or args.tl):
		parser.error("You must specify at least one output format: --png, --pdf, --csv, --tl")

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)
	try:
		pytz.timezone(args.timezone)
	except pytz.UnknownTimeZoneError:
		parser.error(f"Unknown time zone: {args.timezone}")

	try:
		cfg = load_config(args.config)
		params, profile, corrected = build_parameters(cfg)
		logger.debug("Config %s: profile=%s corrected=%s %s", args.config, profile, corrected, params)
		res = analyze_horn(params, profile, corrected=corrected, **build_dispersion(cfg))
	except OSError as e:
		parser.error(f"Cannot read config: {e}")
	except yaml.YAMLError as e:
		parser.error(f"Invalid YAML in {args.config}: {e}")
	except (InvalidParameterError, ValueError) as e:
		parser.error(str(e))

	os.makedirs(args.outdir, exist_ok=True)
	pre = (args.prefix + "_") if args.prefix else ""

	outputs = []
	# PLOTS
	for fmt, enabled in (("png", args.png), ("pdf", args.pdf)):
		if enabled:
			write_plots(res, args.outdir, pre, fmt)
			outputs.append(fmt.upper())
	# CSV output
	if args.csv:
		write_response_csv(res, args.outdir, pre, args.timezone)
		outputs.append("CSV")
	if args.tl:
		write_transmission_csv(res, args.outdir, pre, args.timezone)
		outputs.append("TL")
	print(f'Wrote: {", ".join(outputs)} to {args.outdir}/')
	return 0

if __name__ == "__main__":
	raise SystemExit(main())
