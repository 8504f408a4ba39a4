from __future__ import annotations
from typing import Sequence
import numpy as np
import matplotlib.pyplot as plt

from .constants import PROGRAMNAME
from .records import PolarData

def __branding(ax):
	ax.text(
		0.99, 0.01, PROGRAMNAME,
		transform=ax.transAxes,
		ha="right", va="bottom",
		color="gray",
		bbox=dict(facecolor="white", edgecolor="none", pad=2.0),
		zorder=10
	)

def _finish(fig, outfile):
	if outfile:
		fig.savefig(outfile, bbox_inches="tight", dpi=150)
	return fig

def plot_profile(x_mm: np.ndarray, r_mm: np.ndarray, outfile: str | None = None, title: str = "Horn profile"):
	"""Flare curve mirrored about the horn axis."""
	fig = plt.figure()
	ax = fig.add_subplot(111)
	line, = ax.plot(x_mm, r_mm)
	ax.plot(x_mm, -r_mm, color=line.get_color())
	ax.axhline(0.0, color="gray", lw=0.8, ls="-.")
	ax.set_xlabel("Distance from throat (mm)")
	ax.set_ylabel("Radius (mm)")
	ax.set_aspect("equal", adjustable="datalim")
	ax.grid(True, ls=":")
	ax.set_title(title)
	__branding(ax)
	return _finish(fig, outfile)

def plot_spl(f: np.ndarray, spl_db: np.ndarray, outfile: str | None = None, title: str = "On-axis SPL",
		cutoff: float | None = None):
	fig = plt.figure()
	ax = fig.add_subplot(111)
	ax.semilogx(f, spl_db, label="SPL @ 1 W / 1 m")
	if cutoff is not None:
		ax.axvline(cutoff, color="gray", ls="--", label=f"fc = {cutoff:.0f} Hz")
	ax.set_xlabel("Frequency (Hz)")
	ax.set_ylabel("SPL (dB-SPL)")
	ax.grid(True, which="both", ls=":")
	ax.legend(loc="lower right")
	ax.set_title(title)
	__branding(ax)
	return _finish(fig, outfile)

def plot_impedance(f: np.ndarray, Z: np.ndarray, outfile: str | None = None, title: str = "Mouth radiation impedance"):
	"""Acoustic impedance magnitude with phase on a twin y-axis."""
	mag = np.abs(Z)
	phase = ((np.rad2deg(np.angle(Z)) + 180.0) % 360.0) - 180.0

	fig = plt.figure()
	ax1 = fig.add_subplot(111)
	line1, = ax1.loglog(f, np.maximum(mag, 1e-12))
	ax1.set_xlabel("Frequency (Hz)")
	ax1.set_ylabel("Magnitude (Pa·s/m³)")
	ax1.grid(True, which="both", ls=":")
	ax1.set_title(title)

	ax2 = ax1.twinx()
	line2, = ax2.semilogx(f, phase, linestyle="--", color="tab:orange")
	ax2.set_ylabel("Phase (degrees)")
	ax2.set_ylim(-180, 180)
	ax2.set_yticks([-180, -90, 0, 90, 180])

	ax1.legend([line1, line2], ["Magnitude", "Phase"], loc='upper right')
	__branding(ax1)
	return _finish(fig, outfile)

def plot_polar(patterns: Sequence[PolarData], outfile: str | None = None, title: str = "Dispersion"):
	"""Polar patterns in dB re on-axis, one trace per PolarData."""
	fig = plt.figure()
	ax = fig.add_subplot(111, projection="polar")
	for p in patterns:
		mag_db = 20.0 * np.log10(np.maximum(np.asarray(p.magnitudes), 1e-4))
		ax.plot(np.asarray(p.angles), mag_db, label=f"{p.axis.value}, {p.frequency:.0f} Hz")
	ax.set_theta_zero_location("N")
	ax.set_thetalim(-0.5 * np.pi, 0.5 * np.pi)
	ax.set_rlim(-40, 0)
	ax.legend(loc="lower center", bbox_to_anchor=(0.5, -0.15))
	ax.set_title(title)
	__branding(ax)
	return _finish(fig, outfile)
