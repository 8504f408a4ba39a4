from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import cmath
import math


class ProfileType(str, Enum):
    CONICAL                = "conical"
    EXPONENTIAL            = "exponential"
    MODIFIED_EXPONENTIAL   = "modifiedExponential"
    PARABOLIC              = "parabolic"
    TRACTRIX               = "tractrix"
    HYPERBOLIC_EXPONENTIAL = "hyperbolicExponential"
    LE_CLEACH              = "leCleach"
    JMLC                   = "jmlc"
    OBLATE_SPHEROID        = "oblateSpheroid"
    SPHERICAL_WAVE         = "sphericalWave"


class Axis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL   = "vertical"


class ApertureShape(str, Enum):
    CIRCLE       = "circle"
    ELLIPSE      = "ellipse"
    RECTANGLE    = "rectangle"
    SUPERELLIPSE = "superellipse"


@dataclass(frozen=True)
class ProfilePoint:
    x: float        # distance from throat [mm]
    radius: float   # [mm]


@dataclass(frozen=True)
class ProfileParameters:
    """Horn geometry in mm. Extras only matter to the profiles that use them."""
    throat_radius: float
    mouth_radius: float
    length: float
    segments: int = 100
    cutoff_frequency: Optional[float] = None   # Hz
    t_factor: Optional[float] = None
    blend_factor: Optional[float] = None
    eccentricity: Optional[float] = None
    wave_parameter: Optional[float] = None


@dataclass(frozen=True)
class ComplexNumber:
    real: float
    imaginary: float

    @classmethod
    def from_complex(cls, z: complex) -> "ComplexNumber":
        return cls(real=float(z.real), imaginary=float(z.imag))

    def to_complex(self) -> complex:
        return complex(self.real, self.imaginary)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.real, self.imaginary)

    @property
    def phase_deg(self) -> float:
        return math.degrees(cmath.phase(self.to_complex()))


@dataclass(frozen=True)
class FrequencyPoint:
    frequency: float            # Hz
    spl: float                  # dB SPL @ 1 W / 1 m
    phase: float                # degrees, wrapped to [-180, 180)
    impedance: ComplexNumber    # acoustic, Pa·s/m^3


@dataclass(frozen=True)
class FrequencyResponseData:
    cutoff_frequency: float
    response: tuple[FrequencyPoint, ...]
    impedance_at_throat: ComplexNumber
    efficiency: float           # percent


@dataclass(frozen=True)
class GroupDelayPoint:
    frequency: float
    delay: float                # ms


@dataclass(frozen=True)
class TransmissionLinePoint:
    """One frequency of the transmission-matrix solution."""
    frequency: float                    # Hz
    transfer: ComplexNumber             # p_mouth / p_throat
    throat_impedance: ComplexNumber     # acoustic, Pa·s/m^3
    level: float                        # 20 log10 |transfer|, dB
    phase: float                        # degrees, wrapped to [-180, 180)
    group_delay: Optional[float] = None # ms, None for the first frequency


@dataclass(frozen=True)
class PolarData:
    angles: tuple[float, ...]       # radians
    magnitudes: tuple[float, ...]   # 0..1
    frequency: float
    axis: Axis


@dataclass(frozen=True)
class Coverage:
    horizontal: float   # degrees
    vertical: float     # degrees


@dataclass(frozen=True)
class DirectivityResult:
    directivity_index: float    # dB
    directivity_factor: float   # Q
    coverage: Coverage


@dataclass(frozen=True)
class DirectivitySweepPoint:
    frequency: float
    directivity_index: float
    directivity_factor: float


@dataclass(frozen=True)
class DispersionResult:
    required_width: float       # mm
    required_height: float      # mm
    horizontal_beamwidth: float # degrees, for the current mouth
    vertical_beamwidth: float
    directivity_index: float    # dB, for the current mouth


@dataclass(frozen=True)
class DispersionSweepPoint:
    frequency: float
    horizontal_beamwidth: float
    vertical_beamwidth: float
    directivity_index: float


@dataclass(frozen=True)
class CoverageArea:
    width: float    # m
    height: float   # m
    area: float     # m^2


@dataclass(frozen=True)
class MouthSize:
    mouth_width: float   # mm
    mouth_height: float  # mm


@dataclass(frozen=True)
class PolarMetrics:
    beamwidth: float            # -6 dB, degrees
    sidelobe_level: float       # dB re on-axis
    front_to_back_ratio: float  # dB


@dataclass(frozen=True)
class HornAnalysis:
    """Everything the plotting/export side needs about one horn."""
    parameters: ProfileParameters
    profile_type: ProfileType
    points: Sequence[ProfilePoint]
    frequency_response: FrequencyResponseData
    horizontal_pattern: PolarData
    vertical_pattern: PolarData
    directivity: DirectivityResult
    dispersion: DispersionResult
