PROGRAMNAME = 'HornAcouPy'

import numpy as np
TWOPI = 2.0 * np.pi

# Physical constants (room temp)
RHO0 = 1.2041      # air density [kg/m^3]
C0   = 343.0       # speed of sound [m/s]

# Far-field SPL reference distance (meters)
FARFIELD_DIST_M = 1.0

# SPL of an ideal, 100% efficient horn driven with 1 W, measured at 1 m.
# Conventional figure used for horn sensitivity estimates, not derived.
REFERENCE_SPL_DB = 112.0

# Beamwidth rule of thumb: beamwidth[deg] = K / (dimension[in] * f[Hz]).
# Empirical constant from horn design practice (Keele).
BEAMWIDTH_K = 29000.0
MM_TO_INCH = 0.0393701
INCH_TO_MM = 25.4

# Limits applied to beamwidth [deg] and directivity index [dB]
BEAMWIDTH_MIN_DEG = 10.0
BEAMWIDTH_MAX_DEG = 180.0
DI_MAX_DB = 40.0

# Default frequency sweep of the response analysis
SWEEP_FMIN = 20.0
SWEEP_FMAX = 20000.0
SWEEP_POINTS = 100
