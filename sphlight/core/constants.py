"""
Physical constants for sphlight calculations.

All constants are in cgs units, the unit system of the SPH snapshots the
lightcurve tools work on.
"""

import numpy as np

# ============================================================================
# Fundamental Constants
# ============================================================================

# Boltzmann constant
KBOLTZ = 1.380649e-16  # erg/K

# Planck constant
PLANCKH = 6.62607015e-27  # erg s

# Speed of light
C_LIGHT = 2.99792458e10  # cm/s

# Electron volt
EV = 1.602176634e-12  # erg

# Particle masses
MASS_ELECTRON = 9.1093837015e-28  # g
MASS_PROTON = 1.67262192369e-24  # g

# ============================================================================
# Radiation Constants
# ============================================================================

# Stefan-Boltzmann constant
STEBOLTZ = 5.670374419e-5  # erg cm^-2 s^-1 K^-4

# Radiation density constant a = 4 sigma / c
RADCONST = 4.0 * STEBOLTZ / C_LIGHT  # erg cm^-3 K^-4

# Wien displacement in frequency: h nu_max = WIEN_X * k T
WIEN_X = 2.821439372122079

# ============================================================================
# Equation of State Constants
# ============================================================================

# k_B / m_H, hydrogen mass taken as the proton mass
KB_ON_MH = KBOLTZ / MASS_PROTON  # erg K^-1 g^-1

# Mean molecular weight of fully ionised solar-like gas
MU_DEFAULT = 0.6

# ============================================================================
# Ionisation Potentials
# ============================================================================

CHI_H0 = 13.6  # eV, H I -> H II
CHI_HE0 = 24.6  # eV, He I -> He II
CHI_HE1 = 54.4  # eV, He II -> He III

# ============================================================================
# Astronomical Constants
# ============================================================================

AU = 1.495978707e13  # cm
RSUN = 6.957e10  # cm
LSUN = 3.828e33  # erg/s

# ============================================================================
# Conversion Factors
# ============================================================================

CM_TO_NM = 1.0e7
NM_TO_CM = 1.0 / CM_TO_NM
DEG_TO_RAD = np.pi / 180.0

# ============================================================================
# Lightcurve Defaults
# ============================================================================

# Opacity used when a snapshot carries none
KAPPA_DEFAULT = 0.3  # cm^2/g

# Frequency grid for the spectral raytrace
NFREQ_DEFAULT = 128
FREQ_MIN_DEFAULT = 1.0e8  # Hz
FREQ_MAX_DEFAULT = 1.0e22  # Hz

# Pixel count used when the configured resolution is too small
NPIX_DEFAULT = 1024
NPIX_MIN = 8

# Optical depth marking the photosphere
TAU_PHOTOSPHERE = 1.0
