"""
Blackbody radiation and frequency-grid utilities.

This module provides:
- Planck spectral radiance B_nu and Wien's displacement law
- Logarithmic frequency grids and log-space quadrature
- Colour temperature from the peak of a spectrum
"""

from sphlight.radiation.blackbody import (
    B_nu,
    logspace,
    integrate_log,
    nu_to_lam,
    lam_to_nu,
    wien_nu_from_T,
    wien_T_from_nu,
    get_colour_temperature,
    ColourTemperatureFit,
)

__all__ = [
    "B_nu",
    "logspace",
    "integrate_log",
    "nu_to_lam",
    "lam_to_nu",
    "wien_nu_from_T",
    "wien_T_from_nu",
    "get_colour_temperature",
    "ColourTemperatureFit",
]
