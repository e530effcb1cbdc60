"""
sphlight: synthetic lightcurves from SPH particle data

A Python library for turning smoothed particle hydrodynamics snapshots into
bolometric lightcurves and emitted spectra, together with the equation of
state and ionisation solvers used alongside it in the analysis pipeline.
"""

__version__ = "0.1.0"
__author__ = "sphlight developers"

# Core imports for convenience
from sphlight.core import constants

__all__ = [
    "constants",
]
