"""
Input/output utilities.

This module provides:
- Emitted-spectrum tables (``.spec``)
- Particle snapshot tables (CSV, NPZ, HDF5)
- Lightcurve time-series export (CSV, JSON)
"""

from sphlight.io.spectrum import write_spectrum_table, read_spectrum_table, spectrum_path
from sphlight.io.snapshot import load_snapshot, save_snapshot
from sphlight.io.lightcurve import lightcurve_table, export_lightcurve

__all__ = [
    "write_spectrum_table",
    "read_spectrum_table",
    "spectrum_path",
    "load_snapshot",
    "save_snapshot",
    "lightcurve_table",
    "export_lightcurve",
]
