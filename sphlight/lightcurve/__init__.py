"""
Lightcurve synthesis from SPH snapshots.
"""

from sphlight.lightcurve.result import LightcurveResult, LightcurveStatus
from sphlight.lightcurve.synthesis import (
    LightcurveSynthesizer,
    get_lightcurve,
    pixel_grid,
    status_for_error,
)
from sphlight.lightcurve.batch import compute_lightcurve_series

__all__ = [
    "LightcurveResult",
    "LightcurveStatus",
    "LightcurveSynthesizer",
    "get_lightcurve",
    "pixel_grid",
    "status_for_error",
    "compute_lightcurve_series",
]
