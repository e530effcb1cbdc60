"""
Core utilities.

This module provides:
- Physical constants (cgs)
- Configuration and logging
- Exception hierarchy
- Abstract interfaces for external services (raytracing)
- Backend factory
"""

from sphlight.core import constants
from sphlight.core import config
from sphlight.core import logging_config
from sphlight.core.exceptions import (
    SphlightError,
    LightcurveError,
    UnsupportedGeometryError,
    MissingFieldError,
    AllocationError,
    NoParticlesError,
    SolverNonConvergenceError,
    SingularMatrixError,
)
from sphlight.core.abc import ImageGrid, ProjectionResult, RaytraceBackend
from sphlight.core.factory import RaytraceBackendFactory

__all__ = [
    # Modules
    "constants",
    "config",
    "logging_config",
    # Errors
    "SphlightError",
    "LightcurveError",
    "UnsupportedGeometryError",
    "MissingFieldError",
    "AllocationError",
    "NoParticlesError",
    "SolverNonConvergenceError",
    "SingularMatrixError",
    # Interfaces
    "ImageGrid",
    "ProjectionResult",
    "RaytraceBackend",
    "RaytraceBackendFactory",
]
