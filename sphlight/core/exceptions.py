"""
Exception hierarchy for sphlight.

Lightcurve errors are scoped to a single snapshot: callers processing a batch
catch ``LightcurveError`` and move on to the next dump.
"""

from typing import Iterable, Optional


class SphlightError(Exception):
    """Base class for all sphlight errors."""


class LightcurveError(SphlightError):
    """A lightcurve could not be computed for this snapshot."""


class UnsupportedGeometryError(LightcurveError):
    """Snapshot dimensionality is not 3."""

    def __init__(self, ndim: int):
        self.ndim = ndim
        super().__init__(f"lightcurve only works with 3 dimensional data (got ndim={ndim})")


class MissingFieldError(LightcurveError):
    """A required per-particle column is absent."""

    def __init__(self, fields: Iterable[str]):
        self.fields = tuple(fields)
        super().__init__(
            "could not locate required particle data: " + ", ".join(self.fields)
        )


class AllocationError(LightcurveError):
    """Image or weight buffers could not be allocated."""


class NoParticlesError(LightcurveError):
    """No particles survive the selection."""


class SolverNonConvergenceError(SphlightError):
    """An iterative solver hit its iteration cap without converging."""

    def __init__(self, message: str, iterations: Optional[int] = None):
        self.iterations = iterations
        super().__init__(message)


class SingularMatrixError(SphlightError):
    """A Jacobian could not be inverted (determinant numerically zero)."""
