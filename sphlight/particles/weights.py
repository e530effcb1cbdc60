"""
SPH interpolation weights.
"""

from typing import Optional
import numpy as np

from sphlight.particles.snapshot import ParticleSet
from sphlight.core.logging_config import get_logger

logger = get_logger("particles.weights")


def set_interpolation_weights(
    particles: ParticleSet,
    mask: Optional[np.ndarray] = None,
    density_weighted: bool = False,
) -> np.ndarray:
    """
    Compute per-particle interpolation weights.

    The standard SPH weight is w = m / (rho h^ndim). With density-weighted
    interpolation the weight is divided by rho once more, so that the
    rendered quantity is the density-weighted average along the line of
    sight.

    Parameters
    ----------
    particles : ParticleSet
        Snapshot with h, mass and rho present
    mask : np.ndarray, optional
        Inclusion mask; excluded particles get zero weight
    density_weighted : bool
        Use m / (rho^2 h^ndim)

    Returns
    -------
    np.ndarray
        Weights, shape (n,)
    """
    h = particles.h
    mass = particles.mass
    rho = particles.rho

    weight = np.zeros(particles.n, dtype=np.float64)
    valid = (h > 0.0) & (rho > 0.0)
    if mask is not None:
        valid &= mask

    nbad = int(np.count_nonzero(~valid if mask is None else ~valid & mask))
    if nbad:
        logger.warning(f"{nbad} particles with h <= 0 or rho <= 0 given zero weight")

    weight[valid] = mass[valid] / (rho[valid] * h[valid] ** particles.ndim)
    if density_weighted:
        weight[valid] /= rho[valid]

    return weight
