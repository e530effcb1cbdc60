"""
Particle selection by type and column ranges.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple
import numpy as np

from sphlight.particles.snapshot import ParticleSet
from sphlight.core.logging_config import get_logger

logger = get_logger("particles.selection")


@dataclass
class ParticleFilter:
    """
    Selects the particles used in a rendering.

    Attributes
    ----------
    types : Sequence[int], optional
        Particle types to include; None includes every type
    ranges : Dict[str, Tuple[float, float]]
        Inclusive [min, max] limits on particle columns
    """

    types: Optional[Sequence[int]] = None
    ranges: Dict[str, Tuple[float, float]] = field(default_factory=dict)

    def mask(self, particles: ParticleSet) -> np.ndarray:
        """
        Build the boolean inclusion mask.

        Parameters
        ----------
        particles : ParticleSet
            Snapshot to select from

        Returns
        -------
        np.ndarray
            Boolean mask, True for included particles
        """
        mask = np.ones(particles.n, dtype=bool)

        if self.types is not None:
            mask &= np.isin(particles.types, np.asarray(self.types))

        columns = particles.columns()
        for col, (lo, hi) in self.ranges.items():
            if col not in columns:
                logger.warning(f"Range restriction on missing column '{col}' ignored")
                continue
            values = columns[col]
            mask &= (values >= lo) & (values <= hi)

        logger.debug(f"Selected {int(mask.sum())} of {particles.n} particles")
        return mask


def get_particle_subset(
    particles: ParticleSet,
    types: Optional[Sequence[int]] = None,
    ranges: Optional[Dict[str, Tuple[float, float]]] = None,
) -> np.ndarray:
    """
    Convenience wrapper returning the mask for ``types`` and ``ranges``.

    Parameters
    ----------
    particles : ParticleSet
        Snapshot to select from
    types : Sequence[int], optional
        Particle types to include
    ranges : dict, optional
        Column limits

    Returns
    -------
    np.ndarray
        Boolean mask
    """
    return ParticleFilter(types=types, ranges=ranges or {}).mask(particles)


def default_bounds(
    particles: ParticleSet, mask: Optional[np.ndarray] = None, pad: float = 2.0
) -> Tuple[float, float, float, float]:
    """
    Projected extent of the selected particles, padded by ``pad`` smoothing lengths.

    Parameters
    ----------
    particles : ParticleSet
        Snapshot
    mask : np.ndarray, optional
        Inclusion mask
    pad : float
        Padding in units of the smoothing length (the kernel radius is 2h)

    Returns
    -------
    (xmin, xmax, ymin, ymax)
    """
    if mask is None:
        mask = np.ones(particles.n, dtype=bool)
    if not np.any(mask):
        raise ValueError("No particles selected, cannot determine image bounds")

    h = particles.h[mask] if particles.h is not None else 0.0
    x = particles.x[mask]
    y = particles.y[mask]
    return (
        float(np.min(x - pad * h)),
        float(np.max(x + pad * h)),
        float(np.min(y - pad * h)),
        float(np.max(y + pad * h)),
    )
