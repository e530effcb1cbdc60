"""
Rigid rotation of particle coordinates.
"""

from typing import Sequence, Tuple
import numpy as np

from sphlight.core.constants import DEG_TO_RAD
from sphlight.particles.snapshot import ParticleSet
from sphlight.core.logging_config import get_logger

logger = get_logger("particles.rotation")


def rotate3d(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    anglex: float,
    angley: float,
    anglez: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Rotate coordinates about the z, then y, then x axis.

    Each rotation turns the coordinate frame by the given angle, i.e. a
    point at polar angle phi in the rotation plane ends up at phi - angle.

    Parameters
    ----------
    x, y, z : np.ndarray
        Coordinates
    anglex, angley, anglez : float
        Rotation angles in radians

    Returns
    -------
    x, y, z : np.ndarray
        Rotated coordinates (new arrays)
    """
    x = np.array(x, dtype=np.float64, copy=True)
    y = np.array(y, dtype=np.float64, copy=True)
    z = np.array(z, dtype=np.float64, copy=True)

    if anglez != 0.0:
        c, s = np.cos(anglez), np.sin(anglez)
        x, y = c * x + s * y, c * y - s * x

    if angley != 0.0:
        c, s = np.cos(angley), np.sin(angley)
        x, z = c * x + s * z, c * z - s * x

    if anglex != 0.0:
        c, s = np.cos(anglex), np.sin(anglex)
        y, z = c * y + s * z, c * z - s * y

    return x, y, z


def rotate_particles(particles: ParticleSet, angles_deg: Sequence[float]) -> ParticleSet:
    """
    Return a copy of ``particles`` rotated by Euler angles in degrees.

    Parameters
    ----------
    particles : ParticleSet
        Snapshot to rotate
    angles_deg : sequence of float
        (anglex, angley, anglez) in degrees

    Returns
    -------
    ParticleSet
    """
    anglex, angley, anglez = (float(a) for a in angles_deg)
    if anglex == 0.0 and angley == 0.0 and anglez == 0.0:
        return particles

    logger.info(f"Rotating particles around (z,y,x) by {anglez:g} {angley:g} {anglex:g} degrees")
    x, y, z = rotate3d(
        particles.x,
        particles.y,
        particles.z,
        anglex * DEG_TO_RAD,
        angley * DEG_TO_RAD,
        anglez * DEG_TO_RAD,
    )
    return particles.copy(x=x, y=y, z=z)
