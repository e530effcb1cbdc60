"""
Abstract base classes for external services.

The particle-to-pixel raytrace is not part of sphlight; any backend that
implements ``RaytraceBackend`` can be plugged into the lightcurve synthesis.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np


@dataclass(frozen=True)
class ImageGrid:
    """
    Pixel grid in the projection plane.

    Attributes
    ----------
    xmin, ymin : float
        Coordinates of the lower-left image corner
    dx, dy : float
        Pixel size in each direction
    npixx, npixy : int
        Number of pixels in each direction
    """

    xmin: float
    ymin: float
    dx: float
    dy: float
    npixx: int
    npixy: int

    def __post_init__(self):
        if self.npixx < 1 or self.npixy < 1:
            raise ValueError(f"Image must have at least one pixel, got {self.npixx}x{self.npixy}")
        if self.dx <= 0 or self.dy <= 0:
            raise ValueError(f"Pixel size must be positive, got dx={self.dx}, dy={self.dy}")

    @property
    def shape(self) -> Tuple[int, int]:
        """Image shape (npixx, npixy)."""
        return (self.npixx, self.npixy)

    @property
    def pixel_area(self) -> float:
        """Area of one pixel."""
        return self.dx * self.dy

    def pixel_centres(self) -> Tuple[np.ndarray, np.ndarray]:
        """Pixel-centre coordinates along x and y."""
        xpix = self.xmin + (np.arange(self.npixx) + 0.5) * self.dx
        ypix = self.ymin + (np.arange(self.npixy) + 0.5) * self.dy
        return xpix, ypix


@dataclass
class ProjectionResult:
    """
    Output of a raytrace.

    Attributes
    ----------
    flux : np.ndarray
        Grey image, shape (npixx, npixy)
    tau : np.ndarray
        Optical depth image, shape (npixx, npixy)
    flux_nu : np.ndarray, optional
        Frequency-resolved images, shape (nfreq, npixx, npixy)
    """

    flux: np.ndarray
    tau: np.ndarray
    flux_nu: Optional[np.ndarray] = None


class RaytraceBackend(ABC):
    """
    Abstract interface for the radiative raytrace through SPH particles.

    Implementations integrate the source function along each pixel's line of
    sight, attenuated by the particle opacities, and return the emergent
    image together with the optical depth through the whole column.
    """

    @abstractmethod
    def project(
        self,
        x: np.ndarray,
        y: np.ndarray,
        z: np.ndarray,
        mass: np.ndarray,
        h: np.ndarray,
        weight: np.ndarray,
        source: np.ndarray,
        opacity: np.ndarray,
        mask: np.ndarray,
        grid: ImageGrid,
        source_nu: Optional[np.ndarray] = None,
        zobserver: float = np.inf,
        dzobserver: float = 0.0,
        normalise: bool = False,
    ) -> ProjectionResult:
        """
        Raytrace particles onto an image.

        Parameters
        ----------
        x, y, z : np.ndarray
            Particle coordinates, shape (n,)
        mass, h, weight : np.ndarray
            Particle masses, smoothing lengths and interpolation weights
        source : np.ndarray
            Grey source function per particle, shape (n,)
        opacity : np.ndarray
            Opacity per particle (cm^2/g), shape (n,)
        mask : np.ndarray
            Boolean mask of particles to include
        grid : ImageGrid
            Output pixel grid
        source_nu : np.ndarray, optional
            Frequency-resolved source function, shape (nfreq, n), sharing the
            geometry and weights of the grey calculation
        zobserver : float
            Observer position along z; ``inf`` gives an orthographic view
        dzobserver : float
            Distance of the observer from the screen
        normalise : bool
            Whether the backend should normalise the interpolation

        Returns
        -------
        ProjectionResult
        """
        pass
