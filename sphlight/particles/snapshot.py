"""
SPH particle snapshot representation.
"""

from dataclasses import dataclass, fields, replace
from typing import Dict, List, Optional
import numpy as np

from sphlight.core.exceptions import MissingFieldError, UnsupportedGeometryError
from sphlight.core.logging_config import get_logger

logger = get_logger("particles.snapshot")

REQUIRED_FIELDS = ("h", "mass", "rho", "temperature")

_ARRAY_FIELDS = ("x", "y", "z", "h", "mass", "rho", "temperature", "opacity", "itype")


@dataclass
class ParticleSet:
    """
    Parallel per-particle arrays from one SPH dump.

    Attributes
    ----------
    x, y, z : np.ndarray
        Particle positions in cm
    h : np.ndarray, optional
        Smoothing lengths in cm
    mass : np.ndarray, optional
        Particle masses in g
    rho : np.ndarray, optional
        Densities in g/cm^3
    temperature : np.ndarray, optional
        Temperatures in K
    opacity : np.ndarray, optional
        Opacities in cm^2/g; None when the dump carries no opacity column
    itype : np.ndarray, optional
        Integer particle types; None means every particle is type 0
    ndim : int
        Spatial dimensionality of the dump
    time : float, optional
        Dump time, carried through to the lightcurve
    """

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    h: Optional[np.ndarray] = None
    mass: Optional[np.ndarray] = None
    rho: Optional[np.ndarray] = None
    temperature: Optional[np.ndarray] = None
    opacity: Optional[np.ndarray] = None
    itype: Optional[np.ndarray] = None
    ndim: int = 3
    time: Optional[float] = None

    def __post_init__(self):
        for name in _ARRAY_FIELDS:
            value = getattr(self, name)
            if value is not None:
                dtype = np.int64 if name == "itype" else np.float64
                setattr(self, name, np.atleast_1d(np.asarray(value, dtype=dtype)))

    def __len__(self) -> int:
        return len(self.x)

    @property
    def n(self) -> int:
        """Number of particles."""
        return len(self.x)

    @property
    def types(self) -> np.ndarray:
        """Particle types, defaulting to 0 for every particle."""
        if self.itype is None:
            return np.zeros(self.n, dtype=np.int64)
        return self.itype

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent."""
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    def columns(self) -> Dict[str, np.ndarray]:
        """Mapping of present column names to arrays."""
        return {
            name: getattr(self, name) for name in _ARRAY_FIELDS if getattr(self, name) is not None
        }

    def copy(self, **changes) -> "ParticleSet":
        """Return a copy with arrays duplicated and ``changes`` applied."""
        duplicated = {
            f.name: (
                getattr(self, f.name).copy()
                if isinstance(getattr(self, f.name), np.ndarray)
                else getattr(self, f.name)
            )
            for f in fields(self)
        }
        duplicated.update(changes)
        return replace(self, **duplicated)

    def apply_units(self, unit_scale: Dict[str, float]) -> "ParticleSet":
        """
        Return a copy with columns multiplied by unit factors.

        Parameters
        ----------
        unit_scale : Dict[str, float]
            Factor per column name; a ``"length"`` entry applies to
            x, y, z and h together

        Returns
        -------
        ParticleSet
        """
        changes = {}
        scale = dict(unit_scale)
        length = scale.pop("length", None)
        if length is not None:
            for name in ("x", "y", "z", "h"):
                scale.setdefault(name, length)

        for name, factor in scale.items():
            if name not in _ARRAY_FIELDS or name == "itype":
                raise ValueError(f"Cannot rescale unknown column: {name}")
            value = getattr(self, name)
            if value is not None:
                changes[name] = value * factor

        logger.debug(f"Rescaled columns: {sorted(changes)}")
        return self.copy(**changes)

    def validate(self) -> bool:
        """
        Validate the snapshot for lightcurve synthesis.

        Returns
        -------
        bool
            True if valid

        Raises
        ------
        UnsupportedGeometryError
            If the dump is not three dimensional
        MissingFieldError
            If h, mass, density or temperature is absent
        ValueError
            If array lengths disagree
        """
        if self.ndim != 3:
            raise UnsupportedGeometryError(self.ndim)

        missing = self.missing_fields()
        if missing:
            raise MissingFieldError(missing)

        n = self.n
        for name, value in self.columns().items():
            if len(value) != n:
                raise ValueError(f"Column {name} has {len(value)} entries, expected {n}")

        return True
