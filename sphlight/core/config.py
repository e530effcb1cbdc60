"""
Configuration management for sphlight.

Provides utilities for loading and validating YAML/JSON configuration files
and the ``LightcurveSettings`` used by the synthesis pipeline.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

import yaml

from sphlight.core.constants import (
    FREQ_MAX_DEFAULT,
    FREQ_MIN_DEFAULT,
    KAPPA_DEFAULT,
    NFREQ_DEFAULT,
)

logger = logging.getLogger(__name__)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters
    ----------
    config_path : str or Path
        Path to configuration file (.yaml, .yml, or .json)

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    FileNotFoundError
        If config file does not exist
    ValueError
        If file format is not supported
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, "r") as f:
        if suffix in [".yaml", ".yml"]:
            config = yaml.safe_load(f)
        elif suffix == ".json":
            config = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. " "Use .yaml, .yml, or .json"
            )

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValueError(f"Configuration file must contain a mapping: {config_path}")

    logger.info(f"Loaded configuration from {config_path}")
    return config


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML or JSON file.

    Parameters
    ----------
    config : dict
        Configuration dictionary
    config_path : str or Path
        Path to output file; unknown suffixes are written as YAML
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()

    if suffix == ".json":
        with open(config_path, "w") as f:
            json.dump(config, f, indent=2)
    else:
        if suffix not in [".yaml", ".yml"]:
            config_path = config_path.with_suffix(".yaml")
        with open(config_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")


def validate_lightcurve_config(config: Dict[str, Any]) -> bool:
    """
    Validate lightcurve configuration structure.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    bool
        True if valid

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    if "lightcurve" not in config:
        raise ValueError("Configuration must contain 'lightcurve' section")

    section = config["lightcurve"] or {}
    if not isinstance(section, dict):
        raise ValueError("'lightcurve' section must be a mapping")

    known = {f for f in LightcurveSettings.__dataclass_fields__}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown lightcurve settings: {sorted(unknown)}")

    if "ranges" in section and not isinstance(section["ranges"], dict):
        raise ValueError("'ranges' must be a mapping of column -> [min, max]")

    LightcurveSettings.from_dict(section).validate()
    return True


@dataclass
class LightcurveSettings:
    """
    Settings for lightcurve synthesis.

    Attributes
    ----------
    npix : int
        Number of pixels across x; values below 8 select 1024
    anglex, angley, anglez : float
        Rotation angles in degrees, applied about z, then y, then x
    verbose : int
        0 quiet, 1 normal, 2+ per-step debug output
    rescale_units : bool
        Apply ``unit_scale`` factors to snapshot columns before synthesis
    unit_scale : Dict[str, float]
        Multiplicative factor per column name (used when rescale_units is set)
    density_weighted : bool
        Use density-weighted interpolation weights m/(rho^2 h^3)
    normalise : bool
        Ask the raytrace backend for normalised interpolation
    nfreq : int
        Number of frequencies in the spectral grid
    freqmin, freqmax : float
        Frequency range in Hz
    default_opacity : float
        Opacity (cm^2/g) used when particles carry none
    types : List[int], optional
        Particle types to include (None means all)
    ranges : Dict[str, Tuple[float, float]]
        Inclusive [min, max] range per particle column
    n_workers : int, optional
        Workers for batch processing of many snapshots
    """

    npix: int = 0
    anglex: float = 0.0
    angley: float = 0.0
    anglez: float = 0.0
    verbose: int = 1
    rescale_units: bool = False
    unit_scale: Dict[str, float] = field(default_factory=dict)
    density_weighted: bool = False
    normalise: bool = False
    nfreq: int = NFREQ_DEFAULT
    freqmin: float = FREQ_MIN_DEFAULT
    freqmax: float = FREQ_MAX_DEFAULT
    default_opacity: float = KAPPA_DEFAULT
    types: Optional[List[int]] = None
    ranges: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    n_workers: Optional[int] = None

    @property
    def has_rotation(self) -> bool:
        """True when any rotation angle is nonzero."""
        return abs(self.anglex) > 0.0 or abs(self.angley) > 0.0 or abs(self.anglez) > 0.0

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> "LightcurveSettings":
        """
        Build settings from a configuration mapping.

        Parameters
        ----------
        section : dict
            The ``lightcurve`` section of a configuration

        Returns
        -------
        LightcurveSettings

        Raises
        ------
        ValueError
            If the section holds keys that are not settings
        """
        section = dict(section or {})
        unknown = set(section) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown lightcurve settings: {sorted(unknown)}")
        ranges = {
            str(col): (float(lim[0]), float(lim[1]))
            for col, lim in (section.pop("ranges", None) or {}).items()
        }
        types = section.pop("types", None)
        if types is not None:
            types = [int(t) for t in types]
        return cls(types=types, ranges=ranges, **section)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "LightcurveSettings":
        """
        Load settings from the ``lightcurve`` section of a config file.

        Parameters
        ----------
        config_path : str or Path
            Path to configuration file

        Returns
        -------
        LightcurveSettings
        """
        config = load_config(config_path)

        if "lightcurve" not in config:
            raise ValueError("Configuration must contain 'lightcurve' section")

        return cls.from_dict(config["lightcurve"])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary suitable for ``save_config``."""
        data = asdict(self)
        data["ranges"] = {col: list(lim) for col, lim in self.ranges.items()}
        return data

    def validate(self) -> bool:
        """
        Validate settings.

        Returns
        -------
        bool
            True if valid

        Raises
        ------
        ValueError
            If settings are invalid
        """
        if self.nfreq < 2:
            raise ValueError("nfreq must be >= 2")

        if self.freqmin <= 0:
            raise ValueError("freqmin must be positive")

        if self.freqmax <= self.freqmin:
            raise ValueError("freqmax must be greater than freqmin")

        if self.default_opacity < 0:
            raise ValueError("default_opacity must be non-negative")

        for col, (lo, hi) in self.ranges.items():
            if lo > hi:
                raise ValueError(f"Invalid range for {col}: [{lo}, {hi}]")

        if self.n_workers is not None and self.n_workers < 1:
            raise ValueError("n_workers must be >= 1")

        return True
