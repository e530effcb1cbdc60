"""
Reading and writing particle snapshots as simple column tables.
"""

from pathlib import Path
from typing import Dict, Optional, Union
import numpy as np
import pandas as pd

from sphlight.particles.snapshot import ParticleSet
from sphlight.core.logging_config import get_logger

logger = get_logger("io.snapshot")

PathLike = Union[str, Path]

# Accepted column names for each ParticleSet field
COLUMN_ALIASES: Dict[str, tuple] = {
    "x": ("x",),
    "y": ("y",),
    "z": ("z",),
    "h": ("h", "hsml", "smoothing_length"),
    "mass": ("mass", "m", "pmass"),
    "rho": ("rho", "density", "dens"),
    "temperature": ("temperature", "T", "temp"),
    "opacity": ("opacity", "kappa"),
    "itype": ("itype", "type", "iphase"),
}


def _find_column(names, available) -> Optional[str]:
    lowered = {str(c).lower(): c for c in available}
    for name in names:
        if name in available:
            return name
        if name.lower() in lowered:
            return lowered[name.lower()]
    return None


def _from_columns(columns: Dict[str, np.ndarray], ndim: int, time: Optional[float], source):
    fields = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        col = _find_column(aliases, columns.keys())
        fields[field_name] = None if col is None else np.asarray(columns[col])

    for coord in ("x", "y", "z"):
        if fields[coord] is None:
            if coord == "z" and ndim < 3:
                fields["z"] = np.zeros_like(fields["x"], dtype=np.float64)
                continue
            raise ValueError(f"Snapshot {source} has no '{coord}' column")

    missing = [name for name in ("h", "mass", "rho", "temperature") if fields[name] is None]
    if missing:
        logger.warning(f"Snapshot {source} lacks columns: {', '.join(missing)}")

    return ParticleSet(ndim=ndim, time=time, **fields)


def load_snapshot(
    path: PathLike, ndim: Optional[int] = None, time: Optional[float] = None
) -> ParticleSet:
    """
    Load a particle snapshot.

    Supports CSV (pandas), ``.npz`` (numpy) and ``.h5``/``.hdf5`` (h5py)
    files whose columns/datasets are named as in ``COLUMN_ALIASES``.
    Optional ``ndim`` and ``time`` entries are read from npz/hdf5 metadata.

    Parameters
    ----------
    path : str or Path
        Snapshot file
    ndim : int, optional
        Override dimensionality (default: file metadata, else 3)
    time : float, optional
        Override dump time

    Returns
    -------
    ParticleSet
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    suffix = path.suffix.lower()
    meta: Dict[str, float] = {}

    if suffix == ".csv":
        df = pd.read_csv(path, comment="#")
        columns = {col: df[col].to_numpy() for col in df.columns}
    elif suffix == ".npz":
        with np.load(path) as data:
            columns = {key: data[key] for key in data.files}
        for key in ("ndim", "time"):
            if key in columns and np.ndim(columns[key]) == 0:
                meta[key] = columns.pop(key).item()
    elif suffix in (".h5", ".hdf5"):
        try:
            import h5py
        except ImportError as exc:
            raise ImportError(
                "h5py is required for HDF5 snapshots. Install with: pip install h5py"
            ) from exc
        with h5py.File(path, "r") as f:
            group = f["particles"] if "particles" in f else f
            columns = {key: group[key][()] for key in group.keys()}
            meta.update({key: f.attrs[key] for key in ("ndim", "time") if key in f.attrs})
    else:
        raise ValueError(f"Unsupported snapshot format: {suffix}. Use .csv, .npz or .hdf5")

    ndim = int(ndim if ndim is not None else meta.get("ndim", 3))
    time = time if time is not None else meta.get("time")

    particles = _from_columns(columns, ndim, None if time is None else float(time), path)
    logger.info(f"Loaded snapshot from {path}: {particles.n} particles")
    return particles


def save_snapshot(path: PathLike, particles: ParticleSet) -> Path:
    """
    Save a particle snapshot to CSV or ``.npz``.

    Parameters
    ----------
    path : str or Path
        Output file (.csv or .npz)
    particles : ParticleSet
        Snapshot to save

    Returns
    -------
    Path
    """
    path = Path(path)
    columns = particles.columns()
    suffix = path.suffix.lower()

    if suffix == ".csv":
        pd.DataFrame(columns).to_csv(path, index=False)
    elif suffix == ".npz":
        extra = {"ndim": np.int64(particles.ndim)}
        if particles.time is not None:
            extra["time"] = np.float64(particles.time)
        np.savez(path, **columns, **extra)
    else:
        raise ValueError(f"Unsupported snapshot format: {suffix}. Use .csv or .npz")

    logger.info(f"Saved snapshot to {path}")
    return path
