"""
I/O for emitted-spectrum tables.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import numpy as np

from sphlight.radiation.blackbody import nu_to_lam
from sphlight.core.logging_config import get_logger

logger = get_logger("io.spectrum")

SPEC_SUFFIX = ".spec"
SPEC_COLUMNS_HEADER = "wavelength [nm], F_\\lambda"


def default_tagline() -> str:
    """Identifies the producing tool in file headers."""
    from sphlight import __version__

    return f"sphlight v{__version__}"


def spectrum_path(specfile: Union[str, Path]) -> Path:
    """Output path ``<specfile>.spec``."""
    return Path(f"{specfile}{SPEC_SUFFIX}")


def write_spectrum_table(
    specfile: Union[str, Path],
    frequency: np.ndarray,
    spectrum: np.ndarray,
    tagline: Optional[str] = None,
) -> Path:
    """
    Write the emitted spectrum to ``<specfile>.spec``.

    Rows are (wavelength in nm, flux density) in the order of the frequency
    grid, so wavelength decreases down the file.

    Parameters
    ----------
    specfile : str or Path
        Output prefix; ``.spec`` is appended
    frequency : np.ndarray
        Frequency grid in Hz
    spectrum : np.ndarray
        Flux density on the frequency grid
    tagline : str, optional
        Producer identification for the header

    Returns
    -------
    Path
        Path of the written file
    """
    frequency = np.asarray(frequency, dtype=np.float64)
    spectrum = np.asarray(spectrum, dtype=np.float64)
    if frequency.shape != spectrum.shape:
        raise ValueError("frequency and spectrum must have the same shape")

    path = spectrum_path(specfile)
    if tagline is None:
        tagline = default_tagline()

    logger.info(f"WRITING {path}")
    header = f"model spectrum, computed with {tagline}\n{SPEC_COLUMNS_HEADER}"
    np.savetxt(
        path,
        np.column_stack([nu_to_lam(frequency), spectrum]),
        header=header,
        comments="# ",
        fmt="%.10e",
    )
    return path


def read_spectrum_table(path: Union[str, Path]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read a ``.spec`` table.

    Parameters
    ----------
    path : str or Path
        File written by ``write_spectrum_table``

    Returns
    -------
    wavelength : np.ndarray
        Wavelength in nm
    flux : np.ndarray
        Flux density
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Spectrum file not found: {path}")

    data = np.loadtxt(path, comments="#", ndmin=2)
    if data.shape[1] < 2:
        raise ValueError("Spectrum file must have at least 2 columns")

    logger.debug(f"Loaded spectrum from {path}: {len(data)} points")
    return data[:, 0], data[:, 1]
