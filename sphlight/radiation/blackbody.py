"""
Blackbody spectra on logarithmic frequency grids.
"""

from dataclasses import dataclass
from typing import Optional, Union
import numpy as np
from scipy.integrate import trapezoid

from sphlight.core.constants import C_LIGHT, CM_TO_NM, KBOLTZ, NM_TO_CM, PLANCKH, WIEN_X
from sphlight.core.logging_config import get_logger

logger = get_logger("radiation.blackbody")

ArrayLike = Union[float, np.ndarray]


def B_nu(T: ArrayLike, nu: ArrayLike) -> np.ndarray:
    """
    Planck spectral radiance.

    B_nu = (2 h nu^3 / c^2) / (exp(h nu / k T) - 1)

    Parameters
    ----------
    T : float or array
        Temperature in K
    nu : float or array
        Frequency in Hz (broadcast against T)

    Returns
    -------
    np.ndarray
        B_nu in erg s^-1 cm^-2 Hz^-1 sr^-1; zero where T <= 0 or where the
        Wien tail underflows
    """
    T = np.asarray(T, dtype=np.float64)
    nu = np.asarray(nu, dtype=np.float64)

    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        x = PLANCKH * nu / (KBOLTZ * T)
        bnu = 2.0 * PLANCKH * nu**3 / C_LIGHT**2 / np.expm1(x)

    return np.where((T > 0.0) & np.isfinite(bnu), bnu, 0.0)


def logspace(n: int, xmin: float, xmax: float) -> np.ndarray:
    """
    ``n`` logarithmically spaced values from ``xmin`` to ``xmax`` inclusive.

    Parameters
    ----------
    n : int
        Number of points (>= 2)
    xmin, xmax : float
        End points, 0 < xmin < xmax

    Returns
    -------
    np.ndarray
    """
    if n < 2:
        raise ValueError(f"logspace needs at least 2 points, got {n}")
    if xmin <= 0.0 or xmax <= xmin:
        raise ValueError(f"logspace needs 0 < xmin < xmax, got [{xmin}, {xmax}]")

    grid = np.logspace(np.log10(xmin), np.log10(xmax), n)
    # pin end points exactly
    grid[0] = xmin
    grid[-1] = xmax
    return grid


def integrate_log(
    f: np.ndarray,
    x: np.ndarray,
    xmin: Optional[float] = None,
    xmax: Optional[float] = None,
    axis: int = 0,
) -> Union[float, np.ndarray]:
    """
    Integrate f(x) dx on a logarithmic grid.

    Uses the trapezoidal rule in ln x on the integrand x f(x), since
    f dx = x f d(ln x).

    Parameters
    ----------
    f : np.ndarray
        Integrand sampled on ``x`` along ``axis``
    x : np.ndarray
        Strictly increasing positive abscissae
    xmin, xmax : float, optional
        Restrict the integral to grid points inside [xmin, xmax]
    axis : int
        Axis of ``f`` that runs along ``x``

    Returns
    -------
    float or np.ndarray
        Integral, with ``axis`` removed
    """
    f = np.asarray(f, dtype=np.float64)
    x = np.asarray(x, dtype=np.float64)

    keep = np.ones(x.shape, dtype=bool)
    if xmin is not None:
        keep &= x >= xmin
    if xmax is not None:
        keep &= x <= xmax

    f = np.compress(keep, f, axis=axis)
    x = x[keep]

    shape = [1] * f.ndim
    shape[axis] = x.size
    return trapezoid(f * x.reshape(shape), np.log(x), axis=axis)


def wien_nu_from_T(T: ArrayLike) -> ArrayLike:
    """Frequency (Hz) of the peak of B_nu at temperature T (K)."""
    return WIEN_X * KBOLTZ * np.asarray(T, dtype=np.float64) / PLANCKH


def wien_T_from_nu(nu: ArrayLike) -> ArrayLike:
    """Temperature (K) whose B_nu peaks at frequency nu (Hz)."""
    return PLANCKH * np.asarray(nu, dtype=np.float64) / (WIEN_X * KBOLTZ)


def nu_to_lam(nu: ArrayLike) -> ArrayLike:
    """Frequency in Hz to wavelength in nm."""
    return C_LIGHT / np.asarray(nu, dtype=np.float64) * CM_TO_NM


def lam_to_nu(lam_nm: ArrayLike) -> ArrayLike:
    """Wavelength in nm to frequency in Hz."""
    return C_LIGHT / (np.asarray(lam_nm, dtype=np.float64) * NM_TO_CM)


@dataclass
class ColourTemperatureFit:
    """
    Blackbody matched to the peak of a spectrum.

    Attributes
    ----------
    temperature : float
        Colour temperature in K
    freq_peak : float
        Peak frequency in Hz
    scale : float
        Amplitude such that scale * B_nu(temperature, nu) matches the peak
    """

    temperature: float
    freq_peak: float
    scale: float


def get_colour_temperature(spectrum: np.ndarray, freq: np.ndarray) -> ColourTemperatureFit:
    """
    Colour temperature from the peak of a spectrum.

    The peak is located on the grid and refined with a parabola through the
    three samples around the maximum in (ln nu, ln F_nu); Wien's law then
    gives the temperature and the amplitude follows from matching the
    blackbody to the spectrum at the peak.

    Parameters
    ----------
    spectrum : np.ndarray
        F_nu sampled on ``freq``
    freq : np.ndarray
        Increasing frequency grid in Hz

    Returns
    -------
    ColourTemperatureFit
        All zeros if the spectrum has no positive values
    """
    spectrum = np.asarray(spectrum, dtype=np.float64)
    freq = np.asarray(freq, dtype=np.float64)

    if spectrum.shape != freq.shape:
        raise ValueError("spectrum and freq must have the same shape")

    if not np.any(spectrum > 0.0):
        logger.warning("Spectrum has no positive flux, cannot fit colour temperature")
        return ColourTemperatureFit(temperature=0.0, freq_peak=0.0, scale=0.0)

    imax = int(np.argmax(spectrum))
    log_nu_peak = np.log(freq[imax])
    log_f_peak = np.log(spectrum[imax])

    if 0 < imax < len(freq) - 1 and np.all(spectrum[imax - 1 : imax + 2] > 0.0):
        xs = np.log(freq[imax - 1 : imax + 2]) - log_nu_peak
        ys = np.log(spectrum[imax - 1 : imax + 2])
        a, b, c = np.polyfit(xs, ys, 2)
        if a < 0.0:
            vertex = -b / (2.0 * a)
            if xs[0] <= vertex <= xs[2]:
                log_nu_peak += vertex
                log_f_peak = c - b**2 / (4.0 * a)

    freq_peak = float(np.exp(log_nu_peak))
    Tc = float(wien_T_from_nu(freq_peak))
    scale = float(np.exp(log_f_peak) / B_nu(Tc, freq_peak))

    return ColourTemperatureFit(temperature=Tc, freq_peak=freq_peak, scale=scale)
