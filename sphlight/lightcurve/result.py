"""
Lightcurve result container.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
import numpy as np

from sphlight.core.constants import AU, LSUN, RSUN
from sphlight.radiation.blackbody import nu_to_lam

# Table formatting constants
TABLE_WIDTH = 60
TABLE_SEP = "-" * TABLE_WIDTH
TABLE_HEADER = "=" * TABLE_WIDTH


class LightcurveStatus(Enum):
    """Outcome of a lightcurve synthesis."""

    OK = "ok"
    UNSUPPORTED_GEOMETRY = "unsupported_geometry"
    MISSING_FIELD = "missing_field"
    ALLOCATION_ERROR = "allocation_error"
    NO_PARTICLES = "no_particles"
    NO_EMITTING_AREA = "no_emitting_area"
    ERROR = "error"


@dataclass
class LightcurveResult:
    """
    Bolometric and spectral properties of one snapshot.

    Attributes
    ----------
    luminosity : float
        Bolometric luminosity from the frequency-integrated image (erg/s)
    luminosity_grey : float
        Luminosity from the grey (sigma T^4) image (erg/s)
    area : float
        Projected area of optically thick pixels (cm^2)
    temperature : float
        Effective temperature (K)
    rphoto : float
        Effective photospheric radius from L and Teff (cm)
    colour_temperature : float
        Blackbody temperature matching the spectral peak (K)
    lum_bb : float
        Luminosity of the fitted blackbody (erg/s)
    r_bb : float
        Radius of the fitted blackbody (cm)
    bb_scale : float
        Amplitude of the fitted blackbody
    t_max : float
        Brightness temperature of the brightest pixel (K)
    freq_peak_eff : float
        Wien peak frequency for Teff (Hz)
    freq_peak_colour : float
        Peak frequency of the spectrum (Hz)
    frequency : np.ndarray
        Frequency grid (Hz)
    spectrum : np.ndarray
        Image-integrated F_nu on the frequency grid
    npixx, npixy : int
        Image resolution used
    time : float, optional
        Dump time
    status : LightcurveStatus
        Outcome of the synthesis
    message : str
        Diagnostic for failed or degraded results
    """

    luminosity: float = 0.0
    luminosity_grey: float = 0.0
    area: float = 0.0
    temperature: float = 0.0
    rphoto: float = 0.0
    colour_temperature: float = 0.0
    lum_bb: float = 0.0
    r_bb: float = 0.0
    bb_scale: float = 0.0
    t_max: float = 0.0
    freq_peak_eff: float = 0.0
    freq_peak_colour: float = 0.0
    frequency: np.ndarray = field(default_factory=lambda: np.zeros(0))
    spectrum: np.ndarray = field(default_factory=lambda: np.zeros(0))
    npixx: int = 0
    npixy: int = 0
    time: Optional[float] = None
    status: LightcurveStatus = LightcurveStatus.OK
    message: str = ""

    @classmethod
    def failed(
        cls, status: LightcurveStatus, message: str, time: Optional[float] = None
    ) -> "LightcurveResult":
        """Zero-valued result for a snapshot that could not be processed."""
        return cls(status=status, message=message, time=time)

    @property
    def ok(self) -> bool:
        """True for a fully successful synthesis."""
        return self.status == LightcurveStatus.OK

    @property
    def wavelength_nm(self) -> np.ndarray:
        """Wavelength grid in nm, in frequency-grid order."""
        if self.frequency.size == 0:
            return np.zeros(0)
        return nu_to_lam(self.frequency)

    def to_dict(self, include_spectrum: bool = False) -> Dict[str, Any]:
        """
        Convert to a dictionary of scalars.

        Parameters
        ----------
        include_spectrum : bool
            Also include frequency and spectrum as lists

        Returns
        -------
        dict
        """
        data = {
            "time": self.time,
            "luminosity": self.luminosity,
            "luminosity_grey": self.luminosity_grey,
            "area": self.area,
            "temperature": self.temperature,
            "rphoto": self.rphoto,
            "colour_temperature": self.colour_temperature,
            "lum_bb": self.lum_bb,
            "r_bb": self.r_bb,
            "bb_scale": self.bb_scale,
            "t_max": self.t_max,
            "freq_peak_eff": self.freq_peak_eff,
            "freq_peak_colour": self.freq_peak_colour,
            "npixx": self.npixx,
            "npixy": self.npixy,
            "status": self.status.value,
            "message": self.message,
        }
        if include_spectrum:
            data["frequency"] = self.frequency.tolist()
            data["spectrum"] = self.spectrum.tolist()
        return data

    def summary_table(self) -> str:
        """
        Human-readable summary.

        Returns
        -------
        str
            Formatted table
        """
        lines = [TABLE_HEADER, "Lightcurve Summary", TABLE_HEADER]
        if self.time is not None:
            lines.append(f"{'time':<10} {self.time:>12.4e}")
        lines.append(f"{'status':<10} {self.status.value:>12}")
        if self.message:
            lines.append(f"  {self.message}")
        lines.append(TABLE_SEP)
        lines.append(
            f"{'L_bol':<10} {self.luminosity:>12.4e} erg/s  {self.luminosity / LSUN:>10.3e} L_sun"
        )
        lines.append(f"{'L_grey':<10} {self.luminosity_grey:>12.4e} erg/s")
        lines.append(f"{'area':<10} {self.area / AU**2:>12.4e} au^2")
        lines.append(f"{'T_eff':<10} {self.temperature:>12.4e} K")
        lines.append(f"{'T_c':<10} {self.colour_temperature:>12.4e} K")
        lines.append(
            f"{'R_eff':<10} {self.rphoto / AU:>12.4e} au     {self.rphoto / RSUN:>10.3e} R_sun"
        )
        lines.append(f"{'L_bb':<10} {self.lum_bb:>12.4e} erg/s")
        lines.append(f"{'R_bb':<10} {self.r_bb / AU:>12.4e} au     {self.r_bb / RSUN:>10.3e} R_sun")
        lines.append(TABLE_HEADER)
        return "\n".join(lines)
