"""
Synthetic lightcurve from SPH particle data.

We solve the equation of radiative transfer along a ray for each pixel of an
image, raytracing through the particles with each particle emitting as a
blackbody, both grey (sigma T^4) and on a logarithmic frequency grid
(B_nu(T)). From the images we get the luminosity, the emitting area (area of
optically thick pixels), the effective temperature and photospheric radius,
and from the image-integrated spectrum a colour temperature and the
equivalent blackbody luminosity and radius.
"""

from typing import Optional, Tuple, Union
from pathlib import Path
import numpy as np

from sphlight.core.abc import ImageGrid, ProjectionResult, RaytraceBackend
from sphlight.core.config import LightcurveSettings
from sphlight.core.constants import (
    AU,
    LSUN,
    NPIX_DEFAULT,
    NPIX_MIN,
    RSUN,
    STEBOLTZ,
    TAU_PHOTOSPHERE,
)
from sphlight.core.exceptions import (
    AllocationError,
    LightcurveError,
    MissingFieldError,
    NoParticlesError,
    UnsupportedGeometryError,
)
from sphlight.core.logging_config import get_logger
from sphlight.io.spectrum import write_spectrum_table
from sphlight.lightcurve.result import LightcurveResult, LightcurveStatus
from sphlight.particles.rotation import rotate_particles
from sphlight.particles.selection import ParticleFilter, default_bounds
from sphlight.particles.snapshot import ParticleSet
from sphlight.particles.weights import set_interpolation_weights
from sphlight.radiation.blackbody import (
    B_nu,
    get_colour_temperature,
    integrate_log,
    logspace,
    nu_to_lam,
    wien_nu_from_T,
)

logger = get_logger("lightcurve.synthesis")

Bounds = Tuple[float, float, float, float]


def pixel_grid(npix: int, bounds: Bounds) -> ImageGrid:
    """
    Pixel grid covering ``bounds`` with approximately square pixels.

    Parameters
    ----------
    npix : int
        Requested pixels across x; values below 8 select 1024
    bounds : (xmin, xmax, ymin, ymax)
        Image extent

    Returns
    -------
    ImageGrid
    """
    xmin, xmax, ymin, ymax = (float(b) for b in bounds)
    if xmax <= xmin or ymax <= ymin:
        raise ValueError(f"Invalid image bounds: x=[{xmin}, {xmax}], y=[{ymin}, {ymax}]")

    npixx = int(npix)
    if npixx < NPIX_MIN:
        npixx = NPIX_DEFAULT
    dx = (xmax - xmin) / npixx
    npixy = int((ymax - ymin - 0.5 * dx) / dx) + 1
    dy = (ymax - ymin) / npixy

    return ImageGrid(xmin=xmin, ymin=ymin, dx=dx, dy=dy, npixx=npixx, npixy=npixy)


class LightcurveSynthesizer:
    """
    Computes luminosity, effective temperature and spectrum of a snapshot.

    The raytrace itself is delegated to a ``RaytraceBackend``; this class
    prepares the particle data and source functions and reduces the images.
    """

    def __init__(
        self,
        raytracer: RaytraceBackend,
        settings: Optional[LightcurveSettings] = None,
        tagline: Optional[str] = None,
    ):
        """
        Initialize synthesizer.

        Parameters
        ----------
        raytracer : RaytraceBackend
            Backend performing the particle-to-pixel projection
        settings : LightcurveSettings, optional
            Resolution, rotation, selection and frequency-grid settings
        tagline : str, optional
            Producer identification written to spectrum files
        """
        self.raytracer = raytracer
        self.settings = settings if settings is not None else LightcurveSettings()
        self.settings.validate()
        self.tagline = tagline
        self._report = logger.info if self.settings.verbose >= 1 else logger.debug

    def frequency_grid(self) -> np.ndarray:
        """Logarithmic frequency grid in Hz."""
        s = self.settings
        return logspace(s.nfreq, s.freqmin, s.freqmax)

    def prepare_particles(self, particles: ParticleSet) -> Tuple[ParticleSet, np.ndarray]:
        """
        Validate, rescale, select and rotate the particles.

        Parameters
        ----------
        particles : ParticleSet
            Snapshot

        Returns
        -------
        particles : ParticleSet
            Possibly rescaled and rotated copy
        mask : np.ndarray
            Boolean inclusion mask

        Raises
        ------
        UnsupportedGeometryError
            If the snapshot is not three dimensional
        MissingFieldError
            If h, mass, rho or temperature is missing
        NoParticlesError
            If no particle is selected
        """
        particles.validate()
        s = self.settings

        if s.rescale_units and s.unit_scale:
            particles = particles.apply_units(s.unit_scale)

        mask = ParticleFilter(types=s.types, ranges=s.ranges).mask(particles)
        if not np.any(mask):
            raise NoParticlesError("no particles selected for the lightcurve")

        if s.has_rotation:
            particles = rotate_particles(particles, (s.anglex, s.angley, s.anglez))

        return particles, mask

    def project(
        self, particles: ParticleSet, mask: np.ndarray, grid: ImageGrid, freq: np.ndarray
    ) -> ProjectionResult:
        """
        Set up source functions and opacities and raytrace to images.

        Parameters
        ----------
        particles : ParticleSet
            Prepared particles
        mask : np.ndarray
            Inclusion mask
        grid : ImageGrid
            Pixel grid
        freq : np.ndarray
            Frequency grid

        Returns
        -------
        ProjectionResult
        """
        s = self.settings
        try:
            weight = set_interpolation_weights(particles, mask, density_weighted=s.density_weighted)

            if particles.opacity is not None:
                opacity = particles.opacity
            else:
                logger.warning(
                    f"using fixed opacity kappa = {s.default_opacity:g} cm^2/g for lightcurve"
                )
                opacity = np.full(particles.n, s.default_opacity)

            # grey and frequency-dependent source functions
            source = STEBOLTZ * particles.temperature**4
            source_nu = B_nu(particles.temperature[np.newaxis, :], freq[:, np.newaxis])

            # orthographic view: observer at infinity
            result = self.raytracer.project(
                particles.x,
                particles.y,
                particles.z,
                particles.mass,
                particles.h,
                weight,
                source,
                opacity,
                mask,
                grid,
                source_nu=source_nu,
                zobserver=np.inf,
                dzobserver=0.0,
                normalise=s.normalise,
            )
        except MemoryError as exc:
            raise AllocationError(
                f"could not allocate buffers for {particles.n} particles on a "
                f"{grid.npixx} x {grid.npixy} x {len(freq)} image"
            ) from exc

        self._check_projection(result, grid, len(freq))
        return result

    @staticmethod
    def _check_projection(result: ProjectionResult, grid: ImageGrid, nfreq: int) -> None:
        if np.shape(result.flux) != grid.shape or np.shape(result.tau) != grid.shape:
            raise ValueError(
                f"Raytrace returned images of shape {np.shape(result.flux)}, "
                f"expected {grid.shape}"
            )
        if result.flux_nu is None or np.shape(result.flux_nu) != (nfreq,) + grid.shape:
            raise ValueError(
                f"Raytrace returned spectral cube of shape {np.shape(result.flux_nu)}, "
                f"expected {(nfreq,) + grid.shape}"
            )

    def compute(
        self,
        particles: ParticleSet,
        bounds: Optional[Bounds] = None,
        specfile: Optional[Union[str, Path]] = None,
    ) -> LightcurveResult:
        """
        Compute the lightcurve point for one snapshot.

        Parameters
        ----------
        particles : ParticleSet
            Snapshot
        bounds : (xmin, xmax, ymin, ymax), optional
            Image extent; defaults to the particle extent padded by 2h
        specfile : str or Path, optional
            If given, the spectrum is written to ``<specfile>.spec``

        Returns
        -------
        LightcurveResult

        Raises
        ------
        LightcurveError
            If the snapshot cannot be processed (see subclasses)
        """
        particles, mask = self.prepare_particles(particles)

        if bounds is None:
            bounds = default_bounds(particles, mask)
        grid = pixel_grid(self.settings.npix, bounds)
        pixel_area = grid.pixel_area

        self._report(f"Using {grid.npixx} x {grid.npixy} pixels")
        self._report(
            f"x = [{bounds[0]:10.3e} -> {bounds[1]:10.3e}], "
            f"y = [{bounds[2]:10.3e} -> {bounds[3]:10.3e}]"
        )

        freq = self.frequency_grid()
        images = self.project(particles, mask, grid, freq)

        lum_grey = 4.0 * np.sum(images.flux) * pixel_area
        self._report(f"grey luminosity = {lum_grey:.6e} erg/s")

        # integrate over frequency: F = int F_nu dnu = pi int B_nu dnu
        img = np.pi * integrate_log(
            images.flux_nu, freq, self.settings.freqmin, self.settings.freqmax, axis=0
        )
        lum = 4.0 * np.sum(img) * pixel_area
        self._report(f"L_bol = {lum:10.3e} erg/s = {lum / LSUN:10.3e} L_sun")

        area = np.count_nonzero(images.tau >= TAU_PHOTOSPHERE) * pixel_area
        self._report(f"emitting area = {area / AU**2:10.3g} au^2")

        t_max = (max(float(np.max(img)), 0.0) / STEBOLTZ) ** 0.25
        self._report(f"Tmax  = {t_max:10.3g} K")

        status = LightcurveStatus.OK
        message = ""
        if area > 0.0:
            temp = (lum / area / (4.0 * STEBOLTZ)) ** 0.25
        else:
            temp = 0.0
            status = LightcurveStatus.NO_EMITTING_AREA
            message = "no optically thick pixels, effective temperature undefined"
            logger.warning(message)

        freq_peak_eff = float(wien_nu_from_T(temp))
        if temp > 0.0:
            self._report(
                f"Teff  = {temp:10.3g} K: Blackbody peak at {freq_peak_eff:10.3g} Hz / "
                f"{float(nu_to_lam(freq_peak_eff)):10.3g} nm"
            )

        # integrated spectrum over all pixels in the image
        spectrum = np.sum(images.flux_nu, axis=(1, 2)) * pixel_area

        fit = get_colour_temperature(spectrum, freq)
        if fit.temperature > 0.0:
            self._report(
                f"Tc    = {fit.temperature:10.3g} K: Blackbody peak at {fit.freq_peak:10.3g} Hz / "
                f"{float(nu_to_lam(fit.freq_peak)):10.3g} nm"
            )

        rphoto = np.sqrt(lum / (4.0 * np.pi * STEBOLTZ * temp**4)) if temp > 0.0 else 0.0
        self._report(f"R_eff = {rphoto / AU:10.3e} au = {rphoto / RSUN:10.3e} rsun")

        bb_spectrum = B_nu(fit.temperature, freq) * fit.scale
        lum_bb = 4.0 * np.pi * integrate_log(
            bb_spectrum, freq, self.settings.freqmin, self.settings.freqmax
        )
        if fit.temperature > 0.0:
            r_bb = np.sqrt(lum_bb / (4.0 * np.pi * STEBOLTZ * fit.temperature**4))
        else:
            r_bb = 0.0
        self._report(f"L_bb  = {lum_bb:10.3e} erg/s")
        self._report(f"R_bb  = {r_bb / AU:10.3e} au = {r_bb / RSUN:10.3e} rsun")

        if specfile is not None:
            write_spectrum_table(specfile, freq, spectrum, tagline=self.tagline)

        return LightcurveResult(
            luminosity=float(lum),
            luminosity_grey=float(lum_grey),
            area=float(area),
            temperature=float(temp),
            rphoto=float(rphoto),
            colour_temperature=fit.temperature,
            lum_bb=float(lum_bb),
            r_bb=float(r_bb),
            bb_scale=fit.scale,
            t_max=float(t_max),
            freq_peak_eff=freq_peak_eff,
            freq_peak_colour=fit.freq_peak,
            frequency=freq,
            spectrum=spectrum,
            npixx=grid.npixx,
            npixy=grid.npixy,
            time=particles.time,
            status=status,
            message=message,
        )


_STATUS_FOR_ERROR = (
    (UnsupportedGeometryError, LightcurveStatus.UNSUPPORTED_GEOMETRY),
    (MissingFieldError, LightcurveStatus.MISSING_FIELD),
    (AllocationError, LightcurveStatus.ALLOCATION_ERROR),
    (NoParticlesError, LightcurveStatus.NO_PARTICLES),
)


def status_for_error(exc: LightcurveError) -> LightcurveStatus:
    """Map a lightcurve error to the status recorded in a failed result."""
    for error_class, status in _STATUS_FOR_ERROR:
        if isinstance(exc, error_class):
            return status
    return LightcurveStatus.ERROR


def get_lightcurve(
    particles: ParticleSet,
    raytracer: RaytraceBackend,
    settings: Optional[LightcurveSettings] = None,
    bounds: Optional[Bounds] = None,
    specfile: Optional[Union[str, Path]] = None,
    raise_on_error: bool = False,
) -> LightcurveResult:
    """
    Compute luminosity, effective temperature and radius for a snapshot.

    Lightcurve errors are logged and returned as a zero-valued result with
    the matching status, so that a caller looping over dumps can continue.

    Parameters
    ----------
    particles : ParticleSet
        Snapshot
    raytracer : RaytraceBackend
        Projection backend
    settings : LightcurveSettings, optional
        Synthesis settings
    bounds : (xmin, xmax, ymin, ymax), optional
        Image extent
    specfile : str or Path, optional
        Prefix for the ``.spec`` output
    raise_on_error : bool
        Re-raise lightcurve errors instead of returning a failed result

    Returns
    -------
    LightcurveResult
    """
    synthesizer = LightcurveSynthesizer(raytracer, settings)
    try:
        return synthesizer.compute(particles, bounds=bounds, specfile=specfile)
    except LightcurveError as exc:
        if raise_on_error:
            raise
        logger.error(f"ERROR: {exc}")
        return LightcurveResult.failed(status_for_error(exc), str(exc), time=particles.time)
