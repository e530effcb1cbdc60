"""
Example usage of the lightcurve synthesis.

sphlight does not ship a raytracer; this example plugs in a toy backend that
treats every particle as an opaque disc of radius h, which is enough to see
the luminosity, effective temperature and spectrum of a cooling, expanding
ball of particles.
"""

import numpy as np

from sphlight.core.abc import ProjectionResult, RaytraceBackend
from sphlight.core.config import LightcurveSettings
from sphlight.core.logging_config import setup_logging
from sphlight.io.lightcurve import lightcurve_table
from sphlight.lightcurve import compute_lightcurve_series
from sphlight.particles import ParticleSet

# Setup logging
setup_logging(level="WARNING")


class OpaqueDiscRaytracer(RaytraceBackend):
    """Each particle is an opaque disc; the nearest particle sets the pixel."""

    def project(self, x, y, z, mass, h, weight, source, opacity, mask, grid, source_nu=None, **kwargs):
        xpix, ypix = grid.pixel_centres()
        X, Y = np.meshgrid(xpix, ypix, indexing="ij")

        flux = np.zeros(grid.shape)
        tau = np.zeros(grid.shape)
        flux_nu = np.zeros((source_nu.shape[0],) + grid.shape)
        zfront = np.full(grid.shape, -np.inf)

        for i in np.flatnonzero(mask):
            covered = (X - x[i]) ** 2 + (Y - y[i]) ** 2 <= h[i] ** 2
            front = covered & (z[i] > zfront)
            tau[covered] += opacity[i] * mass[i] / (np.pi * h[i] ** 2)
            flux[front] = source[i]
            flux_nu[:, front] = source_nu[:, i][:, np.newaxis]
            zfront[front] = z[i]

        return ProjectionResult(flux=flux, tau=tau, flux_nu=flux_nu)


def expanding_ball(time_days, n=200, seed=0):
    """Homologous expansion at 1e8 cm/s, temperature falling as 1/t."""
    rng = np.random.default_rng(seed)
    t = time_days * 86400.0
    direction = rng.normal(size=(3, n))
    direction /= np.linalg.norm(direction, axis=0)
    speed = rng.uniform(0.2, 1.0, n) * 1.0e8
    x, y, z = direction * speed * t
    radius = 1.0e8 * t
    return ParticleSet(
        x=x,
        y=y,
        z=z,
        h=np.full(n, 0.15 * radius),
        mass=np.full(n, 1.0e30),
        rho=np.full(n, 1.0e30 * n / (4.0 / 3.0 * np.pi * radius**3)),
        temperature=np.full(n, 2.0e4 / time_days),
        time=time_days,
    )


def main():
    settings = LightcurveSettings(npix=128, nfreq=64, verbose=0)
    snapshots = [expanding_ball(t) for t in (1.0, 2.0, 4.0, 8.0)]

    results = compute_lightcurve_series(snapshots, OpaqueDiscRaytracer(), settings)
    print(lightcurve_table(results).to_string(index=False))
    print(results[-1].summary_table())


if __name__ == "__main__":
    main()
