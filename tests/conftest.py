"""
Pytest configuration and shared fixtures for sphlight tests.

This module provides:
- A stub raytrace backend that renders particles as opaque discs
- Single-particle and small multi-particle snapshots
- Temporary configuration files
"""

import os
import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml

from sphlight.core.abc import ProjectionResult, RaytraceBackend
from sphlight.core.config import LightcurveSettings
from sphlight.particles.snapshot import ParticleSet


class DiscRaytracer(RaytraceBackend):
    """
    Renders each particle as a uniform disc of radius h.

    Covered pixels take the source function of the front-most (largest z)
    particle and accumulate ``tau_disc`` of optical depth per particle.
    """

    def __init__(self, tau_disc=10.0):
        self.tau_disc = tau_disc
        self.calls = []

    def project(
        self,
        x,
        y,
        z,
        mass,
        h,
        weight,
        source,
        opacity,
        mask,
        grid,
        source_nu=None,
        zobserver=np.inf,
        dzobserver=0.0,
        normalise=False,
    ):
        self.calls.append(
            {
                "zobserver": zobserver,
                "dzobserver": dzobserver,
                "normalise": normalise,
                "opacity": np.array(opacity),
                "weight": np.array(weight),
                "mask": np.array(mask),
                "grid": grid,
                "nfreq": None if source_nu is None else source_nu.shape[0],
            }
        )

        xpix, ypix = grid.pixel_centres()
        X, Y = np.meshgrid(xpix, ypix, indexing="ij")

        flux = np.zeros(grid.shape)
        tau = np.zeros(grid.shape)
        zfront = np.full(grid.shape, -np.inf)
        flux_nu = None
        if source_nu is not None:
            flux_nu = np.zeros((source_nu.shape[0],) + grid.shape)

        for i in np.flatnonzero(mask):
            covered = (X - x[i]) ** 2 + (Y - y[i]) ** 2 <= h[i] ** 2
            front = covered & (z[i] > zfront)
            tau[covered] += self.tau_disc
            flux[front] = source[i]
            if flux_nu is not None:
                flux_nu[:, front] = source_nu[:, i][:, np.newaxis]
            zfront[front] = z[i]

        return ProjectionResult(flux=flux, tau=tau, flux_nu=flux_nu)


class TransparentRaytracer(DiscRaytracer):
    """Discs with no optical depth."""

    def __init__(self):
        super().__init__(tau_disc=0.0)


class ExhaustedRaytracer(RaytraceBackend):
    """Fails to allocate its image buffers."""

    def project(self, *args, **kwargs):
        raise MemoryError("image buffer")


class WrongShapeRaytracer(RaytraceBackend):
    """Returns images that do not match the requested grid."""

    def project(self, x, y, z, mass, h, weight, source, opacity, mask, grid, **kwargs):
        return ProjectionResult(
            flux=np.zeros((2, 2)), tau=np.zeros((2, 2)), flux_nu=np.zeros((3, 2, 2))
        )


@pytest.fixture
def disc_raytracer():
    """Opaque-disc raytrace backend."""
    return DiscRaytracer()


@pytest.fixture
def single_particle():
    """One hot particle at the origin with h = 1e13 cm and T = 1e4 K."""
    return ParticleSet(
        x=np.array([0.0]),
        y=np.array([0.0]),
        z=np.array([0.0]),
        h=np.array([1.0e13]),
        mass=np.array([1.0e30]),
        rho=np.array([1.0e-9]),
        temperature=np.array([1.0e4]),
        time=1.5,
    )


@pytest.fixture
def particle_cloud():
    """Small random cloud of particles of two types."""
    rng = np.random.default_rng(42)
    n = 50
    return ParticleSet(
        x=rng.normal(0.0, 1.0e13, n),
        y=rng.normal(0.0, 1.0e13, n),
        z=rng.normal(0.0, 1.0e13, n),
        h=np.full(n, 3.0e12),
        mass=np.full(n, 1.0e28),
        rho=rng.uniform(1.0e-10, 1.0e-9, n),
        temperature=rng.uniform(5.0e3, 2.0e4, n),
        itype=np.where(np.arange(n) < 40, 1, 2),
        time=0.0,
    )


@pytest.fixture
def fast_settings():
    """Coarse settings that keep the synthesis quick."""
    return LightcurveSettings(npix=64, nfreq=128, verbose=0)


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        "lightcurve": {
            "npix": 64,
            "anglex": 0.0,
            "angley": 0.0,
            "anglez": 30.0,
            "verbose": 1,
            "nfreq": 64,
            "freqmin": 1.0e10,
            "freqmax": 1.0e18,
            "types": [1],
            "ranges": {"rho": [1.0e-12, 1.0e-6]},
        },
        "raytrace": {"backend": "disc"},
    }


@pytest.fixture
def temp_config_file(sample_config_dict):
    """Create a temporary YAML configuration file."""
    config_fd, config_path = tempfile.mkstemp(suffix=".yaml")
    os.close(config_fd)

    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)

    yield Path(config_path)

    Path(config_path).unlink(missing_ok=True)


@pytest.fixture
def transparent_raytracer():
    """Raytrace backend producing no optically thick pixels."""
    return TransparentRaytracer()


@pytest.fixture
def exhausted_raytracer():
    """Raytrace backend that runs out of memory."""
    return ExhaustedRaytracer()


@pytest.fixture
def wrong_shape_raytracer():
    """Raytrace backend returning mis-shaped images."""
    return WrongShapeRaytracer()


@pytest.fixture
def registered_disc_backend():
    """Register the disc raytracer with the backend factory as 'disc'."""
    from sphlight.core.factory import RaytraceBackendFactory

    RaytraceBackendFactory.register("disc", DiscRaytracer)
    yield "disc"
    RaytraceBackendFactory._backends.pop("disc", None)
