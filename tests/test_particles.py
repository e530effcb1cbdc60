"""
Tests for particle data, selection, rotation and interpolation weights.
"""

import logging

import numpy as np
import pytest

from sphlight.core.exceptions import MissingFieldError, UnsupportedGeometryError
from sphlight.particles import (
    ParticleFilter,
    ParticleSet,
    default_bounds,
    get_particle_subset,
    rotate3d,
    rotate_particles,
    set_interpolation_weights,
)


def test_particle_set_converts_arrays():
    """Lists are converted to float arrays, types to integers."""
    p = ParticleSet(x=[0, 1], y=[0, 1], z=[0, 1], h=[1, 1], itype=[1, 2])
    assert p.x.dtype == np.float64
    assert p.itype.dtype == np.int64
    assert p.n == 2
    assert len(p) == 2


def test_default_types(single_particle):
    """Particles without a type column are all type 0."""
    np.testing.assert_array_equal(single_particle.types, [0])


def test_validate_ok(single_particle):
    """A complete 3D snapshot validates."""
    assert single_particle.validate()


def test_validate_geometry(single_particle):
    """Non-3D snapshots are rejected."""
    p = single_particle.copy(ndim=2)
    with pytest.raises(UnsupportedGeometryError) as excinfo:
        p.validate()
    assert excinfo.value.ndim == 2


def test_validate_missing_fields(single_particle):
    """Missing required columns are listed in the error."""
    p = single_particle.copy(rho=None, temperature=None)
    assert p.missing_fields() == ["rho", "temperature"]
    with pytest.raises(MissingFieldError) as excinfo:
        p.validate()
    assert excinfo.value.fields == ("rho", "temperature")


def test_validate_length_mismatch(single_particle):
    """Columns of different length are rejected."""
    p = single_particle.copy(mass=np.array([1.0, 2.0]))
    with pytest.raises(ValueError, match="mass"):
        p.validate()


def test_copy_is_independent(single_particle):
    """Copies do not share arrays."""
    p = single_particle.copy()
    p.x[0] = 5.0
    assert single_particle.x[0] == 0.0


def test_apply_units(single_particle):
    """Length scale applies to coordinates and smoothing length."""
    p = single_particle.apply_units({"length": 2.0, "rho": 10.0})
    assert p.h[0] == pytest.approx(2.0e13)
    assert p.rho[0] == pytest.approx(1.0e-8)
    assert p.temperature[0] == single_particle.temperature[0]
    assert single_particle.h[0] == pytest.approx(1.0e13)


def test_apply_units_unknown_column(single_particle):
    """Unknown columns cannot be rescaled."""
    with pytest.raises(ValueError, match="unknown column"):
        single_particle.apply_units({"entropy": 2.0})


def test_filter_by_type(particle_cloud):
    """Type selection keeps only listed types."""
    mask = ParticleFilter(types=[2]).mask(particle_cloud)
    assert mask.sum() == 10
    assert np.all(particle_cloud.itype[mask] == 2)


def test_filter_by_range(particle_cloud):
    """Column ranges are inclusive."""
    lo, hi = 8.0e3, 1.5e4
    mask = get_particle_subset(particle_cloud, ranges={"temperature": (lo, hi)})
    t = particle_cloud.temperature
    np.testing.assert_array_equal(mask, (t >= lo) & (t <= hi))


def test_filter_missing_column_ignored(particle_cloud, caplog):
    """A range on a column that is absent is ignored with a warning."""
    with caplog.at_level(logging.WARNING, logger="sphlight.particles.selection"):
        mask = ParticleFilter(ranges={"opacity": (0.0, 1.0)}).mask(particle_cloud)
    assert mask.all()
    assert "opacity" in caplog.text


def test_default_bounds(single_particle):
    """Bounds are the particle extent padded by 2h."""
    assert default_bounds(single_particle) == pytest.approx((-2.0e13, 2.0e13, -2.0e13, 2.0e13))


def test_default_bounds_empty(single_particle):
    """Bounds of an empty selection are undefined."""
    with pytest.raises(ValueError):
        default_bounds(single_particle, mask=np.array([False]))


def test_rotate3d_about_z():
    """Rotation by 90 degrees about z turns the frame, x -> -y."""
    x, y, z = rotate3d(np.array([1.0]), np.array([0.0]), np.array([0.0]), 0.0, 0.0, np.pi / 2)
    np.testing.assert_allclose([x[0], y[0], z[0]], [0.0, -1.0, 0.0], atol=1.0e-15)


def test_rotate3d_preserves_length():
    """Rotations preserve distances from the origin."""
    rng = np.random.default_rng(1)
    x, y, z = rng.normal(size=(3, 20))
    xr, yr, zr = rotate3d(x, y, z, 0.3, -1.1, 2.0)
    np.testing.assert_allclose(xr**2 + yr**2 + zr**2, x**2 + y**2 + z**2)


def test_rotate3d_order():
    """z rotation is applied before the x rotation."""
    x, y, z = rotate3d(np.array([1.0]), np.array([0.0]), np.array([0.0]), np.pi / 2, 0.0, np.pi / 2)
    # z turns x -> -y, then x turns -y -> +z
    np.testing.assert_allclose([x[0], y[0], z[0]], [0.0, 0.0, 1.0], atol=1.0e-15)


def test_rotate_particles(single_particle):
    """Rotating particles returns a new set; zero angles are a no-op."""
    p = single_particle.copy(x=np.array([1.0e13]))
    rotated = rotate_particles(p, (0.0, 0.0, 90.0))
    assert rotated is not p
    assert rotated.y[0] == pytest.approx(-1.0e13)
    assert p.x[0] == 1.0e13

    assert rotate_particles(p, (0.0, 0.0, 0.0)) is p


def test_interpolation_weights(particle_cloud):
    """w = m / (rho h^3) for selected particles, 0 otherwise."""
    mask = particle_cloud.types == 1
    w = set_interpolation_weights(particle_cloud, mask)
    expected = particle_cloud.mass / (particle_cloud.rho * particle_cloud.h**3)
    np.testing.assert_allclose(w[mask], expected[mask])
    assert np.all(w[~mask] == 0.0)


def test_density_weighted_weights(particle_cloud):
    """Density weighting divides by rho once more."""
    w = set_interpolation_weights(particle_cloud)
    w_rho = set_interpolation_weights(particle_cloud, density_weighted=True)
    np.testing.assert_allclose(w_rho, w / particle_cloud.rho)


def test_weights_bad_particles(single_particle, caplog):
    """Particles with h <= 0 get zero weight and a warning."""
    p = single_particle.copy(h=np.array([0.0]))
    with caplog.at_level(logging.WARNING, logger="sphlight.particles.weights"):
        w = set_interpolation_weights(p)
    assert w[0] == 0.0
    assert "zero weight" in caplog.text



def test_weights_bad_particles_outside_mask(single_particle, caplog):
    """Excluded particles with h <= 0 do not trigger the warning."""
    p = single_particle.copy(h=np.array([0.0]))
    with caplog.at_level(logging.WARNING, logger="sphlight.particles.weights"):
        w = set_interpolation_weights(p, np.array([False]))
    assert w[0] == 0.0
    assert "zero weight" not in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
