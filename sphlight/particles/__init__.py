"""
Particle data and the services applied to it before raytracing.

This module provides:
- ParticleSet container for SPH snapshot columns
- Particle selection by type and column ranges
- Rigid rotation of particle coordinates
- SPH interpolation weights
"""

from sphlight.particles.snapshot import ParticleSet, REQUIRED_FIELDS
from sphlight.particles.selection import ParticleFilter, get_particle_subset, default_bounds
from sphlight.particles.rotation import rotate3d, rotate_particles
from sphlight.particles.weights import set_interpolation_weights

__all__ = [
    "ParticleSet",
    "REQUIRED_FIELDS",
    "ParticleFilter",
    "get_particle_subset",
    "default_bounds",
    "rotate3d",
    "rotate_particles",
    "set_interpolation_weights",
]
