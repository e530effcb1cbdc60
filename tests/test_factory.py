"""
Tests for the raytrace backend factory.
"""

import pytest

from sphlight.core.abc import RaytraceBackend
from sphlight.core.factory import RaytraceBackendFactory


def test_register_and_create(registered_disc_backend):
    """Registered backends are created by name with constructor arguments."""
    backend = RaytraceBackendFactory.create(registered_disc_backend, tau_disc=3.0)
    assert isinstance(backend, RaytraceBackend)
    assert backend.tau_disc == 3.0
    assert "disc" in RaytraceBackendFactory.list_backends()


def test_create_from_import_path():
    """Backends may be named by 'module:Class'."""
    backend = RaytraceBackendFactory.create("conftest:TransparentRaytracer")
    assert backend.tau_disc == 0.0


def test_unknown_backend():
    """Unknown names are reported with the available backends."""
    with pytest.raises(ValueError, match="Unknown raytrace backend"):
        RaytraceBackendFactory.create("splash")


@pytest.mark.parametrize(
    "path,match",
    [
        ("conftest:", "module:attribute"),
        ("conftest:NoSuchBackend", "no attribute"),
        ("conftest:pytest", "not a RaytraceBackend subclass"),
    ],
)
def test_load_errors(path, match):
    """Bad import paths raise ValueError."""
    with pytest.raises(ValueError, match=match):
        RaytraceBackendFactory.load(path)


def test_backend_is_abstract():
    """The interface cannot be instantiated."""
    with pytest.raises(TypeError):
        RaytraceBackend()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
