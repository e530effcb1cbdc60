"""
Factory for raytrace backends.
"""

import importlib
from typing import Dict, Type

from sphlight.core.abc import RaytraceBackend
from sphlight.core.logging_config import get_logger

logger = get_logger("core.factory")


class RaytraceBackendFactory:
    """Factory for creating raytrace backend instances."""

    _backends: Dict[str, Type[RaytraceBackend]] = {}

    @classmethod
    def register(cls, name: str, backend_class: Type[RaytraceBackend]) -> None:
        """
        Register a backend class.

        Parameters
        ----------
        name : str
            Backend name
        backend_class : Type[RaytraceBackend]
            Backend class
        """
        cls._backends[name] = backend_class
        logger.debug(f"Registered raytrace backend: {name}")

    @classmethod
    def create(cls, name: str, **kwargs) -> RaytraceBackend:
        """
        Create a backend instance.

        ``name`` is either a registered backend name or an import path of the
        form ``"package.module:ClassName"``.

        Parameters
        ----------
        name : str
            Backend name or import path
        **kwargs
            Additional arguments for the backend constructor

        Returns
        -------
        RaytraceBackend
            Backend instance

        Raises
        ------
        ValueError
            If the backend cannot be found
        """
        if name in cls._backends:
            return cls._backends[name](**kwargs)

        if ":" in name:
            backend_class = cls.load(name)
            return backend_class(**kwargs)

        available = ", ".join(cls._backends.keys())
        raise ValueError(f"Unknown raytrace backend: {name}. Available: {available}")

    @classmethod
    def load(cls, path: str) -> Type[RaytraceBackend]:
        """
        Import a backend class from ``"module:attribute"``.

        Parameters
        ----------
        path : str
            Import path

        Returns
        -------
        Type[RaytraceBackend]
            Backend class
        """
        module_name, _, attr = path.partition(":")
        if not module_name or not attr:
            raise ValueError(f"Backend path must look like 'module:attribute', got {path!r}")

        module = importlib.import_module(module_name)
        try:
            backend_class = getattr(module, attr)
        except AttributeError as exc:
            raise ValueError(f"Module {module_name} has no attribute {attr}") from exc

        if not (isinstance(backend_class, type) and issubclass(backend_class, RaytraceBackend)):
            raise ValueError(f"{path} is not a RaytraceBackend subclass")

        logger.debug(f"Loaded raytrace backend from {path}")
        return backend_class

    @classmethod
    def list_backends(cls) -> list:
        """List registered backend names."""
        return list(cls._backends.keys())
