"""
Templating Registries

Registry mapping engine names (as declared in a theme's ``engine`` field) to
rendering backend instances.
"""

from typing import Dict, Type

from vitae.contexts.templating.backends import Jinja2Backend, LatexBackend, RenderingBackend
from vitae.utils.exceptions import UnregisteredBackend


class BackendRegistry:
    """
    Registry for creating and caching rendering backends.

    Backend classes are registered by name; instances are created lazily and
    cached so their compiled environments are shared across targets.
    """

    def __init__(self):
        self._classes: Dict[str, Type[RenderingBackend]] = {}
        self._cache: Dict[str, RenderingBackend] = {}

    def register(self, name: str, backend_class: Type[RenderingBackend]):
        """
        Register a backend class under an engine name.

        Raises:
            TypeError: If backend_class is not a RenderingBackend subclass
        """
        if not (isinstance(backend_class, type) and issubclass(backend_class, RenderingBackend)):
            raise TypeError(f"Backend '{name}' must subclass RenderingBackend, got {backend_class!r}")
        self._classes[name.lower()] = backend_class
        self._cache.pop(name.lower(), None)

    def get_backend(self, name: str) -> RenderingBackend:
        """
        Get a backend by engine name, creating and caching it if necessary.

        Raises:
            UnregisteredBackend: No backend is registered under that name
        """
        key = (name or "").lower()
        if key in self._cache:
            return self._cache[key]

        if key not in self._classes:
            raise UnregisteredBackend(name, self._classes)

        backend = self._classes[key]()
        self._cache[key] = backend
        return backend

    def names(self):
        return sorted(self._classes)

    def clear_cache(self):
        """Clear the backend instance cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return (name or "").lower() in self._cache


def default_registry() -> BackendRegistry:
    """Registry with the built-in backends."""
    registry = BackendRegistry()
    registry.register("jinja2", Jinja2Backend)
    registry.register("jinja", Jinja2Backend)
    registry.register("latex", LatexBackend)
    return registry
