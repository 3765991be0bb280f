"""
Backend registry for flexipos.

Backends are discovered from the modules of ``flexipos.backends`` (each
exposes a ``BACKEND_SPEC``) and from the ``flexipos.backends`` entry-point
group, so third-party packages can plug in their own taggers.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import pkgutil
from importlib import metadata
from typing import Any, Dict, Iterator, List, Optional

from .backend_spec import BackendSpec, TaggingBackend
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "flexipos.backends"

_BACKEND_REGISTRY: Dict[str, BackendSpec] = {}


def register_backend_spec(spec: BackendSpec) -> None:
    """Register a backend based on a BackendSpec definition."""
    _BACKEND_REGISTRY[spec.name.lower()] = spec


def _load_spec_from_module(module_name: str) -> Optional[BackendSpec]:
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:  # pragma: no cover - depends on installed extras
        logger.debug("Failed to import backend module '%s': %s", module_name, exc)
        return None
    spec = getattr(module, "BACKEND_SPEC", None)
    if spec is None:
        logger.debug("Module '%s' does not define BACKEND_SPEC", module_name)
        return None
    if not isinstance(spec, BackendSpec):
        logger.warning("Module '%s' BACKEND_SPEC is not a BackendSpec instance", module_name)
        return None
    return spec


def _iter_builtin_backend_specs() -> Iterator[BackendSpec]:
    from . import backends as backend_pkg

    prefix = backend_pkg.__name__ + "."
    for module_info in pkgutil.iter_modules(backend_pkg.__path__, prefix):
        spec = _load_spec_from_module(module_info.name)
        if spec:
            yield spec


def _iter_entry_point_backend_specs() -> Iterator[BackendSpec]:
    try:
        backend_eps = metadata.entry_points().select(group=ENTRY_POINT_GROUP)
    except Exception as exc:  # pragma: no cover - depends on runtime env
        logger.debug("Unable to read backend entry points: %s", exc)
        return
    for ep in backend_eps:
        try:
            spec = ep.load()
        except Exception as exc:
            logger.warning("Failed to load backend entry point '%s': %s", ep.name, exc)
            continue
        if not isinstance(spec, BackendSpec):
            logger.warning("Entry point '%s' did not return a BackendSpec instance", ep.name)
            continue
        yield spec


def _register_discovered_backends() -> None:
    for iterable in (_iter_builtin_backend_specs(), _iter_entry_point_backend_specs()):
        for spec in iterable:
            register_backend_spec(spec)


def get_backend_spec(backend_name: str) -> Optional[BackendSpec]:
    return _BACKEND_REGISTRY.get(backend_name.lower())


def list_backends(include_hidden: bool = False) -> Dict[str, BackendSpec]:
    if include_hidden:
        return dict(_BACKEND_REGISTRY)
    return {name: spec for name, spec in _BACKEND_REGISTRY.items() if not spec.is_hidden}


def get_backend_choices() -> List[str]:
    """Backend names for CLI choices (sorted, excluding hidden backends)."""
    return sorted(list_backends(include_hidden=False).keys())


def is_backend_available(backend_name: str) -> bool:
    spec = get_backend_spec(backend_name)
    if spec is None:
        return False
    if not spec.requires:
        return True
    try:
        return importlib.util.find_spec(spec.requires) is not None
    except (ImportError, ValueError):
        return False


def create_backend(backend_type: str, **kwargs: Any) -> TaggingBackend:
    """Instantiate a registered backend by name."""
    spec = get_backend_spec(backend_type)
    if spec is None:
        raise ConfigurationError(
            f"Unknown backend type: {backend_type}. "
            f"Available backends: {', '.join(get_backend_choices())}"
        )
    try:
        return spec.factory(**kwargs)
    except ImportError as exc:
        hint = f" Install it with: {spec.install_hint}" if spec.install_hint else ""
        raise ConfigurationError(
            f"Backend '{spec.name}' requires the '{spec.requires or exc.name}' module.{hint}"
        ) from exc


_register_discovered_backends()
