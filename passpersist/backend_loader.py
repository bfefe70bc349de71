"""
Load backend hooks named as ``module:attribute`` or ``path/to/file.py:attribute``.
"""
import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

logger = logging.getLogger(__name__)


class BackendLoadError(Exception):
    """Raised when a backend reference cannot be resolved to a callable."""


def _load_module(target: str) -> ModuleType:
    if target.endswith(".py"):
        path = Path(target)
        if not path.is_file():
            raise BackendLoadError(f"Backend file '{target}' does not exist")
        module_name = f"passpersist_backend_{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise BackendLoadError(f"Could not load backend spec for {target}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        return module
    try:
        return importlib.import_module(target)
    except ImportError as e:
        raise BackendLoadError(f"Cannot import backend module '{target}': {e}") from e


def load_callable(reference: str) -> Callable[..., Any]:
    """Resolve ``reference`` to a callable.

    Raises:
        BackendLoadError: malformed reference, missing module or attribute,
            or an attribute that is not callable.
    """
    target, sep, attribute = reference.rpartition(":")
    if not sep or not target or not attribute:
        raise BackendLoadError(f"Backend reference '{reference}' must look like 'module:attribute'")
    module = _load_module(target)
    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise BackendLoadError(f"'{target}' has no attribute '{attribute}'") from e
    if not callable(obj):
        raise BackendLoadError(f"Backend '{reference}' is not callable")
    logger.info(f"Loaded backend hook {reference}")
    return obj
