from __future__ import annotations

import importlib
import inspect
import logging
import threading
from collections.abc import Iterable, Iterator
from types import ModuleType
from typing import Any, Protocol, runtime_checkable

from facadewire._internal.type_checks import is_runtime_class

logger = logging.getLogger(__name__)


@runtime_checkable
class TypeUniverse(Protocol):
    """Supply the candidate classes an ``ImplementationResolver`` may pick from.

    Implementations decide where classes come from: a static registry, a set
    of modules, a plugin entry point. The resolver never looks beyond what
    ``enumerate`` yields.
    """

    def enumerate(self) -> Iterable[type[Any]]:
        """Return every class visible to the resolver."""
        ...


class StaticTypeUniverse:
    """Hold an explicit registry of candidate classes configured at startup.

    Duplicates are dropped and registration order is kept, so resolution does
    not depend on hash ordering.
    """

    def __init__(self, types: Iterable[type[Any]] = ()) -> None:
        self._types: dict[type[Any], None] = {}
        self._lock = threading.Lock()
        for candidate in types:
            self.add(candidate)

    def add(self, candidate: type[Any]) -> None:
        """Register one candidate class.

        Args:
            candidate: Class to expose to resolvers.

        Raises:
            TypeError: If ``candidate`` is not a class.

        """
        if not is_runtime_class(candidate):
            msg = f"Type universe entries must be classes, got {candidate!r}."
            raise TypeError(msg)
        with self._lock:
            self._types[candidate] = None

    def enumerate(self) -> Iterable[type[Any]]:
        with self._lock:
            return tuple(self._types)

    def __iter__(self) -> Iterator[type[Any]]:
        return iter(self.enumerate())

    def __len__(self) -> int:
        return len(self._types)


class ModuleTypeUniverse:
    """Expose the classes defined in a fixed set of modules.

    Modules may be given as module objects or importable dotted names. A
    module that fails to import is skipped with a warning so one broken plugin
    does not hide the rest.
    """

    def __init__(self, modules: Iterable[ModuleType | str]) -> None:
        self._modules = tuple(modules)

    def enumerate(self) -> Iterable[type[Any]]:
        seen: dict[type[Any], None] = {}
        for module in self._iter_modules():
            for _, value in inspect.getmembers(module, inspect.isclass):
                if value.__module__ == module.__name__:
                    seen[value] = None
        return tuple(seen)

    def _iter_modules(self) -> Iterator[ModuleType]:
        for module in self._modules:
            if isinstance(module, ModuleType):
                yield module
                continue
            try:
                yield importlib.import_module(module)
            except ImportError:
                logger.warning("Skipping module %s: import failed", module, exc_info=True)


__all__ = ["ModuleTypeUniverse", "StaticTypeUniverse", "TypeUniverse"]
