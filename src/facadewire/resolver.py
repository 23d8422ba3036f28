from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from facadewire._internal.type_checks import is_assignable, is_concrete_type
from facadewire.exceptions import (
    FacadeWireAmbiguousImplementationError,
    FacadeWireNoImplementationFoundError,
)
from facadewire.lock_mode import LockMode
from facadewire.universe import TypeUniverse

logger = logging.getLogger(__name__)


class ResolutionCache:
    """Map interface types to their resolved implementation types.

    The cache is handed to resolvers explicitly, so its scope is chosen by
    the caller: share one instance across the process, or create one per
    registration session. Writes are last-writer-wins.
    """

    def __init__(self, *, lock_mode: LockMode = LockMode.THREAD) -> None:
        self._entries: dict[Any, type[Any]] = {}
        self._lock = lock_mode.create_lock()

    def get(self, contract: Any) -> type[Any] | None:
        return self._entries.get(contract)

    def set(self, contract: Any, implementation: type[Any]) -> None:
        with self._lock:
            self._entries[contract] = implementation

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, contract: object) -> bool:
        return contract in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True, slots=True)
class NamingConvention:
    """Name-based tie breaker used when several implementations match.

    ``IFoo`` yields the candidate names ``Foo``, ``FooImplementation`` and
    ``FooRepository``, tried in that order.
    """

    interface_prefix: str = "I"
    suffixes: tuple[str, ...] = ("", "Implementation", "Repository")

    def base_name(self, contract: type[Any]) -> str:
        name = contract.__name__
        if self.interface_prefix and name.startswith(self.interface_prefix):
            return name[len(self.interface_prefix) :]
        return name

    def candidate_names(self, contract: type[Any]) -> list[str]:
        base_name = self.base_name(contract)
        return [f"{base_name}{suffix}" for suffix in self.suffixes]

    def select(
        self,
        contract: type[Any],
        implementations: list[type[Any]],
    ) -> type[Any] | None:
        """Return the implementation matching the first candidate name, if any.

        Names are compared case-insensitively.
        """
        for candidate_name in self.candidate_names(contract):
            expected = candidate_name.casefold()
            for implementation in implementations:
                if implementation.__name__.casefold() == expected:
                    return implementation
        return None


class ImplementationResolver:
    """Select the single concrete class to use for an interface type.

    Candidates come from the configured ``TypeUniverse``. When more than one
    candidate exists, the ``NamingConvention`` breaks the tie. Results are
    memoized in a ``ResolutionCache``; concurrent first resolutions of the same
    interface may each scan the universe, which is harmless because the scan
    is deterministic.
    """

    def __init__(
        self,
        universe: TypeUniverse,
        *,
        cache: ResolutionCache | None = None,
        convention: NamingConvention | None = None,
    ) -> None:
        """Initialize a resolver over a type universe.

        Args:
            universe: Source of candidate classes.
            cache: Resolution cache to use. Pass a shared instance to reuse
                results across resolvers; defaults to a private cache.
            convention: Tie-breaking naming convention.

        """
        self._universe = universe
        self._cache = ResolutionCache() if cache is None else cache
        self._convention = NamingConvention() if convention is None else convention
        self._scan_count = 0
        self._scan_count_lock = threading.Lock()

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def scan_count(self) -> int:
        """Number of type universe scans performed so far."""
        return self._scan_count

    def resolve(self, contract: type[Any]) -> type[Any]:
        """Return the implementation class for ``contract``.

        Args:
            contract: Interface type to resolve.

        Returns:
            The selected concrete class.

        Raises:
            FacadeWireNoImplementationFoundError: If no candidate exists.
            FacadeWireAmbiguousImplementationError: If several candidates exist
                and none follows the naming convention.

        """
        cached = self._cache.get(contract)
        if cached is not None:
            return cached

        implementations = self.find_candidates(contract)
        implementation = self._select(contract, implementations)
        self._cache.set(contract, implementation)
        logger.debug("Resolved %s to %s", contract.__qualname__, implementation.__qualname__)
        return implementation

    def find_candidates(self, contract: type[Any]) -> list[type[Any]]:
        """Scan the universe for concrete classes assignable to ``contract``."""
        with self._scan_count_lock:
            self._scan_count += 1

        candidates: dict[type[Any], None] = {}
        for candidate in self._universe.enumerate():
            if candidate is contract or not is_concrete_type(candidate):
                continue
            if is_assignable(candidate, contract):
                candidates[candidate] = None
        return list(candidates)

    def _select(self, contract: type[Any], implementations: list[type[Any]]) -> type[Any]:
        if not implementations:
            raise FacadeWireNoImplementationFoundError(contract)

        if len(implementations) == 1:
            return implementations[0]

        best_match = self._convention.select(contract, implementations)
        if best_match is not None:
            logger.debug(
                "Picked %s for %s by naming convention among %d candidates",
                best_match.__qualname__,
                contract.__qualname__,
                len(implementations),
            )
            return best_match

        candidate_names = sorted(implementation.__name__ for implementation in implementations)
        raise FacadeWireAmbiguousImplementationError(contract, candidate_names)


__all__ = ["ImplementationResolver", "NamingConvention", "ResolutionCache"]
