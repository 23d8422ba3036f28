from __future__ import annotations

import abc
import inspect
import types
from typing import Any, TypeGuard, TypeVar

from typing_extensions import get_protocol_members, is_protocol


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_interface_type(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a protocol class or an abstract base class.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    if not is_runtime_class(candidate):
        return False
    if is_protocol(candidate) or inspect.isabstract(candidate):
        return True
    return abc.ABC in candidate.__bases__


def is_generic_template(candidate: object) -> bool:
    """Return true when candidate still declares unbound ``TypeVar`` parameters."""
    parameters = getattr(candidate, "__parameters__", ())
    return any(isinstance(parameter, TypeVar) for parameter in parameters)


def is_concrete_type(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is an instantiable, non-protocol class.

    Listing ``abc.ABC`` among the bases does not make a class abstract; only
    unimplemented abstract methods do.
    """
    if not is_runtime_class(candidate) or is_protocol(candidate):
        return False
    if inspect.isabstract(candidate):
        return False
    return not issubclass(candidate, type)


def is_assignable(candidate: type[Any], contract: type[Any]) -> bool:
    """Return true when instances of candidate satisfy contract.

    Abstract base classes use ``issubclass`` so ``ABC.register`` virtual
    subclasses count. Protocols match by inheritance, or structurally when the
    protocol is ``runtime_checkable``.
    """
    if contract in candidate.__mro__:
        return True
    if not is_protocol(contract):
        try:
            return issubclass(candidate, contract)
        except TypeError:
            return False
    if not getattr(contract, "_is_runtime_protocol", False):
        return False
    return all(hasattr(candidate, name) for name in get_protocol_members(contract))


__all__ = [
    "is_assignable",
    "is_concrete_type",
    "is_generic_template",
    "is_interface_type",
    "is_runtime_class",
]
