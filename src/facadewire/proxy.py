from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from facadewire._internal.type_checks import is_generic_template, is_interface_type
from facadewire.contracts import FacadeContract, describe_facade
from facadewire.exceptions import (
    FacadeWireInvalidBindingError,
    FacadeWireMemberNotBoundError,
    FacadeWireProxyCreationError,
    FacadeWireUnsupportedOperationError,
)
from facadewire.lock_mode import LockMode

logger = logging.getLogger(__name__)

_PROXY_ATTRIBUTE = "_facadewire_proxy"
_FRAMEWORK_MODULES = frozenset({"builtins", "typing", "typing_extensions", "abc"})
# Dunders the adapter defines itself or that drive class and attribute machinery.
_ADAPTER_DUNDERS = frozenset(
    {
        "__init__",
        "__new__",
        "__init_subclass__",
        "__class_getitem__",
        "__subclasshook__",
        "__set_name__",
        "__annotate__",
        "__annotate_func__",
        "__getattribute__",
        "__getattr__",
        "__setattr__",
        "__delattr__",
        "__getitem__",
        "__setitem__",
        "__delitem__",
        "__repr__",
    },
)


class OperationKind(Enum):
    """Shape of an operation dispatched to a facade proxy."""

    GET = "get"
    """Read a member."""

    SET = "set"
    """Assign an attribute."""

    DELETE = "delete"
    """Delete an attribute."""

    CALL = "call"
    """Call a method declared on the facade."""

    INDEX = "index"
    """Subscript the facade."""


@dataclass(frozen=True, slots=True)
class Invocation:
    """One operation performed on a facade proxy."""

    kind: OperationKind
    member: str
    args: tuple[Any, ...] = ()
    kwargs: tuple[tuple[str, Any], ...] = ()

    def describe(self) -> str:
        if self.kind is OperationKind.CALL:
            arguments = [repr(arg) for arg in self.args]
            arguments += [f"{name}={value!r}" for name, value in self.kwargs]
            return f"call '{self.member}({', '.join(arguments)})'"
        if self.kind is OperationKind.INDEX:
            key = self.args[0] if self.args else None
            return f"index [{key!r}]"
        return f"{self.kind.value} '{self.member}'"


class BindingStore:
    """Thread-safe mapping of facade member names to bound instances.

    Each ``set`` is atomic on its own; binding every member of a facade is not
    a single transaction.
    """

    def __init__(self, *, lock_mode: LockMode = LockMode.THREAD) -> None:
        self._instances: dict[str, object] = {}
        self._lock = lock_mode.create_lock()

    def set(self, name: str, instance: object) -> None:
        with self._lock:
            self._instances[name] = instance

    def get(self, name: str) -> object | None:
        return self._instances.get(name)

    def names(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._instances)

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return dict(self._instances)

    def __contains__(self, name: object) -> bool:
        return name in self._instances

    def __len__(self) -> int:
        return len(self._instances)


class ProxyInstance:
    """Dispatch member reads of a synthesized facade to bound instances.

    A proxy starts unbound. ``bind`` attaches one member at a time and the
    proxy is ready once every contract member is bound. Reads are legal in any
    state; reading an unbound member raises ``FacadeWireMemberNotBoundError``.

    ``facade`` is the object callers should publish: it is an instance of a
    class synthesized as a subclass of the facade interface, and each member
    access on it is dispatched through this proxy. ``isinstance`` checks
    against the interface therefore hold for abstract base classes and
    ``runtime_checkable`` protocols; plain protocols reject them.
    """

    def __init__(
        self,
        contract: FacadeContract,
        adapter_type: type[Any],
        *,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        self._contract = contract
        self._bindings = BindingStore(lock_mode=lock_mode)
        self._facade = adapter_type(self)

    @property
    def contract(self) -> FacadeContract:
        return self._contract

    @property
    def facade(self) -> Any:
        return self._facade

    @property
    def bindings(self) -> BindingStore:
        return self._bindings

    @property
    def unbound_members(self) -> tuple[str, ...]:
        return tuple(name for name in self._contract.member_names if name not in self._bindings)

    @property
    def is_ready(self) -> bool:
        return not self.unbound_members

    def bind(self, member_contract_type: Any, member_name: str, instance: object) -> None:
        """Bind ``instance`` as the value of ``member_name``.

        Rebinding a member replaces the previous instance.

        Args:
            member_contract_type: Interface type of the member, used for
                diagnostics.
            member_name: Name of the facade member.
            instance: Already constructed implementation instance.

        Raises:
            FacadeWireInvalidBindingError: If the name is blank or the instance
                is ``None``.

        """
        if not isinstance(member_name, str) or not member_name.strip() or instance is None:
            raise FacadeWireInvalidBindingError(member_name)

        self._bindings.set(member_name, instance)
        logger.debug(
            "Bound %s.%s (%s) to %s",
            self._contract.name,
            member_name,
            getattr(member_contract_type, "__qualname__", member_contract_type),
            type(instance).__qualname__,
        )

    def dispatch(self, invocation: Invocation) -> object:
        """Execute one operation against the proxy.

        Args:
            invocation: Operation to dispatch. Only ``OperationKind.GET`` is
                supported.

        Returns:
            The instance bound to the requested member, by reference.

        Raises:
            FacadeWireUnsupportedOperationError: For any non-read operation.
            FacadeWireMemberNotBoundError: If the member has no binding.

        """
        if invocation.kind is not OperationKind.GET:
            operation = f"{invocation.describe()} on facade '{self._contract.name}'"
            raise FacadeWireUnsupportedOperationError(operation)

        instance = self._bindings.get(invocation.member)
        if instance is None:
            raise FacadeWireMemberNotBoundError(invocation.member, self._contract.name)
        return instance

    def read(self, member_name: str) -> object:
        return self.dispatch(Invocation(OperationKind.GET, member_name))

    def __repr__(self) -> str:
        bound = len(self._contract.member_names) - len(self.unbound_members)
        return (
            f"{type(self).__name__}({self._contract.name}, "
            f"bound={bound}/{len(self._contract.members)})"
        )


def proxy_of(facade: object) -> ProxyInstance:
    """Return the ``ProxyInstance`` behind a synthesized facade object.

    Raises:
        TypeError: If ``facade`` was not created by a ``ProxyFactory``.

    """
    try:
        return object.__getattribute__(facade, _PROXY_ATTRIBUTE)
    except AttributeError:
        msg = f"{facade!r} is not a facade proxy."
        raise TypeError(msg) from None


class ProxyFactory:
    """Create ``ProxyInstance`` objects for facade interfaces.

    One adapter class is synthesized per facade interface and reused for every
    proxy of that interface.
    """

    def __init__(self, *, lock_mode: LockMode = LockMode.THREAD) -> None:
        self._lock_mode = lock_mode
        self._lock = lock_mode.create_lock()
        self._adapter_types: dict[type[Any], type[Any]] = {}

    def create(self, contract: FacadeContract | type[Any]) -> ProxyInstance:
        """Create a new, unbound proxy for ``contract``.

        Args:
            contract: Facade interface class or its contract description.

        Returns:
            An unbound proxy tagged with the contract.

        Raises:
            FacadeWireProxyCreationError: If the contract is not an interface,
                is a generic template, or adapter synthesis fails.

        """
        facade_type = contract.facade_type if isinstance(contract, FacadeContract) else contract

        if not is_interface_type(facade_type):
            raise FacadeWireProxyCreationError(facade_type, "not an interface")
        if is_generic_template(facade_type):
            raise FacadeWireProxyCreationError(facade_type, "generic template unsupported")

        try:
            description = (
                contract if isinstance(contract, FacadeContract) else describe_facade(facade_type)
            )
            adapter_type = self._get_adapter_type(description)
            return ProxyInstance(description, adapter_type, lock_mode=self._lock_mode)
        except Exception as error:
            msg = f"adapter synthesis failed ({error})"
            raise FacadeWireProxyCreationError(facade_type, msg) from error

    def _get_adapter_type(self, contract: FacadeContract) -> type[Any]:
        adapter_type = self._adapter_types.get(contract.facade_type)
        if adapter_type is not None:
            return adapter_type

        with self._lock:
            adapter_type = self._adapter_types.get(contract.facade_type)
            if adapter_type is None:
                adapter_type = _synthesize_adapter_type(contract)
                self._adapter_types[contract.facade_type] = adapter_type
                logger.debug("Synthesized adapter %s", adapter_type.__qualname__)
        return adapter_type


def _synthesize_adapter_type(contract: FacadeContract) -> type[Any]:
    facade_type = contract.facade_type
    namespace: dict[str, Any] = {
        "__module__": facade_type.__module__,
        "__qualname__": f"{facade_type.__qualname__}Proxy",
        "__init__": _adapter_init,
        "__setattr__": _adapter_setattr,
        "__delattr__": _adapter_delattr,
        "__getitem__": _adapter_getitem,
        "__setitem__": _adapter_setitem,
        "__delitem__": _adapter_delitem,
        "__repr__": _adapter_repr,
    }

    for name in _declared_method_names(facade_type):
        namespace[name] = _method_stub(name)
    for name in getattr(facade_type, "__abstractmethods__", ()):
        namespace.setdefault(name, _method_stub(name))
    for name in contract.member_names:
        namespace[name] = _member_property(name)

    metaclass = type(facade_type)
    return metaclass(f"{facade_type.__name__}Proxy", (facade_type,), namespace)


def _declared_method_names(facade_type: type[Any]) -> list[str]:
    names: list[str] = []
    for owner in facade_type.__mro__:
        if owner.__module__ in _FRAMEWORK_MODULES:
            continue
        for name, value in vars(owner).items():
            if name in names or inspect.isclass(value):
                continue
            if _is_dunder(name):
                if name not in _ADAPTER_DUNDERS and _is_method(value):
                    names.append(name)
            elif not name.startswith("_") and (callable(value) or _is_method(value)):
                names.append(name)
    return names


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__") and len(name) > 4


def _is_method(value: object) -> bool:
    return inspect.isfunction(value) or isinstance(value, (classmethod, staticmethod))


def _member_property(name: str) -> property:
    invocation = Invocation(OperationKind.GET, name)

    def get_member(self: Any) -> object:
        return proxy_of(self).dispatch(invocation)

    get_member.__name__ = name
    return property(get_member)


def _method_stub(name: str) -> Callable[..., Any]:
    def call_member(self: Any, *args: Any, **kwargs: Any) -> object:
        invocation = Invocation(OperationKind.CALL, name, args, tuple(kwargs.items()))
        return proxy_of(self).dispatch(invocation)

    call_member.__name__ = name
    return call_member


def _adapter_init(self: Any, proxy: ProxyInstance) -> None:
    object.__setattr__(self, _PROXY_ATTRIBUTE, proxy)


def _adapter_setattr(self: Any, name: str, value: Any) -> None:
    proxy_of(self).dispatch(Invocation(OperationKind.SET, name, (value,)))


def _adapter_delattr(self: Any, name: str) -> None:
    proxy_of(self).dispatch(Invocation(OperationKind.DELETE, name))


def _adapter_getitem(self: Any, key: Any) -> object:
    return proxy_of(self).dispatch(Invocation(OperationKind.INDEX, "", (key,)))


def _adapter_setitem(self: Any, key: Any, value: Any) -> None:
    proxy_of(self).dispatch(Invocation(OperationKind.INDEX, "", (key, value)))


def _adapter_delitem(self: Any, key: Any) -> None:
    proxy_of(self).dispatch(Invocation(OperationKind.INDEX, "", (key,)))


def _adapter_repr(self: Any) -> str:
    return f"<{type(self).__qualname__} of {proxy_of(self)!r}>"


__all__ = [
    "BindingStore",
    "Invocation",
    "OperationKind",
    "ProxyFactory",
    "ProxyInstance",
    "proxy_of",
]
