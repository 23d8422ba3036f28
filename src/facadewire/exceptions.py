from __future__ import annotations

from typing import Any


class FacadeWireError(Exception):
    """Represent a base class for all facadewire-specific failures.

    Catch this type when you want to handle any facadewire error path without
    matching each concrete exception class individually.
    """


class FacadeWireContractInvalidError(FacadeWireError):
    """Signal a facade contract whose shape cannot be aggregated.

    Raised by ``ContractValidator.validate`` when a facade declares no members,
    declares a member whose type is not an interface, or declares a member
    without a read accessor.

    Typical fixes include declaring members as read-only properties typed with
    ``Protocol`` or ``ABC`` interfaces.
    """

    def __init__(self, reason: str, contract: Any, member: Any | None = None) -> None:
        self.reason = reason
        self.contract = contract
        self.member = member
        contract_name = _contract_name(contract)
        if member is None:
            msg = f"Facade contract '{contract_name}' is invalid: {reason}."
        else:
            msg = (
                f"Facade contract '{contract_name}' is invalid: {reason} "
                f"(member '{member.name}' typed as '{_type_name(member.contract_type)}')."
            )
        super().__init__(msg)


class FacadeWireNoImplementationFoundError(FacadeWireError):
    """Signal that the type universe holds no implementation for a contract.

    Raised by ``ImplementationResolver.resolve`` when no concrete class in the
    configured universe is assignable to the requested interface.

    Typical fixes include adding the implementing class (or its module) to the
    type universe.
    """

    def __init__(self, contract: Any) -> None:
        self.contract = contract
        msg = f"No implementation found for interface '{_type_name(contract)}'."
        super().__init__(msg)


class FacadeWireAmbiguousImplementationError(FacadeWireError):
    """Signal that several implementations match and none follows the naming convention.

    Raised by ``ImplementationResolver.resolve``. ``candidates`` lists every
    matching class name, sorted, so the conflict can be fixed by hand.

    Typical fixes include renaming the preferred implementation after the
    interface (``IFoo`` -> ``Foo``, ``FooImplementation`` or ``FooRepository``)
    or removing the extra classes from the type universe.
    """

    def __init__(self, contract: Any, candidates: list[str]) -> None:
        self.contract = contract
        self.candidates = candidates
        msg = (
            f"Multiple implementations found for interface '{_type_name(contract)}'. "
            f"Found types: {', '.join(candidates)}."
        )
        super().__init__(msg)


class FacadeWireProxyCreationError(FacadeWireError):
    """Signal that a proxy could not be synthesized for a facade contract.

    Raised by ``ProxyFactory.create`` when the contract is not an interface,
    when it is a generic template, or when adapter synthesis itself fails. In
    the last case the original error is chained as ``__cause__``.
    """

    def __init__(self, contract: Any, reason: str) -> None:
        self.contract = contract
        self.reason = reason
        msg = f"Failed to create proxy for type '{_type_name(contract)}': {reason}."
        super().__init__(msg)


class FacadeWireInvalidBindingError(FacadeWireError):
    """Signal a bind call with a blank member name or a ``None`` instance."""

    def __init__(self, member: Any) -> None:
        self.member = member
        msg = f"Invalid binding for member {member!r}: name must be non-blank and instance non-None."
        super().__init__(msg)


class FacadeWireMemberNotBoundError(FacadeWireError):
    """Signal a member read before the member was bound.

    Raised on the first access of a facade member whose instance has not been
    bound to the proxy yet.

    Typical fix is binding every contract member before publishing the facade;
    ``ProxyInstance.unbound_members`` lists what is missing.
    """

    def __init__(self, member: str, facade: str) -> None:
        self.member = member
        self.facade = facade
        msg = f"Implementation not found for member '{member}' in facade '{facade}'."
        super().__init__(msg)


class FacadeWireUnsupportedOperationError(FacadeWireError):
    """Signal a proxy operation other than a member read.

    Facade proxies are read-only aggregates: writes, deletes, indexing and
    method calls on the facade itself are rejected.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        msg = f"Operation {operation} is not supported. Only member reads are supported."
        super().__init__(msg)


def _type_name(value: Any) -> str:
    return getattr(value, "__qualname__", None) or repr(value)


def _contract_name(contract: Any) -> str:
    if isinstance(contract, type):
        return contract.__qualname__
    return str(getattr(contract, "name", contract))
