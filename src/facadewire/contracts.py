from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin, get_type_hints

from facadewire._internal.type_checks import is_interface_type, is_runtime_class
from facadewire.exceptions import FacadeWireContractInvalidError

logger = logging.getLogger(__name__)

_FRAMEWORK_MODULES = frozenset({"builtins", "typing", "typing_extensions", "abc"})


@dataclass(frozen=True, slots=True)
class Member:
    """One named slot declared on a facade contract."""

    name: str
    contract_type: Any
    readable: bool = True
    writable: bool = False


@dataclass(frozen=True, slots=True)
class FacadeContract:
    """Describe a facade interface as an ordered sequence of members.

    Build contracts with ``FacadeContract.from_type`` rather than by hand so
    member order follows the class declaration order.
    """

    facade_type: type[Any]
    members: tuple[Member, ...]

    @classmethod
    def from_type(cls, facade_type: type[Any]) -> FacadeContract:
        """Inspect ``facade_type`` and return its contract.

        Args:
            facade_type: Facade interface class to inspect.

        Raises:
            FacadeWireContractInvalidError: If ``facade_type`` is not a class or
                a member annotation cannot be evaluated.

        """
        return describe_facade(facade_type)

    @property
    def name(self) -> str:
        return self.facade_type.__qualname__

    @property
    def member_names(self) -> tuple[str, ...]:
        return tuple(member.name for member in self.members)

    def member(self, name: str) -> Member | None:
        for member in self.members:
            if member.name == name:
                return member
        return None


def describe_facade(facade_type: type[Any]) -> FacadeContract:
    """Collect public properties and annotated attributes of ``facade_type``.

    Members keep the position of their first declaration along the MRO, base
    classes first. A property's type is its getter return annotation, or the
    setter value annotation when the property is write-only.

    Args:
        facade_type: Facade interface class to inspect.

    Raises:
        FacadeWireContractInvalidError: If ``facade_type`` is not a class or an
            annotation cannot be evaluated.

    """
    if not is_runtime_class(facade_type):
        msg = f"facade must be a class, got {facade_type!r}"
        raise FacadeWireContractInvalidError(msg, facade_type)

    try:
        attribute_hints = get_type_hints(facade_type)
    except (NameError, TypeError) as error:
        msg = f"annotations cannot be resolved ({error})"
        raise FacadeWireContractInvalidError(msg, facade_type) from error

    members: dict[str, Member] = {}
    for owner in reversed(facade_type.__mro__):
        if owner.__module__ in _FRAMEWORK_MODULES:
            continue
        for name in inspect.get_annotations(owner):
            if name.startswith("_") or name not in attribute_hints:
                continue
            hint = attribute_hints[name]
            if get_origin(hint) is ClassVar:
                continue
            members[name] = Member(name=name, contract_type=hint, readable=True, writable=True)
        for name, value in vars(owner).items():
            if name.startswith("_") or not isinstance(value, property):
                continue
            members[name] = Member(
                name=name,
                contract_type=_property_type(facade_type, name, value),
                readable=value.fget is not None,
                writable=value.fset is not None,
            )

    return FacadeContract(facade_type=facade_type, members=tuple(members.values()))


def _property_type(facade_type: type[Any], name: str, value: property) -> Any:
    try:
        if value.fget is not None:
            return get_type_hints(value.fget).get("return")
        if value.fset is not None:
            hints = get_type_hints(value.fset)
            hints.pop("return", None)
            return next(reversed(hints.values()), None)
    except (NameError, TypeError) as error:
        msg = f"annotation of member '{name}' cannot be resolved ({error})"
        raise FacadeWireContractInvalidError(msg, facade_type) from error
    return None


class ContractValidator:
    """Check that a facade contract can be aggregated before anything else uses it."""

    def validate(self, contract: FacadeContract | type[Any]) -> FacadeContract:
        """Validate a contract and return its description.

        Checks run in order and the first violation is raised: at least one
        member, every member typed with an interface, every member readable.

        Args:
            contract: Contract description or facade class.

        Returns:
            The validated contract description.

        Raises:
            FacadeWireContractInvalidError: If the contract violates a rule.

        """
        if not isinstance(contract, FacadeContract):
            contract = describe_facade(contract)

        if not contract.members:
            msg = "no members"
            raise FacadeWireContractInvalidError(msg, contract)

        for member in contract.members:
            if not is_interface_type(member.contract_type):
                msg = "member not interface"
                raise FacadeWireContractInvalidError(msg, contract, member)

        for member in contract.members:
            if not member.readable:
                msg = "member not readable"
                raise FacadeWireContractInvalidError(msg, contract, member)

        logger.debug(
            "Validated facade contract %s with members %s",
            contract.name,
            ", ".join(contract.member_names),
        )
        return contract


__all__ = ["ContractValidator", "FacadeContract", "Member", "describe_facade"]
