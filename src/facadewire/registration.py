from __future__ import annotations

import logging
from typing import Any, Protocol

from facadewire.contracts import ContractValidator
from facadewire.proxy import ProxyFactory, ProxyInstance
from facadewire.resolver import ImplementationResolver

logger = logging.getLogger(__name__)


class DependencyProvider(Protocol):
    """Obtain an instance of an implementation type from the caller's own container."""

    def __call__(self, implementation_type: type[Any], contract_type: type[Any]) -> object: ...


class FacadeBuilder:
    """Assemble facade proxies from a resolver and an external dependency provider.

    ``build`` validates the facade, resolves every member's implementation,
    asks the provider for instances, and binds them into a fresh proxy. The
    builder applies no lifetime policy: whether the provider returns new or
    shared instances, and how long the finished facade lives, is up to the
    caller's container.

    Examples:
        .. code-block:: python

            builder = FacadeBuilder(
                resolver=ImplementationResolver(StaticTypeUniverse([Pricing, Stock])),
                provider=lambda implementation_type, _: container.resolve(implementation_type),
            )
            orders = builder.build(IOrderFacade).facade

    """

    def __init__(
        self,
        resolver: ImplementationResolver,
        provider: DependencyProvider,
        *,
        validator: ContractValidator | None = None,
        factory: ProxyFactory | None = None,
    ) -> None:
        self._resolver = resolver
        self._provider = provider
        self._validator = ContractValidator() if validator is None else validator
        self._factory = ProxyFactory() if factory is None else factory

    def plan(self, facade_type: type[Any]) -> dict[str, type[Any]]:
        """Validate ``facade_type`` and resolve each member without instantiating anything.

        Args:
            facade_type: Facade interface class.

        Returns:
            Member names mapped to their implementation types, in member order.

        """
        contract = self._validator.validate(facade_type)
        return {
            member.name: self._resolver.resolve(member.contract_type)
            for member in contract.members
        }

    def build(self, facade_type: type[Any]) -> ProxyInstance:
        """Build a fully bound proxy for ``facade_type``.

        Args:
            facade_type: Facade interface class.

        Returns:
            A ready proxy; publish ``proxy.facade`` as the facade value.

        Raises:
            FacadeWireError: Any validation, resolution, proxy creation or
                binding failure, unchanged. Provider errors propagate as raised.

        """
        contract = self._validator.validate(facade_type)

        try:
            implementations = {
                member.name: self._resolver.resolve(member.contract_type)
                for member in contract.members
            }
            proxy = self._factory.create(contract)
            for member in contract.members:
                instance = self._provider(implementations[member.name], member.contract_type)
                proxy.bind(member.contract_type, member.name, instance)
        except Exception:
            logger.exception("Failed to create facade for type %s", contract.name)
            raise

        logger.debug("Built facade %s", contract.name)
        return proxy


__all__ = ["DependencyProvider", "FacadeBuilder"]
