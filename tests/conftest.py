"""Shared pytest fixtures for facadewire tests."""

import pytest

from facadewire.contracts import ContractValidator
from facadewire.proxy import ProxyFactory
from facadewire.resolver import ImplementationResolver
from facadewire.universe import StaticTypeUniverse
from tests.order_domain import ORDER_TYPES


@pytest.fixture()
def order_universe() -> StaticTypeUniverse:
    """Universe holding the order-processing implementations."""
    return StaticTypeUniverse(ORDER_TYPES)


@pytest.fixture()
def resolver(order_universe: StaticTypeUniverse) -> ImplementationResolver:
    """Resolver over the order-processing universe with a private cache."""
    return ImplementationResolver(order_universe)


@pytest.fixture()
def validator() -> ContractValidator:
    """ContractValidator instance."""
    return ContractValidator()


@pytest.fixture()
def proxy_factory() -> ProxyFactory:
    """ProxyFactory with thread locks enabled."""
    return ProxyFactory()
