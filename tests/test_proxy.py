"""Tests for facade proxy creation, binding, and dispatch."""

from abc import ABC, abstractmethod
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

import pytest

import facadewire.proxy as proxy_module
from facadewire.contracts import describe_facade
from facadewire.exceptions import (
    FacadeWireInvalidBindingError,
    FacadeWireMemberNotBoundError,
    FacadeWireProxyCreationError,
    FacadeWireUnsupportedOperationError,
)
from facadewire.lock_mode import LockMode
from facadewire.proxy import (
    BindingStore,
    Invocation,
    OperationKind,
    ProxyFactory,
    ProxyInstance,
    proxy_of,
)
from tests.order_domain import (
    IInventoryService,
    IOrderFacade,
    IPricingService,
    LegacyPricing,
    PricingServiceImplementation,
    WarehouseInventory,
)

T = TypeVar("T")


class IReportingFacade(Protocol):
    @property
    def pricing(self) -> IPricingService: ...

    def refresh(self) -> None: ...


class ICallableFacade(Protocol):
    @property
    def pricing(self) -> IPricingService: ...

    def __call__(self, sku: str) -> int: ...

    def __len__(self) -> int: ...


@runtime_checkable
class ICheckedOrderFacade(Protocol):
    @property
    def pricing(self) -> IPricingService: ...


class IAbstractOrderFacade(ABC):
    @property
    @abstractmethod
    def pricing(self) -> IPricingService: ...

    @property
    @abstractmethod
    def inventory(self) -> IInventoryService: ...

    @abstractmethod
    def summary(self) -> str: ...


class IRepositoryFacade(Protocol[T]):
    @property
    def pricing(self) -> IPricingService: ...


class IGenericAbstractFacade(ABC, Generic[T]):
    @property
    @abstractmethod
    def pricing(self) -> IPricingService: ...


class ConcreteFacade:
    @property
    def pricing(self) -> IPricingService:
        return PricingServiceImplementation()


@pytest.fixture()
def order_proxy(proxy_factory: ProxyFactory) -> ProxyInstance:
    return proxy_factory.create(IOrderFacade)


@pytest.fixture()
def bound_order_proxy(order_proxy: ProxyInstance) -> ProxyInstance:
    order_proxy.bind(IPricingService, "pricing", PricingServiceImplementation())
    order_proxy.bind(IInventoryService, "inventory", WarehouseInventory())
    return order_proxy


class TestProxyFactory:
    def test_creates_unbound_proxy_tagged_with_contract(self, order_proxy: ProxyInstance) -> None:
        assert order_proxy.contract.facade_type is IOrderFacade
        assert order_proxy.unbound_members == ("pricing", "inventory")
        assert not order_proxy.is_ready
        assert len(order_proxy.bindings) == 0

    def test_facade_satisfies_the_contract(self, order_proxy: ProxyInstance) -> None:
        facade_class = type(order_proxy.facade)

        assert IOrderFacade in facade_class.__mro__
        assert facade_class.__qualname__ == "IOrderFacadeProxy"

    def test_isinstance_holds_for_runtime_checkable_facade(
        self,
        proxy_factory: ProxyFactory,
    ) -> None:
        proxy = proxy_factory.create(ICheckedOrderFacade)
        proxy.bind(IPricingService, "pricing", PricingServiceImplementation())

        assert isinstance(proxy.facade, ICheckedOrderFacade)

    def test_plain_protocol_facade_refuses_isinstance(self, order_proxy: ProxyInstance) -> None:
        with pytest.raises(TypeError, match="runtime_checkable"):
            isinstance(order_proxy.facade, IOrderFacade)

    def test_accepts_contract_description(self, proxy_factory: ProxyFactory) -> None:
        contract = describe_facade(IOrderFacade)

        assert proxy_factory.create(contract).contract is contract

    def test_each_create_returns_a_new_proxy_sharing_one_adapter_class(
        self,
        proxy_factory: ProxyFactory,
    ) -> None:
        first = proxy_factory.create(IOrderFacade)
        second = proxy_factory.create(IOrderFacade)

        assert first is not second
        assert first.facade is not second.facade
        assert type(first.facade) is type(second.facade)

    def test_abstract_base_class_facade_is_instantiable(self, proxy_factory: ProxyFactory) -> None:
        proxy = proxy_factory.create(IAbstractOrderFacade)
        inventory = WarehouseInventory()
        proxy.bind(IInventoryService, "inventory", inventory)

        assert isinstance(proxy.facade, IAbstractOrderFacade)
        assert proxy.facade.inventory is inventory

    def test_rejects_concrete_class(self, proxy_factory: ProxyFactory) -> None:
        with pytest.raises(FacadeWireProxyCreationError) as exc_info:
            proxy_factory.create(ConcreteFacade)

        assert exc_info.value.reason == "not an interface"
        assert exc_info.value.contract is ConcreteFacade

    def test_rejects_non_class(self, proxy_factory: ProxyFactory) -> None:
        with pytest.raises(FacadeWireProxyCreationError, match="not an interface"):
            proxy_factory.create(42)  # type: ignore[arg-type]

    @pytest.mark.parametrize("facade_type", [IRepositoryFacade, IGenericAbstractFacade])
    def test_rejects_generic_template(
        self,
        proxy_factory: ProxyFactory,
        facade_type: type[Any],
    ) -> None:
        with pytest.raises(FacadeWireProxyCreationError) as exc_info:
            proxy_factory.create(facade_type)

        assert exc_info.value.reason == "generic template unsupported"

    def test_wraps_synthesis_failure(
        self,
        proxy_factory: ProxyFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def fail(_contract: object) -> type[Any]:
            msg = "metaclass refused"
            raise RuntimeError(msg)

        monkeypatch.setattr(proxy_module, "_synthesize_adapter_type", fail)

        with pytest.raises(FacadeWireProxyCreationError, match="metaclass refused") as exc_info:
            proxy_factory.create(IOrderFacade)

        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestBind:
    def test_dispatch_returns_bound_instances_by_reference(
        self,
        order_proxy: ProxyInstance,
    ) -> None:
        pricing = PricingServiceImplementation()
        inventory = WarehouseInventory()

        order_proxy.bind(IPricingService, "pricing", pricing)
        order_proxy.bind(IInventoryService, "inventory", inventory)

        assert order_proxy.facade.pricing is pricing
        assert order_proxy.facade.inventory is inventory
        assert order_proxy.facade.pricing is order_proxy.facade.pricing
        assert order_proxy.read("pricing") is pricing

    def test_members_are_ready_once_all_are_bound(self, order_proxy: ProxyInstance) -> None:
        order_proxy.bind(IPricingService, "pricing", PricingServiceImplementation())

        assert order_proxy.unbound_members == ("inventory",)
        assert not order_proxy.is_ready

        order_proxy.bind(IInventoryService, "inventory", WarehouseInventory())

        assert order_proxy.unbound_members == ()
        assert order_proxy.is_ready

    def test_rebinding_replaces_previous_instance(self, bound_order_proxy: ProxyInstance) -> None:
        legacy = LegacyPricing()

        bound_order_proxy.bind(IPricingService, "pricing", legacy)

        assert bound_order_proxy.facade.pricing is legacy
        assert len(bound_order_proxy.bindings) == 2

    @pytest.mark.parametrize("member_name", ["", "   ", None])
    def test_rejects_blank_member_name(
        self,
        order_proxy: ProxyInstance,
        member_name: Any,
    ) -> None:
        with pytest.raises(FacadeWireInvalidBindingError) as exc_info:
            order_proxy.bind(IPricingService, member_name, PricingServiceImplementation())

        assert exc_info.value.member == member_name

    def test_rejects_none_instance(self, order_proxy: ProxyInstance) -> None:
        with pytest.raises(FacadeWireInvalidBindingError, match="'pricing'"):
            order_proxy.bind(IPricingService, "pricing", None)

        assert "pricing" not in order_proxy.bindings


class TestDispatch:
    def test_unbound_member_raises(self, order_proxy: ProxyInstance) -> None:
        with pytest.raises(FacadeWireMemberNotBoundError) as exc_info:
            _ = order_proxy.facade.pricing

        assert exc_info.value.member == "pricing"
        assert exc_info.value.facade == "IOrderFacade"

    def test_partially_bound_proxy_serves_bound_members(self, order_proxy: ProxyInstance) -> None:
        inventory = WarehouseInventory()
        order_proxy.bind(IInventoryService, "inventory", inventory)

        assert order_proxy.facade.inventory is inventory
        with pytest.raises(FacadeWireMemberNotBoundError):
            order_proxy.read("pricing")

    def test_attribute_assignment_is_unsupported(self, bound_order_proxy: ProxyInstance) -> None:
        with pytest.raises(FacadeWireUnsupportedOperationError) as exc_info:
            bound_order_proxy.facade.pricing = LegacyPricing()

        assert exc_info.value.operation == "set 'pricing' on facade 'IOrderFacade'"

    def test_attribute_deletion_is_unsupported(self, bound_order_proxy: ProxyInstance) -> None:
        with pytest.raises(FacadeWireUnsupportedOperationError, match="delete 'inventory'"):
            del bound_order_proxy.facade.inventory

    def test_indexing_is_unsupported(self, bound_order_proxy: ProxyInstance) -> None:
        with pytest.raises(FacadeWireUnsupportedOperationError, match="index"):
            _ = bound_order_proxy.facade["pricing"]

        with pytest.raises(FacadeWireUnsupportedOperationError, match="index"):
            bound_order_proxy.facade["pricing"] = LegacyPricing()

    def test_facade_methods_are_unsupported(self, proxy_factory: ProxyFactory) -> None:
        proxy = proxy_factory.create(IReportingFacade)
        proxy.bind(IPricingService, "pricing", PricingServiceImplementation())

        with pytest.raises(FacadeWireUnsupportedOperationError, match=r"call 'refresh\(\)'"):
            proxy.facade.refresh()

    def test_keyword_arguments_appear_in_operation(self, proxy_factory: ProxyFactory) -> None:
        proxy = proxy_factory.create(IReportingFacade)

        with pytest.raises(FacadeWireUnsupportedOperationError) as exc_info:
            proxy.facade.refresh(force=True)

        assert exc_info.value.operation == "call 'refresh(force=True)' on facade 'IReportingFacade'"

    def test_declared_special_methods_are_unsupported(self, proxy_factory: ProxyFactory) -> None:
        proxy = proxy_factory.create(ICallableFacade)
        pricing = PricingServiceImplementation()
        proxy.bind(IPricingService, "pricing", pricing)

        with pytest.raises(FacadeWireUnsupportedOperationError, match=r"call '__call__\('sku'\)'"):
            proxy.facade("sku")

        with pytest.raises(FacadeWireUnsupportedOperationError, match=r"call '__len__\(\)'"):
            len(proxy.facade)

        assert proxy.facade.pricing is pricing

    def test_abstract_methods_are_unsupported(self, proxy_factory: ProxyFactory) -> None:
        proxy = proxy_factory.create(IAbstractOrderFacade)

        with pytest.raises(FacadeWireUnsupportedOperationError, match="summary"):
            proxy.facade.summary()

    @pytest.mark.parametrize(
        "kind",
        [OperationKind.SET, OperationKind.DELETE, OperationKind.CALL, OperationKind.INDEX],
    )
    def test_dispatch_accepts_only_reads(
        self,
        bound_order_proxy: ProxyInstance,
        kind: OperationKind,
    ) -> None:
        with pytest.raises(FacadeWireUnsupportedOperationError):
            bound_order_proxy.dispatch(Invocation(kind, "pricing"))

    def test_distinct_members_never_share_instances(
        self,
        bound_order_proxy: ProxyInstance,
    ) -> None:
        facade = bound_order_proxy.facade

        assert facade.pricing is not facade.inventory
        assert isinstance(facade.pricing, PricingServiceImplementation)
        assert isinstance(facade.inventory, WarehouseInventory)


class TestProxyOf:
    def test_returns_proxy_behind_facade(self, order_proxy: ProxyInstance) -> None:
        assert proxy_of(order_proxy.facade) is order_proxy

    def test_rejects_plain_objects(self) -> None:
        with pytest.raises(TypeError, match="is not a facade proxy"):
            proxy_of(object())

    def test_reprs_show_binding_progress(self, order_proxy: ProxyInstance) -> None:
        order_proxy.bind(IPricingService, "pricing", PricingServiceImplementation())

        assert repr(order_proxy) == "ProxyInstance(IOrderFacade, bound=1/2)"
        assert "IOrderFacadeProxy of ProxyInstance(IOrderFacade" in repr(order_proxy.facade)


class TestBindingStore:
    def test_set_get_and_snapshot(self) -> None:
        store = BindingStore(lock_mode=LockMode.NONE)
        pricing = PricingServiceImplementation()

        store.set("pricing", pricing)

        assert store.get("pricing") is pricing
        assert store.get("inventory") is None
        assert "pricing" in store
        assert store.names() == frozenset({"pricing"})
        assert store.snapshot() == {"pricing": pricing}

    def test_invocation_descriptions(self) -> None:
        assert Invocation(OperationKind.GET, "pricing").describe() == "get 'pricing'"
        assert Invocation(OperationKind.CALL, "refresh").describe() == "call 'refresh()'"
        assert (
            Invocation(OperationKind.CALL, "refresh", ("daily",), (("force", True),)).describe()
            == "call 'refresh('daily', force=True)'"
        )
        assert Invocation(OperationKind.INDEX, "", ("pricing",)).describe() == "index ['pricing']"
