"""Quickstart: aggregate two services behind one facade interface."""

from __future__ import annotations

from typing import Protocol

from facadewire import FacadeBuilder, ImplementationResolver, StaticTypeUniverse


class IPricingService(Protocol):
    def price(self, sku: str) -> int: ...


class IInventoryService(Protocol):
    def in_stock(self, sku: str) -> bool: ...


class PricingService(IPricingService):
    def price(self, sku: str) -> int:
        return 42


class WarehouseInventory(IInventoryService):
    def in_stock(self, sku: str) -> bool:
        return True


class IOrderFacade(Protocol):
    @property
    def pricing(self) -> IPricingService: ...

    @property
    def inventory(self) -> IInventoryService: ...


def main() -> None:
    resolver = ImplementationResolver(StaticTypeUniverse([PricingService, WarehouseInventory]))
    builder = FacadeBuilder(resolver, lambda implementation_type, _: implementation_type())

    orders: IOrderFacade = builder.build(IOrderFacade).facade

    print(f"price={orders.pricing.price('sku-1')}")  # => price=42
    print(f"in_stock={orders.inventory.in_stock('sku-1')}")  # => in_stock=True


if __name__ == "__main__":
    main()
