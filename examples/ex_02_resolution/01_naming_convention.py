"""Focused example: naming convention picks one of several implementations."""

from __future__ import annotations

from typing import Protocol

from facadewire import ImplementationResolver, NamingConvention, StaticTypeUniverse


class IPricingService(Protocol):
    def price(self, sku: str) -> int: ...


class LegacyPricing(IPricingService):
    def price(self, sku: str) -> int:
        return 90


class PricingServiceImplementation(IPricingService):
    def price(self, sku: str) -> int:
        return 100


def main() -> None:
    universe = StaticTypeUniverse([LegacyPricing, PricingServiceImplementation])
    resolver = ImplementationResolver(universe)
    names = NamingConvention().candidate_names(IPricingService)

    print(f"first_choice={names[0]}")  # => first_choice=PricingService
    print(f"fallbacks={names[1:]}")  # => fallbacks=['PricingServiceImplementation', 'PricingServiceRepository']
    print(f"resolved={resolver.resolve(IPricingService).__name__}")  # => resolved=PricingServiceImplementation


if __name__ == "__main__":
    main()
