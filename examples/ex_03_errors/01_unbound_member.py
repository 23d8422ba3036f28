"""Focused example: reading a member before it is bound."""

from __future__ import annotations

from typing import Protocol

from facadewire import ProxyFactory
from facadewire.exceptions import FacadeWireMemberNotBoundError


class IClock(Protocol):
    def now(self) -> float: ...


class ISchedulerFacade(Protocol):
    @property
    def clock(self) -> IClock: ...


def main() -> None:
    proxy = ProxyFactory().create(ISchedulerFacade)

    try:
        _ = proxy.facade.clock
    except FacadeWireMemberNotBoundError as error:
        error_name = type(error).__name__

    print(f"unbound_error={error_name}")  # => unbound_error=FacadeWireMemberNotBoundError
    print(f"unbound_members={proxy.unbound_members}")  # => unbound_members=('clock',)


if __name__ == "__main__":
    main()
