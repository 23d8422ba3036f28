from facadewire.contracts import ContractValidator, FacadeContract, Member, describe_facade
from facadewire.exceptions import (
    FacadeWireAmbiguousImplementationError,
    FacadeWireContractInvalidError,
    FacadeWireError,
    FacadeWireInvalidBindingError,
    FacadeWireMemberNotBoundError,
    FacadeWireNoImplementationFoundError,
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
from facadewire.registration import DependencyProvider, FacadeBuilder
from facadewire.resolver import ImplementationResolver, NamingConvention, ResolutionCache
from facadewire.universe import ModuleTypeUniverse, StaticTypeUniverse, TypeUniverse

__all__ = [
    "BindingStore",
    "ContractValidator",
    "DependencyProvider",
    "FacadeBuilder",
    "FacadeContract",
    "FacadeWireAmbiguousImplementationError",
    "FacadeWireContractInvalidError",
    "FacadeWireError",
    "FacadeWireInvalidBindingError",
    "FacadeWireMemberNotBoundError",
    "FacadeWireNoImplementationFoundError",
    "FacadeWireProxyCreationError",
    "FacadeWireUnsupportedOperationError",
    "ImplementationResolver",
    "Invocation",
    "LockMode",
    "Member",
    "ModuleTypeUniverse",
    "NamingConvention",
    "OperationKind",
    "ProxyFactory",
    "ProxyInstance",
    "ResolutionCache",
    "StaticTypeUniverse",
    "TypeUniverse",
    "describe_facade",
    "proxy_of",
]
