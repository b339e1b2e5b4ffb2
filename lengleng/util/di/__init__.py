"""Dependency injection module."""

from typing import Type

from lengleng.util.di.application import ProdApplicationProvider
from lengleng.util.di.base import Component, ProviderBase
from lengleng.util.di.core import ProdConfigProvider
from lengleng.util.di.domain import ProdDomainProvider
from lengleng.util.di.infrastructure import (
    AccountsProvider,
    ClockProvider,
    MessagingProvider,
    PersistenceProvider,
    ProdAccountsProvider,
    ProdClockProvider,
    ProdMessagingProvider,
    ProdPersistenceProvider,
)
from lengleng.util.error import DependencyInjectionError

# Containers are built from this list in order; mockable bases resolve
# to one implementation each via get_provider
PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Infrastructure components (mockable)
    PersistenceProvider,
    MessagingProvider,
    AccountsProvider,
    ClockProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for a component.

    A base without subclasses is a concrete provider and is returned
    unchanged. Otherwise exactly one direct subclass must carry the
    requested ``__is_mock__`` flag.

    Args:
        base: Provider base class
        use_mock: Whether to select the mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If zero or several implementations match
    """
    subclasses = base.__subclasses__()
    if not subclasses:
        return base

    kind = "mock" if use_mock else "production"
    component_name = getattr(base, "__mock_component__", base.__name__)
    matches = [c for c in subclasses if getattr(c, "__is_mock__", False) == use_mock]

    if not matches:
        raise DependencyInjectionError(
            f"No {kind} implementation for {component_name}"
        )
    if len(matches) > 1:
        names = ", ".join(c.__name__ for c in matches)
        raise DependencyInjectionError(
            f"Ambiguous {kind} implementation for {component_name}: {names}"
        )
    return matches[0]


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    # Infrastructure base classes
    "AccountsProvider",
    "ClockProvider",
    "MessagingProvider",
    "PersistenceProvider",
    # Infrastructure implementations
    "ProdAccountsProvider",
    "ProdClockProvider",
    "ProdMessagingProvider",
    "ProdPersistenceProvider",
]
