"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container

from lengleng.domain.service import IdentityProvider
from lengleng.util.di import PROVIDERS, get_provider
from lengleng.util.error import ConfigurationError


def create_container(identity_provider: IdentityProvider) -> AsyncContainer:
    """Build production container (all prod implementations).

    Settings are loaded from environment variables automatically.

    Args:
        identity_provider: The host application's identity provider

    Returns:
        Configured DI container with production providers

    Raises:
        ConfigurationError: If no identity provider is given
    """
    if identity_provider is None:
        raise ConfigurationError("An IdentityProvider is required")

    # Get provider instances - all are instantiated without arguments
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(
        *provider_instances, context={IdentityProvider: identity_provider}
    )
