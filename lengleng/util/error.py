"""Errors raised while wiring the engine, before any invitation is handled."""


class WiringError(Exception):
    """The engine could not be assembled from its settings and providers."""


class ConfigurationError(WiringError):
    """A required collaborator or setting was not supplied by the host app.

    For example, ``create_container`` called without an identity provider.
    """


class DependencyInjectionError(WiringError):
    """A mockable component resolved to no implementation or to several."""
