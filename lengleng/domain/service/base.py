"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the engine's business rules: quota accounting,
    invitation transitions, rewards and reminders. They talk to storage
    and delivery only through the interfaces injected into them.
    """

    pass
