"""Infrastructure providers."""

# Import bases
from .accounts import AccountsProvider
from .clock import ClockProvider
from .messaging import MessagingProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .accounts import ProdAccountsProvider  # noqa: F401
from .clock import ProdClockProvider  # noqa: F401
from .messaging import ProdMessagingProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "AccountsProvider",
    "ClockProvider",
    "MessagingProvider",
    "PersistenceProvider",
    "ProdAccountsProvider",
    "ProdClockProvider",
    "ProdMessagingProvider",
    "ProdPersistenceProvider",
]
