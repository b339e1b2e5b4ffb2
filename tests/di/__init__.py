"""Mock providers for testing."""

from .accounts import MockAccountsProvider
from .clock import MockClockProvider
from .messaging import MockMessagingProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockAccountsProvider",
    "MockClockProvider",
    "MockMessagingProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
