"""Clock infrastructure providers."""

from dishka import Scope, provide

from lengleng.adapter.clock import SystemClock
from lengleng.domain.service import Clock
from lengleng.util.di.base import ProviderBase


class ClockProvider(ProviderBase):
    """Clock component base."""

    __mock_component__ = "clock"


class ProdClockProvider(ClockProvider):
    """Production clock provider (UTC wall clock)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_clock(self) -> Clock:
        """Provide system clock."""
        return SystemClock()
