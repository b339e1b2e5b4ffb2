"""Identity provider implementations."""

from lengleng.domain.service.identity import IdentityProvider
from lengleng.domain.value import UserId


class StaticIdentityProvider(IdentityProvider):
    """Identity provider backed by an in-memory set of premium users.

    For tests and local development; production hands its own provider
    to the container.
    """

    def __init__(self, premium_users: set[UserId] | None = None) -> None:
        self.premium_users: set[UserId] = set(premium_users or ())

    async def is_premium(self, user_id: UserId) -> bool:
        return user_id in self.premium_users

    def set_premium(self, user_id: UserId, active: bool = True) -> None:
        """Activate or lapse a user's premium status."""
        if active:
            self.premium_users.add(user_id)
        else:
            self.premium_users.discard(user_id)
