"""Identity provider interface."""

from lengleng.domain.value import UserId


class IdentityProvider:
    """Source of account facts the engine does not own.

    The engine never authenticates; it trusts user IDs handed to it and
    asks here for premium status.
    """

    async def is_premium(self, user_id: UserId) -> bool:
        """Whether the user's premium subscription is currently active.

        Args:
            user_id: User to check

        Returns:
            True if premium is active
        """
        raise NotImplementedError
