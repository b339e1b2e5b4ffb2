"""Accounts infrastructure providers."""

from dishka import Scope, from_context

from lengleng.domain.service import IdentityProvider
from lengleng.util.di.base import ProviderBase


class AccountsProvider(ProviderBase):
    """Accounts component base."""

    __mock_component__ = "accounts"


class ProdAccountsProvider(AccountsProvider):
    """Production accounts provider.

    Identity and subscriptions live in the host application, which passes
    its IdentityProvider as container context.
    """

    __is_mock__ = False

    identity_provider = from_context(provides=IdentityProvider, scope=Scope.APP)
