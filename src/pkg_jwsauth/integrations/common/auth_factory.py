from __future__ import annotations

from typing import Optional

from ...adapters.clock import SystemClock
from ...adapters.jose.codec import JWSTokenCodec
from ...adapters.keys.pem import PemFileKeyProvider
from ...application.authenticator import Authenticator
from ...application.policies.claims import ClaimsPolicy
from ...application.policies.refresh import RefreshPolicy
from ...application.token_manager import TokenManager
from ...application.use_cases.authenticate import AuthenticateTokenUseCase, IdentityFactory
from ...application.use_cases.issue import IssueTokenUseCase
from ...application.use_cases.refresh import RefreshTokenUseCase
from ...config.settings import JWSAuthSettings
from ...domain.entities import SimpleIdentity
from ...domain.ports import Clock, IdentityLookup, KeyProvider, TokenCodec


def create_authenticator(
        settings: JWSAuthSettings,
        *,
        key_provider: Optional[KeyProvider] = None,
        codec: Optional[TokenCodec] = None,
        clock: Optional[Clock] = None,
        identity_factory: IdentityFactory = SimpleIdentity.from_claims,
        identity_lookup: Optional[IdentityLookup] = None,
) -> Authenticator:
    """
    High-level factory: settings -> Authenticator.

    - builds a PemFileKeyProvider from the configured paths (unless a
      provider is passed in)
    - wires TokenManager, policies and the three use cases sharing one clock
    - returns the Authenticator facade

    Keys are not touched here; they load on first sign/verify.
    """
    clock = clock or SystemClock()

    if key_provider is None:
        key_provider = PemFileKeyProvider(
            public_key_path=settings.public_key_path,
            private_key_path=settings.private_key_path,
            passphrase=settings.private_key_passphrase,
        )

    token_manager = TokenManager(
        codec=codec or JWSTokenCodec(token_type=settings.token_type),
        key_provider=key_provider,
        claims_policy=ClaimsPolicy(clock=clock),
        algorithm=settings.algorithm,
        validity=settings.validity,
    )
    refresh_policy = RefreshPolicy(refresh_window=settings.refresh_window, clock=clock)

    return Authenticator(
        token_manager=token_manager,
        issue_use_case=IssueTokenUseCase(token_manager=token_manager),
        auth_use_case=AuthenticateTokenUseCase(
            token_manager=token_manager,
            identity_factory=identity_factory,
        ),
        refresh_use_case=RefreshTokenUseCase(
            token_manager=token_manager,
            refresh_policy=refresh_policy,
            identity_factory=identity_factory,
            identity_lookup=identity_lookup,
        ),
    )
