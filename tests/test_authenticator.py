# tests/test_authenticator.py
import time
from dataclasses import dataclass, field
from datetime import timedelta

import pytest
from freezegun import freeze_time
from jwt.utils import base64url_encode

from conftest import DAY, HOUR, NOW
from pkg_jwsauth.adapters.keys.static import StaticKeyProvider
from pkg_jwsauth.config.settings import JWSAuthSettings
from pkg_jwsauth.domain.constants import AuthFailureKind
from pkg_jwsauth.domain.entities import AuthFailure, SimpleIdentity
from pkg_jwsauth.domain.exceptions import KeyLoadError
from pkg_jwsauth.integrations.common.auth_factory import create_authenticator


def _payload(authenticator, token):
    return dict(authenticator.token_manager.load(token).payload)


def _sign(authenticator, payload):
    """Sign a raw payload with the authenticator's own key, bypassing stamping."""
    manager = authenticator.token_manager
    return manager.codec.encode(payload, manager.key_provider.get_private_key(), manager.algorithm)


# --- issue ------------------------------------------------------------------


def test_issue_token_stamps_iat_and_exp(authenticator):
    token = authenticator.issue_token({"id": 1, "username": "alice"})

    assert _payload(authenticator, token) == {
        "id": 1,
        "username": "alice",
        "iat": NOW,
        "exp": NOW + HOUR,
    }


def test_issue_token_from_identity(authenticator):
    identity = SimpleIdentity(id=7, username="bob", authorizations=["admin"], info={"team": "x"})

    payload = _payload(authenticator, authenticator.issue_token(identity))

    assert payload["authorizations"] == ["admin"]
    assert payload["info"] == {"team": "x"}
    assert payload["iat"] == NOW


def test_issue_token_always_stamps_login_time(authenticator):
    token = authenticator.issue_token({"id": 1, "iat": NOW - 10 * DAY, "exp": NOW + 10 * DAY})

    assert _payload(authenticator, token) == {"id": 1, "iat": NOW, "exp": NOW + HOUR}

    # carrying an issue time over is reserved to refresh
    with pytest.raises(TypeError):
        authenticator.issue_use_case.execute({"id": 1}, issued_at=NOW - DAY)


def test_issue_token_without_validity_has_no_exp(settings, clock):
    settings.validity = None
    authenticator = create_authenticator(settings, clock=clock)

    assert "exp" not in _payload(authenticator, authenticator.issue_token({"id": 1}))


# --- authenticate -----------------------------------------------------------


def test_authenticate_returns_identity_without_exp(authenticator):
    identity = authenticator.authenticate(authenticator.issue_token({"id": 1, "username": "alice"}))

    assert isinstance(identity, SimpleIdentity)
    assert identity.id == 1
    assert identity.username == "alice"
    assert identity.issued_at == NOW
    assert identity.token_claims() == {"id": 1, "username": "alice"}
    assert "exp" not in identity.extra


def test_authenticate_passes_unknown_claims_through(authenticator):
    token = authenticator.issue_token({"id": 1, "username": "alice", "tenant": "acme"})
    identity = authenticator.authenticate(token)

    assert identity.extra == {"tenant": "acme"}


@pytest.mark.parametrize("credential", [None, ""])
def test_authenticate_missing(authenticator, credential):
    result = authenticator.authenticate(credential)
    assert isinstance(result, AuthFailure)
    assert result.kind is AuthFailureKind.MISSING


@pytest.mark.parametrize("credential", ["garbage", "a.b.c", "x.y"])
def test_authenticate_garbage(authenticator, credential):
    result = authenticator.authenticate(credential)
    assert isinstance(result, AuthFailure)
    assert result.kind is AuthFailureKind.INVALID_OR_EXPIRED


def _hostile_credentials(authenticator):
    nested = base64url_encode(b"[" * 100_000 + b"]" * 100_000).decode()
    bad_utf8 = base64url_encode(b'{"alg":"\xc3\x28"}').decode()
    header, payload, _ = _sign(authenticator, {"id": 1, "iat": NOW, "exp": NOW + HOUR}).split(".")

    return {
        "nested header": f"{nested}.e30.c2ln",
        "nested payload": f"{header}.{nested}.c2ln",
        "invalid utf-8 header": f"{bad_utf8}.e30.c2ln",
        "invalid utf-8 payload": f"{header}.{bad_utf8}.c2ln",
        "one byte signature": f"{header}.{payload}.AA",
    }


def test_authenticate_hostile_segments(authenticator):
    for name, credential in _hostile_credentials(authenticator).items():
        result = authenticator.authenticate(credential)
        assert isinstance(result, AuthFailure), name
        assert result.kind is AuthFailureKind.INVALID_OR_EXPIRED, name


def test_refresh_hostile_segments(authenticator):
    for name, credential in _hostile_credentials(authenticator).items():
        result = authenticator.refresh(credential)
        assert isinstance(result, AuthFailure), name
        assert result.kind is AuthFailureKind.INVALID_OR_EXPIRED, name


def test_authenticate_expiration_boundary(authenticator):
    valid = _sign(authenticator, {"id": 1, "iat": NOW - HOUR, "exp": NOW + 1})
    expired = _sign(authenticator, {"id": 1, "iat": NOW - HOUR, "exp": NOW - 1})

    assert isinstance(authenticator.authenticate(valid), SimpleIdentity)
    assert authenticator.authenticate(expired).kind is AuthFailureKind.INVALID_OR_EXPIRED


def test_authenticate_rejects_foreign_signature(authenticator, other_rsa_key):
    forged = authenticator.token_manager.codec.encode(
        {"id": 1, "iat": NOW, "exp": NOW + HOUR}, other_rsa_key, "RS256"
    )
    assert authenticator.authenticate(forged).kind is AuthFailureKind.INVALID_OR_EXPIRED


def test_authenticate_rejects_unusable_payload(authenticator):
    token = _sign(authenticator, {"id": 1, "authorizations": 5, "iat": NOW})
    assert authenticator.authenticate(token).kind is AuthFailureKind.INVALID_OR_EXPIRED


def test_key_load_errors_propagate(tmp_path, clock):
    authenticator = create_authenticator(
        JWSAuthSettings(
            public_key_path=str(tmp_path / "missing.pem"),
            private_key_path=str(tmp_path / "missing.pem"),
        ),
        clock=clock,
    )

    with pytest.raises(KeyLoadError):
        authenticator.issue_token({"id": 1})
    with pytest.raises(KeyLoadError):
        authenticator.authenticate("eyJhbGciOiJSUzI1NiJ9.e30.c2ln")


# --- refresh ----------------------------------------------------------------


def test_refresh_expired_token_within_window(authenticator, clock):
    token = authenticator.issue_token({"id": 1, "username": "alice"})
    clock.advance(timedelta(hours=2))

    assert authenticator.authenticate(token).kind is AuthFailureKind.INVALID_OR_EXPIRED

    refreshed = authenticator.refresh(token)
    assert isinstance(refreshed, str)
    assert _payload(authenticator, refreshed) == {
        "id": 1,
        "username": "alice",
        "iat": NOW,
        "exp": NOW + 2 * HOUR + HOUR,
    }
    assert isinstance(authenticator.authenticate(refreshed), SimpleIdentity)


def test_refresh_window_measured_from_original_issue(authenticator, clock):
    token = authenticator.issue_token({"id": 1})

    clock.advance(timedelta(hours=20))
    token = authenticator.refresh(token)
    assert isinstance(token, str)

    # a refreshed token does not extend the window
    clock.advance(timedelta(hours=4, seconds=1))
    assert authenticator.refresh(token).kind is AuthFailureKind.REFRESH_EXPIRED


def test_refresh_boundary(authenticator):
    at_boundary = _sign(authenticator, {"id": 1, "iat": NOW - DAY, "exp": NOW - DAY + HOUR})
    past_boundary = _sign(authenticator, {"id": 1, "iat": NOW - DAY - 1, "exp": NOW - DAY + HOUR})

    assert isinstance(authenticator.refresh(at_boundary), str)
    assert authenticator.refresh(past_boundary).kind is AuthFailureKind.REFRESH_EXPIRED


def test_refresh_without_window(settings, clock):
    settings.refresh_window = None
    authenticator = create_authenticator(settings, clock=clock)

    token = authenticator.issue_token({"id": 1})
    assert authenticator.refresh(token).kind is AuthFailureKind.REFRESH_EXPIRED


def test_refresh_token_without_iat(authenticator):
    token = _sign(authenticator, {"id": 1, "exp": NOW - 1})
    assert authenticator.refresh(token).kind is AuthFailureKind.REFRESH_EXPIRED


def test_refresh_missing_and_invalid(authenticator, other_rsa_key):
    assert authenticator.refresh(None).kind is AuthFailureKind.MISSING
    assert authenticator.refresh("garbage").kind is AuthFailureKind.INVALID_OR_EXPIRED

    forged = authenticator.token_manager.codec.encode({"id": 1, "iat": NOW}, other_rsa_key, "RS256")
    assert authenticator.refresh(forged).kind is AuthFailureKind.INVALID_OR_EXPIRED


@dataclass
class _Directory:
    """IdentityLookup backed by a dict of current users."""
    users: dict = field(default_factory=dict)
    lookups: list = field(default_factory=list)

    def resolve(self, identity):
        self.lookups.append(identity.id)
        return self.users.get(identity.id)


def test_refresh_uses_current_identity_claims(settings, clock):
    directory = _Directory(users={1: SimpleIdentity(id=1, username="alice", authorizations=["admin"])})
    authenticator = create_authenticator(settings, clock=clock, identity_lookup=directory)

    token = authenticator.issue_token({"id": 1, "username": "alice"})
    clock.advance(timedelta(hours=2))

    payload = _payload(authenticator, authenticator.refresh(token))

    assert directory.lookups == [1]
    assert payload["authorizations"] == ["admin"]
    assert payload["iat"] == NOW


def test_refresh_fails_when_identity_is_gone(settings, clock):
    authenticator = create_authenticator(settings, clock=clock, identity_lookup=_Directory())

    token = authenticator.issue_token({"id": 1, "username": "alice"})
    assert authenticator.refresh(token).kind is AuthFailureKind.INVALID_OR_EXPIRED


def test_custom_identity_factory(settings, clock):
    @dataclass
    class User:
        id: int
        issued_at: int = None

        def token_claims(self):
            return {"id": self.id}

    def factory(claims):
        return User(id=claims["id"], issued_at=claims.get("iat"))

    authenticator = create_authenticator(settings, clock=clock, identity_factory=factory)

    identity = authenticator.authenticate(authenticator.issue_token(User(id=3)))
    assert identity == User(id=3, issued_at=NOW)

    # factory errors on unexpected payloads become auth failures
    token = _sign(authenticator, {"iat": NOW})
    assert authenticator.authenticate(token).kind is AuthFailureKind.INVALID_OR_EXPIRED


def test_hmac_authenticator(clock):
    authenticator = create_authenticator(
        JWSAuthSettings(algorithm="HS256"),
        key_provider=StaticKeyProvider.shared_secret(b"0123456789abcdef" * 4),
        clock=clock,
    )
    identity = authenticator.authenticate(authenticator.issue_token({"id": 1, "username": "alice"}))
    assert identity.username == "alice"


# --- end to end ---------------------------------------------------------------


def test_login_expire_refresh_scenario(settings):
    with freeze_time("2024-01-01 12:00:00") as frozen:
        authenticator = create_authenticator(settings)
        issued_at = int(time.time())

        token = authenticator.issue_token({"id": 1, "username": "alice"})

        identity = authenticator.authenticate(token)
        assert isinstance(identity, SimpleIdentity)
        assert identity.token_claims() == {"id": 1, "username": "alice"}

        frozen.tick(timedelta(hours=2))

        failure = authenticator.authenticate(token)
        assert isinstance(failure, AuthFailure)
        assert failure.kind is AuthFailureKind.INVALID_OR_EXPIRED

        refreshed = authenticator.refresh(token)
        assert isinstance(refreshed, str)

        payload = _payload(authenticator, refreshed)
        assert payload["iat"] == issued_at
        assert payload["exp"] == issued_at + 3 * HOUR
        assert authenticator.authenticate(refreshed).token_claims() == {"id": 1, "username": "alice"}
