# tests/conftest.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pkg_jwsauth.adapters.clock import FixedClock
from pkg_jwsauth.adapters.jose.codec import JWSTokenCodec
from pkg_jwsauth.adapters.keys.pem import PemFileKeyProvider
from pkg_jwsauth.config.settings import JWSAuthSettings
from pkg_jwsauth.integrations.common.auth_factory import create_authenticator

NOW = 1_700_000_000
HOUR = 3600
DAY = 24 * HOUR


@dataclass(frozen=True)
class KeyFiles:
    private_key: rsa.RSAPrivateKey
    public_path: Path
    private_path: Path

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.private_key.public_key()

    @property
    def public_pem(self) -> bytes:
        return self.public_path.read_bytes()


def write_key_pair(directory: Path, key: rsa.RSAPrivateKey) -> KeyFiles:
    directory.mkdir(parents=True, exist_ok=True)
    private_path = directory / "private.pem"
    public_path = directory / "public.pem"
    private_path.write_bytes(
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_path.write_bytes(
        key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return KeyFiles(private_key=key, public_path=public_path, private_path=private_path)


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def key_files(tmp_path_factory, rsa_key) -> KeyFiles:
    return write_key_pair(tmp_path_factory.mktemp("keys"), rsa_key)


@pytest.fixture()
def key_provider(key_files) -> PemFileKeyProvider:
    return PemFileKeyProvider(key_files.public_path, key_files.private_path)


@pytest.fixture()
def codec() -> JWSTokenCodec:
    return JWSTokenCodec()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def settings(key_files) -> JWSAuthSettings:
    return JWSAuthSettings(
        public_key_path=str(key_files.public_path),
        private_key_path=str(key_files.private_path),
        validity="1 hour",
        refresh_window="24 hours",
    )


@pytest.fixture()
def authenticator(settings, clock):
    return create_authenticator(settings, clock=clock)
