from __future__ import annotations

import logging
import os
import re
import threading
from pathlib import Path
from typing import Any, List, Optional, Tuple

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from ...domain.exceptions import KeyLoadError

logger = logging.getLogger(__name__)

_PEM_BLOCK = re.compile(
    rb"-----BEGIN (?P<label>[A-Z0-9 ]+)-----.+?-----END (?P=label)-----",
    re.DOTALL,
)


def _pem_blocks(data: bytes) -> List[Tuple[str, bytes]]:
    """Split a PEM bundle into (label, block) pairs."""
    return [
        (match.group("label").decode("ascii"), match.group(0))
        for match in _PEM_BLOCK.finditer(data)
    ]


class PemFileKeyProvider:
    """
    KeyProvider reading PEM encoded keys from files.

    Either file may be a bundle: the public key file can hold a certificate
    instead of (or as well as) a bare public key, and the private key file
    can carry the certificate alongside the key.

    Each key is read and parsed once, on first use, and cached for the
    lifetime of the provider. First access is serialized so concurrent
    callers never load the same file twice.
    """

    def __init__(
        self,
        public_key_path: str | os.PathLike[str] | None,
        private_key_path: str | os.PathLike[str] | None = None,
        passphrase: str | bytes | None = None,
    ) -> None:
        self._public_key_path = public_key_path
        self._private_key_path = private_key_path
        self._passphrase = passphrase.encode() if isinstance(passphrase, str) else passphrase

        self._lock = threading.Lock()
        self._public_key: Optional[Any] = None
        self._private_key: Optional[Any] = None

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def get_public_key(self) -> Any:
        if self._public_key is None:
            with self._lock:
                if self._public_key is None:
                    self._public_key = self._load_public_key()
        return self._public_key

    def get_private_key(self) -> Any:
        if self._private_key is None:
            with self._lock:
                if self._private_key is None:
                    self._private_key = self._load_private_key()
        return self._private_key

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _load_public_key(self) -> Any:
        path, data = self._read("public", self._public_key_path)
        blocks = _pem_blocks(data)

        try:
            for label, block in blocks:
                if label.endswith("PUBLIC KEY"):
                    key = serialization.load_pem_public_key(block)
                    break
            else:
                cert = next((block for label, block in blocks if label == "CERTIFICATE"), None)
                if cert is None:
                    raise KeyLoadError(f"No PEM public key or certificate found in {path}")
                key = x509.load_pem_x509_certificate(cert).public_key()
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise KeyLoadError(f"Unable to parse public key from {path}: {exc}") from exc

        logger.info("Loaded public key from %s", path)
        return key

    def _load_private_key(self) -> Any:
        path, data = self._read("private", self._private_key_path)
        block = next(
            (block for label, block in _pem_blocks(data) if label.endswith("PRIVATE KEY")),
            None,
        )
        if block is None:
            raise KeyLoadError(f"No PEM private key found in {path}")

        try:
            key = serialization.load_pem_private_key(block, password=self._passphrase)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise KeyLoadError(f"Unable to parse private key from {path}: {exc}") from exc

        logger.info("Loaded private key from %s", path)
        return key

    @staticmethod
    def _read(kind: str, raw_path: str | os.PathLike[str] | None) -> Tuple[Path, bytes]:
        if not raw_path:
            raise KeyLoadError(f"No {kind} key file configured")

        path = Path(os.path.expandvars(os.path.expanduser(os.fspath(raw_path))))
        try:
            return path, path.read_bytes()
        except OSError as exc:
            raise KeyLoadError(f"Unable to read {kind} key file {path}: {exc}") from exc
