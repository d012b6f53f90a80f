import json
import logging
from typing import Any, Dict, Mapping, Optional

from jwt.algorithms import Algorithm
from jwt.api_jws import PyJWS
from jwt.exceptions import InvalidKeyError, InvalidTokenError

from ...domain.constants import DEFAULT_TOKEN_TYPE
from ...domain.entities import Token
from ...domain.exceptions import KeyLoadError, MalformedTokenError
from ...domain.ports import TokenCodec

logger = logging.getLogger(__name__)


def _canonical_json(value: Mapping[str, Any]) -> bytes:
    return json.dumps(dict(value), separators=(",", ":"), sort_keys=True).encode("utf-8")


def _load_payload(data: bytes) -> Dict[str, Any]:
    try:
        value = json.loads(data)
    except (ValueError, RecursionError) as exc:
        raise MalformedTokenError(f"Invalid payload segment: {exc}") from exc

    if not isinstance(value, dict):
        raise MalformedTokenError("Invalid payload segment: not a JSON object")
    return value


class JWSTokenCodec(TokenCodec):
    """
    Adapter implementing TokenCodec on top of PyJWT's JWS layer.

    Only the JWS half of PyJWT is used: `decode` parses the compact form
    without checking the signature, `verify` checks the signature pinned to
    one algorithm, and claim evaluation (`exp`, `iat`) is left to the
    application policies so that the refresh path can accept an expired
    token whose signature is still good.

    RSA/EC/PSS/EdDSA need the `cryptography` package. `none` is never
    accepted.
    """

    def __init__(self, token_type: str = DEFAULT_TOKEN_TYPE) -> None:
        self._token_type = token_type
        self._jws = PyJWS()

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def decode(self, token: str) -> Token:
        if not isinstance(token, str):
            raise MalformedTokenError("Token must be a string")

        try:
            raw = token.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MalformedTokenError("Token contains non-ASCII characters") from exc

        count = raw.count(b".") + 1
        if count != 3:
            raise MalformedTokenError(f"Token must have 3 segments, got {count}")

        try:
            unverified = self._jws.decode_complete(
                raw, options={"verify_signature": False}
            )
        except InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc
        except RecursionError as exc:
            raise MalformedTokenError(f"Invalid header string: {exc}") from exc

        header = unverified["header"]
        if not isinstance(header.get("alg"), str):
            raise MalformedTokenError("Token header has no algorithm")

        return Token(
            header=header,
            payload=_load_payload(unverified["payload"]),
            signature=unverified["signature"],
            signing_input=raw.rsplit(b".", 1)[0],
            encoded=token,
        )

    def verify(self, token: Token, public_key: Any, algorithm: str) -> bool:
        # Pin to the configured algorithm; the header is attacker controlled.
        if token.algorithm != algorithm:
            logger.warning(
                "Rejected token declaring algorithm %r, expected %r",
                token.algorithm,
                algorithm,
            )
            return False

        alg = self._get_algorithm(algorithm)
        if alg is None:
            logger.warning("Rejected token with unsupported algorithm %r", algorithm)
            return False

        key = self._prepare_key(alg, public_key, algorithm)
        try:
            self._jws.decode_complete(token.encoded, key, algorithms=[algorithm])
        except InvalidTokenError as exc:
            logger.debug("Signature check failed: %s", exc)
            return False
        except RecursionError:
            return False
        return True

    def encode(self, claims: Mapping[str, Any], private_key: Any, algorithm: str) -> str:
        alg = self._get_algorithm(algorithm)
        if alg is None:
            raise ValueError(f"Unsupported signing algorithm: {algorithm!r}")

        key = self._prepare_key(alg, private_key, algorithm)
        return self._jws.encode(
            _canonical_json(claims),
            key,
            algorithm=algorithm,
            headers={"typ": self._token_type},
            sort_headers=True,
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _get_algorithm(self, name: str) -> Optional[Algorithm]:
        if not name or name.lower() == "none":
            return None
        try:
            return self._jws.get_algorithm_by_name(name)
        except NotImplementedError:
            return None

    @staticmethod
    def _prepare_key(alg: Algorithm, key: Any, algorithm: str) -> Any:
        try:
            return alg.prepare_key(key)
        except (InvalidKeyError, ValueError, TypeError) as exc:
            raise KeyLoadError(f"Key is not usable with {algorithm}: {exc}") from exc
