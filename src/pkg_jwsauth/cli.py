# src/pkg_jwsauth/cli.py

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .config.env import settings_from_env
from .domain.exceptions import MalformedTokenError
from .integrations.common.auth_factory import create_authenticator


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-jwsauth",
        description="Generate signing keys, issue and inspect JWS auth tokens",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log key loading and token checks to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    keys = sub.add_parser("generate-keys", help="Write a new PEM encoded RSA key pair.")
    keys.add_argument("--out-dir", "-o", default=".", help="Directory for public.pem / private.pem")
    keys.add_argument("--bits", type=int, default=2048, help="RSA modulus size (default: 2048)")
    keys.add_argument("--force", action="store_true", help="Overwrite existing key files.")

    issue = sub.add_parser(
        "issue",
        help="Sign a token for the given claims (keys and lifetimes from JWSAUTH_* env).",
    )
    issue.add_argument("claims", help='JSON object, e.g. \'{"id": 1, "username": "alice"}\'')

    inspect = sub.add_parser(
        "inspect",
        help="Decode a token and report signature, expiry and refresh state.",
    )
    inspect.add_argument("token", help="Token string, or '-' to read it from stdin")

    return parser.parse_args(args=argv)


def _generate_keys(args: argparse.Namespace) -> dict[str, Any]:
    out_dir = Path(args.out_dir)
    public_path = out_dir / "public.pem"
    private_path = out_dir / "private.pem"

    if not args.force:
        existing = [str(p) for p in (public_path, private_path) if p.exists()]
        if existing:
            raise FileExistsError(f"Refusing to overwrite {', '.join(existing)} (use --force)")

    key = rsa.generate_private_key(public_exponent=65537, key_size=args.bits)
    out_dir.mkdir(parents=True, exist_ok=True)
    private_path.write_bytes(
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    private_path.chmod(0o600)
    public_path.write_bytes(
        key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return {"public_key": str(public_path), "private_key": str(private_path)}


def _issue(args: argparse.Namespace) -> dict[str, Any]:
    claims = json.loads(args.claims)
    if not isinstance(claims, dict):
        raise ValueError("Claims must be a JSON object")

    authenticator = create_authenticator(settings_from_env())
    return {"token": authenticator.issue_token(claims)}


def _inspect(args: argparse.Namespace) -> dict[str, Any]:
    raw = sys.stdin.read() if args.token == "-" else args.token
    authenticator = create_authenticator(settings_from_env(require_private_key=False))
    manager = authenticator.token_manager
    refresh_policy = authenticator.refresh_use_case.refresh_policy

    try:
        token = manager.load(raw.strip())
    except MalformedTokenError as exc:
        return {"valid": False, "error": str(exc)}

    now = manager.claims_policy.clock.now()
    return {
        "header": dict(token.header),
        "payload": dict(token.payload),
        "signature_valid": manager.verify(token),
        "expired": manager.claims_policy.is_expired(token.payload, now),
        "valid": manager.is_valid(token, now),
        "refresh_state": refresh_policy.evaluate(token.issued_at, now).value,
    }


_COMMANDS = {
    "generate-keys": _generate_keys,
    "issue": _issue,
    "inspect": _inspect,
}


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        summary = _COMMANDS[args.command](args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
