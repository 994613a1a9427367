"""GitHub App authentication: private key loading and JWT signing."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from tokenclone.errors import JWTSigningError, PrivateKeyError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "RS256"
JWT_LIFETIME_SECONDS = 10 * 60  # GitHub rejects App JWTs living longer than 10 minutes


def load_private_key(path: str | Path) -> RSAPrivateKey:
    """Read and parse the App's PEM-encoded RSA private key."""
    key_path = Path(path)
    try:
        pem = key_path.read_bytes()
    except OSError as e:
        raise PrivateKeyError(f"Error reading private key {key_path}: {e}") from e

    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise PrivateKeyError(f"Error parsing private key {key_path}: {e}") from e

    if not isinstance(key, RSAPrivateKey):
        raise PrivateKeyError(f"Private key {key_path} is not an RSA key")

    logger.info(f"Loaded {key.key_size}-bit RSA private key from {key_path}")
    return key


def build_claims(app_id: str, now: datetime | None = None) -> dict[str, int | str]:
    """Registered claims asserting the App as issuer, valid for ten minutes."""
    issued_at = int((now or datetime.now(timezone.utc)).timestamp())
    return {
        "iss": app_id,
        "iat": issued_at,
        "exp": issued_at + JWT_LIFETIME_SECONDS,
    }


def generate_jwt(
    app_id: str, private_key: RSAPrivateKey, now: datetime | None = None
) -> str:
    """Sign an RS256 JWT for authenticating as the GitHub App."""
    claims = build_claims(app_id, now)
    try:
        return jwt.encode(claims, private_key, algorithm=JWT_ALGORITHM)
    except (jwt.PyJWTError, ValueError, TypeError) as e:
        raise JWTSigningError(f"Error generating JWT: {e}") from e
