"""
Offline verification tokens.

A check response may carry a JWT signed with Ed25519 so that client
software can cache the result and verify it without calling back.
Claims: sub (license key), iss, valid, features and, when the license
expires, exp.
"""
import base64
import binascii
from datetime import datetime
from typing import Any, Dict, List, Optional

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from core.domain.exceptions import SigningUnavailableError

ALGORITHM = "EdDSA"
DEFAULT_ISSUER = "license-key-service"
SEED_SIZE = 32


def _decode_key_material(value: str) -> bytes:
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SigningUnavailableError("Signing key is not valid base64") from exc


def load_private_key(private_key_b64: str) -> Ed25519PrivateKey:
    """
    Load an Ed25519 private key from base64.

    Accepts the 32-byte seed or the 64-byte seed-plus-public-key form.

    Raises:
        SigningUnavailableError: If the material is absent or malformed
    """
    if not private_key_b64:
        raise SigningUnavailableError()
    raw = _decode_key_material(private_key_b64)
    if len(raw) not in (SEED_SIZE, 2 * SEED_SIZE):
        raise SigningUnavailableError(
            f"Signing key must be {SEED_SIZE} or {2 * SEED_SIZE} bytes, got {len(raw)}"
        )
    return Ed25519PrivateKey.from_private_bytes(raw[:SEED_SIZE])


def load_public_key(public_key_b64: str) -> Ed25519PublicKey:
    """
    Load an Ed25519 public key from base64 (32 raw bytes).

    Raises:
        SigningUnavailableError: If the material is absent or malformed
    """
    if not public_key_b64:
        raise SigningUnavailableError("Verification key is not configured")
    raw = _decode_key_material(public_key_b64)
    if len(raw) != SEED_SIZE:
        raise SigningUnavailableError(
            f"Verification key must be {SEED_SIZE} bytes, got {len(raw)}"
        )
    return Ed25519PublicKey.from_public_bytes(raw)


def generate_key_pair() -> Dict[str, str]:
    """
    Generate a fresh key pair in the configured base64 formats.

    Returns:
        Dict with "private_key" (64-byte seed+public) and "public_key" (32 bytes)
    """
    private_key = Ed25519PrivateKey.generate()
    seed = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return {
        "private_key": base64.b64encode(seed + public).decode("ascii"),
        "public_key": base64.b64encode(public).decode("ascii"),
    }


class LicenseTokenSigner:
    """Signs check results as EdDSA JWTs."""

    def __init__(self, private_key_b64: str, issuer: str = DEFAULT_ISSUER):
        """
        Initialize signer.

        Args:
            private_key_b64: Base64 Ed25519 key material
            issuer: Value of the iss claim

        Raises:
            SigningUnavailableError: If the key material is absent or malformed
        """
        self._private_key = load_private_key(private_key_b64)
        self.issuer = issuer or DEFAULT_ISSUER

    def sign(
        self,
        license_key: str,
        expires_at: Optional[datetime],
        valid: bool,
        features: List[str],
    ) -> str:
        """
        Sign a check result.

        Args:
            license_key: The checked key (sub claim)
            expires_at: License expiry (exp claim), None for never
            valid: Validation outcome
            features: Features enabled on the license

        Returns:
            Compact JWT string
        """
        claims: Dict[str, Any] = {
            "sub": license_key,
            "iss": self.issuer,
            "valid": valid,
            "features": list(features),
        }
        if expires_at is not None:
            claims["exp"] = int(expires_at.timestamp())
        return jwt.encode(claims, self._private_key, algorithm=ALGORITHM)


def verify_license_token(
    token: str, public_key_b64: str, issuer: str = DEFAULT_ISSUER
) -> Dict[str, Any]:
    """
    Verify a token offline and return its claims.

    Args:
        token: JWT produced by LicenseTokenSigner
        public_key_b64: Base64 Ed25519 public key
        issuer: Expected iss claim

    Returns:
        Decoded claims

    Raises:
        SigningUnavailableError: If the public key is absent or malformed
        jwt.InvalidTokenError: If the signature, issuer or expiry does not check out
    """
    public_key = load_public_key(public_key_b64)
    return jwt.decode(
        token,
        public_key,
        algorithms=[ALGORITHM],
        issuer=issuer or DEFAULT_ISSUER,
        options={"require": ["sub", "iss"]},
    )
