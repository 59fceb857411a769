"""
Keypair generation for ixforge.

A keypair is generated fresh for every request and handed back to the
caller once; the service keeps no identity of its own.  The secret is
the standard 64-byte layout (32-byte seed followed by the 32-byte
public key) and is exposed in base-58.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ixforge_core.address import encode_address

SECRET_LENGTH = 64


@dataclass(frozen=True)
class GeneratedKeypair:
    """A public key and its 64-byte secret."""
    pubkey: Pubkey
    secret: bytes = field(repr=False)

    @property
    def address(self) -> str:
        return encode_address(self.pubkey)

    def to_dict(self) -> dict:
        return {
            "pubkey": self.address,
            "secret": base58.b58encode(self.secret).decode("ascii"),
        }


def generate_keypair() -> GeneratedKeypair:
    """Generate a new Ed25519 keypair from the OS random source."""
    kp = Keypair()
    return GeneratedKeypair(pubkey=kp.pubkey(), secret=bytes(kp))


def keypair_from_secret(secret: str) -> GeneratedKeypair:
    """
    Restore a keypair from its base-58 secret.

    Raises ``ValueError`` if the secret is not valid base-58, is not 64
    bytes long, or its public half does not match its seed.
    """
    try:
        raw = base58.b58decode(secret)
    except ValueError as exc:
        raise ValueError("secret is not valid base-58") from exc
    if len(raw) != SECRET_LENGTH:
        raise ValueError(f"secret must be {SECRET_LENGTH} bytes, got {len(raw)}")
    kp = Keypair.from_seed(raw[:32])
    if bytes(kp.pubkey()) != raw[32:]:
        raise ValueError("secret public half does not match its seed")
    return GeneratedKeypair(pubkey=kp.pubkey(), secret=bytes(kp))
