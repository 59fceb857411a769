"""
Address codec for ixforge.

An address is a 32-byte public key with exactly one text form: its
base-58 encoding.  Every address that reaches an instruction builder
has gone through :func:`decode_address` first.

Usage:
    from ixforge_core.address import decode_address, encode_address
    pk = decode_address("11111111111111111111111111111111")
    assert encode_address(pk) == "11111111111111111111111111111111"
"""

from __future__ import annotations

from typing import Any

import base58
from solders.pubkey import Pubkey

ADDRESS_LENGTH = 32


class AddressDecodeError(ValueError):
    """Raised when a string is not a canonical base-58 32-byte address."""


def decode_address(text: Any) -> Pubkey:
    """Parse *text* into a :class:`Pubkey`.

    No trimming or case folding is applied: the input must already be
    the canonical encoding of a 32-byte value.
    """
    if not isinstance(text, str):
        raise AddressDecodeError("address must be a string")
    if not text:
        raise AddressDecodeError("address is empty")
    try:
        raw = base58.b58decode(text)
    except ValueError as exc:
        raise AddressDecodeError("address is not valid base-58") from exc
    if len(raw) != ADDRESS_LENGTH:
        raise AddressDecodeError(
            f"address decodes to {len(raw)} bytes, expected {ADDRESS_LENGTH}"
        )
    # base58 tolerates some padding (e.g. trailing whitespace); only the
    # exact encoding of the decoded bytes is accepted.
    if base58.b58encode(raw).decode("ascii") != text:
        raise AddressDecodeError("address is not canonically encoded")
    return Pubkey(raw)


def encode_address(pubkey: Pubkey) -> str:
    """Return the canonical base-58 text of *pubkey*."""
    return base58.b58encode(bytes(pubkey)).decode("ascii")


def is_valid_address(text: Any) -> bool:
    try:
        decode_address(text)
    except AddressDecodeError:
        return False
    return True
