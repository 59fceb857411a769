"""
Request decoding and validation.

Decoding happens in two passes, mirroring how the handlers have always
behaved:

1. The whole JSON object is checked structurally: every required field
   present with the right JSON type, integers in range.  Any failure is
   a :class:`MalformedRequest`.
2. Address fields are decoded one by one, in a fixed order, through
   :func:`decode_field`.  The first bad address stops the request with
   an :class:`InvalidAddress` naming that field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from solders.pubkey import Pubkey

from ixforge_core.address import AddressDecodeError, decode_address
from ixforge_core.errors import InvalidAddress, MalformedRequest
from ixforge_core.instructions import U8_MAX, U64_MAX

# Decimals assumed by /send/token when the caller does not send them.
DEFAULT_TRANSFER_DECIMALS = 6


# ═══════════════════════════════════════════════════════════════════
#  Field helpers
# ═══════════════════════════════════════════════════════════════════

def _require_object(body: Any) -> dict:
    if not isinstance(body, dict):
        raise MalformedRequest("request body must be a JSON object")
    return body


def _require_str(body: dict, key: str) -> str:
    if key not in body:
        raise MalformedRequest(f"missing field {key!r}")
    value = body[key]
    if not isinstance(value, str):
        raise MalformedRequest(f"{key!r} must be a string")
    return value


def _require_uint(body: dict, key: str, upper: int, *, default: int | None = None) -> int:
    if key not in body:
        if default is not None:
            return default
        raise MalformedRequest(f"missing field {key!r}")
    value = body[key]
    # bool is an int subclass; JSON true/false is not a number
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRequest(f"{key!r} must be an integer")
    if value < 0 or value > upper:
        raise MalformedRequest(f"{key!r} out of range")
    return value


def decode_field(text: str, field: str, label: str | None = None) -> Pubkey:
    """Decode one address field, naming it in the error on failure."""
    try:
        return decode_address(text)
    except AddressDecodeError as exc:
        raise InvalidAddress(field, label) from exc


# ═══════════════════════════════════════════════════════════════════
#  Request records
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CreateMintRequest:
    """POST /token/create  {mintAuthority, mint, decimals}"""
    mint_authority: Pubkey
    mint: Pubkey
    decimals: int

    @classmethod
    def from_json(cls, body: Any) -> "CreateMintRequest":
        body = _require_object(body)
        mint_authority = _require_str(body, "mintAuthority")
        mint = _require_str(body, "mint")
        decimals = _require_uint(body, "decimals", U8_MAX)
        return cls(
            mint_authority=decode_field(mint_authority, "mintAuthority", "mint authority"),
            mint=decode_field(mint, "mint"),
            decimals=decimals,
        )


@dataclass(frozen=True)
class MintToRequest:
    """POST /token/mint  {mint, destination, authority, amount}"""
    mint: Pubkey
    destination: Pubkey
    authority: Pubkey
    amount: int

    @classmethod
    def from_json(cls, body: Any) -> "MintToRequest":
        body = _require_object(body)
        mint = _require_str(body, "mint")
        destination = _require_str(body, "destination")
        authority = _require_str(body, "authority")
        amount = _require_uint(body, "amount", U64_MAX)
        # keyword arguments evaluate left to right: authority is checked first
        return cls(
            authority=decode_field(authority, "authority", "mint authority"),
            mint=decode_field(mint, "mint"),
            destination=decode_field(destination, "destination"),
            amount=amount,
        )


@dataclass(frozen=True)
class SendSolRequest:
    """POST /send/sol  {from, to, lamports}"""
    from_pubkey: Pubkey
    to_pubkey: Pubkey
    lamports: int

    @classmethod
    def from_json(cls, body: Any) -> "SendSolRequest":
        body = _require_object(body)
        from_addr = _require_str(body, "from")
        to_addr = _require_str(body, "to")
        lamports = _require_uint(body, "lamports", U64_MAX)
        return cls(
            from_pubkey=decode_field(from_addr, "from"),
            to_pubkey=decode_field(to_addr, "to"),
            lamports=lamports,
        )


@dataclass(frozen=True)
class SendTokenRequest:
    """POST /send/token  {destination, mint, owner, amount[, decimals]}"""
    owner: Pubkey
    destination: Pubkey
    mint: Pubkey
    amount: int
    decimals: int = DEFAULT_TRANSFER_DECIMALS

    @classmethod
    def from_json(cls, body: Any) -> "SendTokenRequest":
        body = _require_object(body)
        destination = _require_str(body, "destination")
        mint = _require_str(body, "mint")
        owner = _require_str(body, "owner")
        amount = _require_uint(body, "amount", U64_MAX)
        decimals = _require_uint(
            body, "decimals", U8_MAX, default=DEFAULT_TRANSFER_DECIMALS,
        )
        return cls(
            owner=decode_field(owner, "owner", "from"),
            destination=decode_field(destination, "destination", "to"),
            mint=decode_field(mint, "mint"),
            amount=amount,
            decimals=decimals,
        )
