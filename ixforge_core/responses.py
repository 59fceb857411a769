"""
Response encoding.

Turns built instructions into the JSON ``data`` objects each endpoint
returns.  The account list shape differs per endpoint and is part of
the public contract:

    ACCOUNTS_META     [{"pubkey", "is_signer", "is_writable"}, ...]   /token/create, /token/mint
    ACCOUNTS_SIGNER   [{"pubkey", "is_signer"}, ...]                  /send/token
    ACCOUNTS_ADDRESS  ["<address>", "<address>"]                      /send/sol

Payload bytes are standard base64 with padding.
"""

from __future__ import annotations

import base64
from typing import Any, Callable

from solders.instruction import AccountMeta, Instruction

from ixforge_core.address import encode_address
from ixforge_core.keypair import GeneratedKeypair

ACCOUNTS_META = "meta"
ACCOUNTS_SIGNER = "signer"
ACCOUNTS_ADDRESS = "address"

# /send/sol only ever exposes the payer and the recipient
NATIVE_TRANSFER_ACCOUNTS = 2


def encode_payload(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def _account_meta(meta: AccountMeta) -> dict:
    return {
        "pubkey": encode_address(meta.pubkey),
        "is_signer": meta.is_signer,
        "is_writable": meta.is_writable,
    }


def _account_signer(meta: AccountMeta) -> dict:
    return {
        "pubkey": encode_address(meta.pubkey),
        "is_signer": meta.is_signer,
    }


def _account_address(meta: AccountMeta) -> str:
    return encode_address(meta.pubkey)


_ACCOUNT_ENCODERS: dict[str, Callable[[AccountMeta], Any]] = {
    ACCOUNTS_META: _account_meta,
    ACCOUNTS_SIGNER: _account_signer,
    ACCOUNTS_ADDRESS: _account_address,
}


def encode_instruction(
    ix: Instruction,
    accounts: str = ACCOUNTS_META,
    *,
    limit: int | None = None,
) -> dict:
    """
    Encode *ix* as ``{program_id, accounts, instruction_data}``.

    ``accounts`` picks one of the account shapes above; ``limit``
    truncates the account list to its first *limit* entries.
    """
    try:
        encode_account = _ACCOUNT_ENCODERS[accounts]
    except KeyError:
        raise ValueError(f"unknown account shape: {accounts!r}") from None

    metas = list(ix.accounts)
    if limit is not None:
        metas = metas[:limit]
    return {
        "program_id": encode_address(ix.program_id),
        "accounts": [encode_account(m) for m in metas],
        "instruction_data": encode_payload(ix.data),
    }


def encode_native_transfer(ix: Instruction) -> dict:
    return encode_instruction(ix, ACCOUNTS_ADDRESS, limit=NATIVE_TRANSFER_ACCOUNTS)


def encode_token_transfer(ix: Instruction) -> dict:
    return encode_instruction(ix, ACCOUNTS_SIGNER)


def encode_keypair(kp: GeneratedKeypair) -> dict:
    return kp.to_dict()
