"""
Instruction builders for the system and token programs.

Thin wrappers over ``spl.token.instructions`` and
``solders.system_program``: each takes validated :class:`Pubkey` values
and integers and returns a :class:`solders.instruction.Instruction`.
The wrappers add the range and program-id checks the libraries leave to
the chain, and report every rejection as :class:`InstructionBuildError`.

Payload layouts produced (little-endian):

    initialize_mint    u8 0  | u8 decimals | [32] mint authority | COption<[32]> freeze
    mint_to            u8 7  | u64 amount
    transfer_checked   u8 12 | u64 amount  | u8 decimals
    system transfer    u32 2 | u64 lamports

Account order is positional and must not be changed.
"""

from __future__ import annotations

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import TransferParams, transfer
from solders.sysvar import RENT as RENT_SYSVAR_ID
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    initialize_mint as _spl_initialize_mint,
    mint_to as _spl_mint_to,
    transfer_checked as _spl_transfer_checked,
)
from spl.token.models import (
    InitializeMintParams,
    MintToParams,
    TransferCheckedParams,
)

__all__ = [
    "RENT_SYSVAR_ID",
    "SYSTEM_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "U8_MAX",
    "U64_MAX",
    "InstructionBuildError",
    "initialize_mint",
    "mint_to",
    "transfer_checked",
    "transfer_native",
]

U8_MAX = 0xFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF


class InstructionBuildError(ValueError):
    """Raised when a builder rejects its inputs."""


def _check_token_program(program_id: Pubkey) -> None:
    if program_id != TOKEN_PROGRAM_ID:
        raise InstructionBuildError("incorrect program id for instruction")


def _check_range(value: int, upper: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InstructionBuildError(f"{name} must be an integer")
    if value < 0 or value > upper:
        raise InstructionBuildError(f"{name} out of range")


def _build(build, params) -> Instruction:
    try:
        return build(params)
    except (ValueError, TypeError, OverflowError) as exc:
        raise InstructionBuildError(str(exc) or type(exc).__name__) from exc


# ═══════════════════════════════════════════════════════════════════
#  Token program
# ═══════════════════════════════════════════════════════════════════

def initialize_mint(
    mint: Pubkey,
    mint_authority: Pubkey,
    decimals: int,
    freeze_authority: Pubkey | None = None,
    *,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Build an InitializeMint instruction.

    The freeze authority defaults to the mint authority; a separate
    freeze authority is only reachable from Python callers.
    """
    _check_token_program(program_id)
    _check_range(decimals, U8_MAX, "decimals")
    if freeze_authority is None:
        freeze_authority = mint_authority
    return _build(_spl_initialize_mint, InitializeMintParams(
        decimals=decimals,
        program_id=program_id,
        mint=mint,
        mint_authority=mint_authority,
        freeze_authority=freeze_authority,
    ))


def mint_to(
    mint: Pubkey,
    destination: Pubkey,
    authority: Pubkey,
    amount: int,
    *,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Build a MintTo instruction signed by a single mint authority."""
    _check_token_program(program_id)
    _check_range(amount, U64_MAX, "amount")
    return _build(_spl_mint_to, MintToParams(
        program_id=program_id,
        mint=mint,
        dest=destination,
        mint_authority=authority,
        amount=amount,
    ))


def transfer_checked(
    source: Pubkey,
    mint: Pubkey,
    destination: Pubkey,
    owner: Pubkey,
    amount: int,
    decimals: int,
    *,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Build a TransferChecked instruction.

    *decimals* must match the mint's decimals or the token program
    rejects the instruction at execution time.
    """
    _check_token_program(program_id)
    _check_range(amount, U64_MAX, "amount")
    _check_range(decimals, U8_MAX, "decimals")
    return _build(_spl_transfer_checked, TransferCheckedParams(
        program_id=program_id,
        source=source,
        mint=mint,
        dest=destination,
        owner=owner,
        amount=amount,
        decimals=decimals,
    ))


# ═══════════════════════════════════════════════════════════════════
#  System program
# ═══════════════════════════════════════════════════════════════════

def transfer_native(from_pubkey: Pubkey, to_pubkey: Pubkey, lamports: int) -> Instruction:
    """Build a system-program lamport transfer."""
    _check_range(lamports, U64_MAX, "lamports")
    return _build(transfer, TransferParams(
        from_pubkey=from_pubkey,
        to_pubkey=to_pubkey,
        lamports=lamports,
    ))
