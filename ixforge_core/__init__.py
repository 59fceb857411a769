"""
ixforge - builds ready-to-sign Solana instructions over HTTP.

Key features:
- Base-58 address validation with a strict round-trip codec
- Fresh Ed25519 keypair generation
- InitializeMint, MintTo and TransferChecked token-program instructions
- System-program lamport transfers
- Uniform JSON success / error envelopes

The service never signs, submits or simulates anything.
"""

__version__ = "0.3.0"
__all__ = [
    "address",
    "keypair",
    "instructions",
    "responses",
    "validation",
    "errors",
    "api",
    "config",
    "logging_config",
]
