"""
Shared pytest fixtures for the ixforge test suite.
"""

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey


@pytest.fixture
def alice() -> Pubkey:
    """Fresh random address."""
    return Keypair().pubkey()


@pytest.fixture
def bob() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def mint() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def addr():
    """Return the text form of a fresh random address on each call."""
    return lambda: str(Keypair().pubkey())
