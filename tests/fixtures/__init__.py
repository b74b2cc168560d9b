"""Test fixtures for execution core tests."""

from .addresses import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    CONTRACT_ADDRESS,
    CONTRACT_BALANCE,
    ZERO_ADDRESS,
)
from .blocks import (
    CURRENT_HEIGHT,
    CURRENT_TIMESTAMP,
    TEST_GAS_LIMIT,
    block_hash_for,
    recent_block_hashes,
)

__all__ = [
    # Addresses
    "ALICE_ADDRESS",
    "BOB_ADDRESS",
    "CONTRACT_ADDRESS",
    "CONTRACT_BALANCE",
    "ZERO_ADDRESS",
    # Blocks
    "CURRENT_HEIGHT",
    "CURRENT_TIMESTAMP",
    "TEST_GAS_LIMIT",
    "block_hash_for",
    "recent_block_hashes",
]
