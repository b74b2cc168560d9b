"""
Chain configuration for the execution core.

Protocol placeholders the block-information opcodes read (coinbase, chain
id, difficulty, base fee) live here as named values so they can change
without touching opcode logic.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from eth_utils import to_canonical_address


ZERO_ADDRESS = b"\x00" * 20
ZERO_HASH = b"\x00" * 32

# ---------------------------------------------------------------------------
# Protocol placeholders
# ---------------------------------------------------------------------------

DEFAULT_CHAIN_ID = 1_263_227_476
DEFAULT_COINBASE = bytes.fromhex("00" * 19 + "c0")

# Post-merge: difficulty is defined to be zero.
DIFFICULTY = 0
# Base fee is not modelled.
BASE_FEE = 0

MAX_CHAIN_ID = (1 << 64) - 1


# ---------------------------------------------------------------------------
# Chain config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChainConfig:
    chain_id: int = DEFAULT_CHAIN_ID
    chain_name: str = "dev"
    coinbase: bytes = field(default=DEFAULT_COINBASE)

    def __post_init__(self) -> None:
        if not 0 <= self.chain_id <= MAX_CHAIN_ID:
            raise ValueError(f"chain_id out of range: {self.chain_id}")
        if len(self.coinbase) != 20:
            raise ValueError(f"coinbase must be 20 bytes, got {len(self.coinbase)}")

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ChainConfig:
        """Parse a config dict (``chainId``, ``chainName``, ``coinbase``)."""

        def parse_int(val: str | int, default: int) -> int:
            if isinstance(val, int):
                return val
            if isinstance(val, str):
                return int(val, 0) if val else default
            return default

        coinbase_hex = data.get("coinbase")
        coinbase = to_canonical_address(coinbase_hex) if coinbase_hex else DEFAULT_COINBASE

        return cls(
            chain_id=parse_int(data.get("chainId", DEFAULT_CHAIN_ID), DEFAULT_CHAIN_ID),
            chain_name=data.get("chainName", "dev"),
            coinbase=coinbase,
        )


def load_chain_config(path: str | Path) -> ChainConfig:
    """Load a ChainConfig from a JSON file."""
    data = json.loads(Path(path).read_text())
    return ChainConfig.from_json(data)


# ---------------------------------------------------------------------------
# Default chain config
# ---------------------------------------------------------------------------

DEV_CONFIG = ChainConfig()
