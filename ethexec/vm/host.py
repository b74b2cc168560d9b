"""
Host collaborators of the execution core.

HostOracle supplies the current block height and timestamp.
BlockhashRegistry resolves the hashes of recent historical blocks.

Both must be deterministic for a given execution so that replays and
proofs see the same values. Subclass to connect to a real chain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ethexec.common.config import DEFAULT_CHAIN_ID, ZERO_HASH
from ethexec.common.crypto import keccak256

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Host oracle: block height / timestamp
# ---------------------------------------------------------------------------

class HostOracle:
    """Interface for block metadata provided by the surrounding node."""

    def current_block_height(self) -> int:
        raise NotImplementedError

    def current_block_timestamp(self) -> int:
        raise NotImplementedError


@dataclass(frozen=True)
class StaticHost(HostOracle):
    """Host oracle pinned to a fixed block height and timestamp."""

    block_number: int = 0
    timestamp: int = 0

    def current_block_height(self) -> int:
        return self.block_number

    def current_block_timestamp(self) -> int:
        return self.timestamp


# ---------------------------------------------------------------------------
# Blockhash registry
# ---------------------------------------------------------------------------

class BlockhashRegistry:
    """Interface for historical block hash lookups.

    Only queried for block numbers inside the BLOCKHASH window.
    """

    def get_blockhash(self, block_number: int) -> bytes:
        raise NotImplementedError


class InMemoryBlockhashRegistry(BlockhashRegistry):
    """Dict-backed registry; unknown blocks resolve to the zero hash."""

    def __init__(self, hashes: dict[int, bytes] | None = None) -> None:
        self._hashes: dict[int, bytes] = {}
        for number, block_hash in (hashes or {}).items():
            self.record(number, block_hash)

    def record(self, block_number: int, block_hash: bytes) -> None:
        if len(block_hash) != 32:
            raise ValueError(f"Block hash must be 32 bytes, got {len(block_hash)}")
        self._hashes[block_number] = block_hash

    def get_blockhash(self, block_number: int) -> bytes:
        return self._hashes.get(block_number, ZERO_HASH)

    def __len__(self) -> int:
        return len(self._hashes)


class DevBlockhashRegistry(BlockhashRegistry):
    """Synthetic hashes for local dev chains: keccak256(chain_id || number)."""

    def __init__(self, chain_id: int = DEFAULT_CHAIN_ID) -> None:
        self.chain_id = chain_id

    def get_blockhash(self, block_number: int) -> bytes:
        return keccak256(
            self.chain_id.to_bytes(32, "big") + block_number.to_bytes(32, "big")
        )


class CachedBlockhashRegistry(BlockhashRegistry):
    """Memoises lookups of an inner registry for the lifetime of one frame.

    Finalized hashes never change, but no assumption is made beyond a
    single execution: create a fresh wrapper per frame.
    """

    def __init__(self, inner: BlockhashRegistry) -> None:
        self.inner = inner
        self._cache: dict[int, bytes] = {}

    def get_blockhash(self, block_number: int) -> bytes:
        cached = self._cache.get(block_number)
        if cached is not None:
            return cached
        block_hash = self.inner.get_blockhash(block_number)
        logger.debug("Resolved blockhash for block %d: 0x%s", block_number, block_hash.hex())
        self._cache[block_number] = block_hash
        return block_hash
