"""
EVM static gas costs.

Only the fixed per-opcode charges; transaction-wide limits are enforced
by the dispatch loop.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Base gas costs
# ---------------------------------------------------------------------------

G_ZERO = 0
G_BASE = 2
G_VERY_LOW = 3
G_LOW = 5
G_BLOCKHASH = 20

# BLOCKHASH sees blocks in (height - BLOCKHASH_WINDOW, height), both ends exclusive.
BLOCKHASH_WINDOW = 256
