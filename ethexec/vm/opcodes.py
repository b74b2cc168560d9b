"""
EVM opcode definitions and handlers.

Each handler takes an ExecutionContext and returns the next one:
check stack bounds, compute the result, push it, thread stack/state and
charge the opcode's fixed gas. On a stack violation the handler returns
``stop(ctx, error)`` without charging gas. Handlers never move the program
counter; the dispatch loop does that from OPCODE_TABLE.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from ethexec.common.config import BASE_FEE, DIFFICULTY
from ethexec.vm.context import ExecutionContext, stop
from ethexec.vm.errors import StackOverflow, StackUnderflow
from ethexec.vm.gas import (
    BLOCKHASH_WINDOW,
    G_BASE,
    G_BLOCKHASH,
    G_LOW,
    G_VERY_LOW,
    G_ZERO,
)
from ethexec.vm.state import read_balance


Handler = Callable[[ExecutionContext], ExecutionContext]


# ---------------------------------------------------------------------------
# Opcode enum / names
# ---------------------------------------------------------------------------

# fmt: off
class Op:
    STOP            = 0x00
    BLOCKHASH       = 0x40
    COINBASE        = 0x41
    TIMESTAMP       = 0x42
    NUMBER          = 0x43
    DIFFICULTY      = 0x44  # PREVRANDAO post-merge, pinned to zero here
    GASLIMIT        = 0x45
    CHAINID         = 0x46
    SELFBALANCE     = 0x47
    BASEFEE         = 0x48
    POP             = 0x50
    PUSH0           = 0x5F
    PUSH1           = 0x60
    PUSH32          = 0x7F
# fmt: on


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _push_result(ctx: ExecutionContext, value: int, gas: int) -> ExecutionContext:
    """Overflow-check, push a single result and charge gas."""
    if ctx.stack.is_full:
        return stop(ctx, StackOverflow())
    return ctx.with_stack(ctx.stack.push(value)).charge_gas(gas)


def in_blockhash_window(block_number: int, current_height: int) -> bool:
    """True if ``block_number`` lies inside the BLOCKHASH window.

    Both bounds are exclusive: the current block has no hash yet, and
    ``current_height - 256`` is already too old.
    """
    return current_height - BLOCKHASH_WINDOW < block_number < current_height


# ---------------------------------------------------------------------------
# Opcode handlers
# ---------------------------------------------------------------------------

def op_stop(ctx: ExecutionContext) -> ExecutionContext:
    return stop(ctx.charge_gas(G_ZERO))


# -- Block info --

def op_blockhash(ctx: ExecutionContext) -> ExecutionContext:
    """Hash of a recent complete block, or zero outside the window."""
    if ctx.stack.is_empty:
        return stop(ctx, StackUnderflow())

    stack, block_number = ctx.stack.pop()
    current = ctx.host.current_block_height()
    if in_blockhash_window(block_number, current):
        h = ctx.registry.get_blockhash(block_number)
        result = int.from_bytes(h, "big")
    else:
        result = 0

    return ctx.with_stack(stack.push(result)).charge_gas(G_BLOCKHASH)


def op_coinbase(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, int.from_bytes(ctx.chain.coinbase, "big"), G_BASE)


def op_timestamp(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, ctx.host.current_block_timestamp(), G_BASE)


def op_number(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, ctx.host.current_block_height(), G_BASE)


def op_difficulty(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, DIFFICULTY, G_BASE)


def op_gaslimit(ctx: ExecutionContext) -> ExecutionContext:
    # Gas limit of this call, not the block's.
    return _push_result(ctx, ctx.call.gas_limit, G_BASE)


def op_chainid(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, ctx.chain.chain_id, G_BASE)


def op_selfbalance(ctx: ExecutionContext) -> ExecutionContext:
    """Balance of the executing account; the read is recorded in State."""
    if ctx.stack.is_full:
        return stop(ctx, StackOverflow())

    state, balance = read_balance(ctx.state, ctx.call.address)
    return ctx.with_stack(ctx.stack.push(balance)).with_state(state).charge_gas(G_LOW)


def op_basefee(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, BASE_FEE, G_BASE)


# -- Stack --

def op_pop(ctx: ExecutionContext) -> ExecutionContext:
    if ctx.stack.is_empty:
        return stop(ctx, StackUnderflow())
    stack, _ = ctx.stack.pop()
    return ctx.with_stack(stack).charge_gas(G_BASE)


def op_push0(ctx: ExecutionContext) -> ExecutionContext:
    return _push_result(ctx, 0, G_BASE)


def _make_push(n: int) -> Handler:
    def op_push(ctx: ExecutionContext) -> ExecutionContext:
        start = ctx.pc + 1
        data = ctx.call.code[start : start + n]
        # Immediate bytes past the end of code read as zero.
        data = data.ljust(n, b"\x00")
        return _push_result(ctx, int.from_bytes(data, "big"), G_VERY_LOW)
    op_push.__name__ = f"op_push{n}"
    return op_push


# ---------------------------------------------------------------------------
# Opcode table: opcode -> Opcode(name, handler, gas, immediate)
# ---------------------------------------------------------------------------

class Opcode(NamedTuple):
    name: str
    handler: Handler
    gas: int
    # Number of immediate bytes following the opcode in code.
    immediate: int = 0


OPCODE_TABLE: dict[int, Opcode] = {}


def _register():
    t = OPCODE_TABLE

    t[Op.STOP] = Opcode("STOP", op_stop, G_ZERO)

    t[Op.BLOCKHASH] = Opcode("BLOCKHASH", op_blockhash, G_BLOCKHASH)
    t[Op.COINBASE] = Opcode("COINBASE", op_coinbase, G_BASE)
    t[Op.TIMESTAMP] = Opcode("TIMESTAMP", op_timestamp, G_BASE)
    t[Op.NUMBER] = Opcode("NUMBER", op_number, G_BASE)
    t[Op.DIFFICULTY] = Opcode("DIFFICULTY", op_difficulty, G_BASE)
    t[Op.GASLIMIT] = Opcode("GASLIMIT", op_gaslimit, G_BASE)
    t[Op.CHAINID] = Opcode("CHAINID", op_chainid, G_BASE)
    t[Op.SELFBALANCE] = Opcode("SELFBALANCE", op_selfbalance, G_LOW)
    t[Op.BASEFEE] = Opcode("BASEFEE", op_basefee, G_BASE)

    t[Op.POP] = Opcode("POP", op_pop, G_BASE)
    t[Op.PUSH0] = Opcode("PUSH0", op_push0, G_BASE)
    for i in range(1, 33):
        t[Op.PUSH1 + i - 1] = Opcode(f"PUSH{i}", _make_push(i), G_VERY_LOW, i)


_register()
