"""
EVM dispatch loop.

step() reads the opcode at the program counter, runs its handler and
either continues with the advanced context or reports a halt.
run_bytecode() drives step() until the frame halts.
execute() builds a frame from code and collaborators and runs it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from ethexec.common.config import ChainConfig, DEV_CONFIG, ZERO_ADDRESS
from ethexec.vm.context import CallContext, ExecutionContext, stop
from ethexec.vm.errors import EvmError, InvalidOpcode, OutOfGas, error_from_payload
from ethexec.vm.hooks import DefaultHook, ExecutionHook
from ethexec.vm.host import BlockhashRegistry, CachedBlockhashRegistry, HostOracle
from ethexec.vm.opcodes import OPCODE_TABLE
from ethexec.vm.state import State

logger = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 30_000_000


# ---------------------------------------------------------------------------
# Step results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Continue:
    context: ExecutionContext


@dataclass(frozen=True)
class Halt:
    context: ExecutionContext
    # None for a normal stop
    reason: Optional[EvmError] = None


StepResult = Union[Continue, Halt]


def step(ctx: ExecutionContext, hook: Optional[ExecutionHook] = None) -> StepResult:
    """Execute the single opcode at ``ctx.pc``."""
    if ctx.stopped:
        return Halt(ctx, error_from_payload(ctx.return_data) if ctx.reverted else None)

    code = ctx.call.code
    if ctx.pc >= len(code):
        # Past the end of code: implicit STOP
        return Halt(stop(ctx))

    opcode = code[ctx.pc]
    entry = OPCODE_TABLE.get(opcode)
    if entry is None:
        error = InvalidOpcode(f"Unknown opcode: 0x{opcode:02x}")
        return Halt(stop(ctx, error), error)

    if entry.gas > ctx.remaining_gas:
        # The opcode does not run; the whole limit is consumed.
        error = OutOfGas(f"need {entry.gas}, have {ctx.remaining_gas}")
        return Halt(stop(replace(ctx, gas_used=ctx.call.gas_limit), error), error)

    if hook is not None:
        hook.before_step(ctx, opcode)
    nxt = entry.handler(ctx)
    if hook is not None:
        hook.after_step(nxt, opcode)

    if nxt.stopped:
        return Halt(nxt, error_from_payload(nxt.return_data) if nxt.reverted else None)

    return Continue(nxt.advance_pc(1 + entry.immediate))


# ---------------------------------------------------------------------------
# Main execution loop
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecutionResult:
    context: ExecutionContext
    error: Optional[EvmError] = None

    @property
    def success(self) -> bool:
        return not self.context.reverted

    @property
    def reverted(self) -> bool:
        return self.context.reverted

    @property
    def gas_used(self) -> int:
        return self.context.gas_used

    @property
    def return_data(self) -> bytes:
        return self.context.return_data

    @property
    def state(self) -> State:
        return self.context.state


def run_bytecode(ctx: ExecutionContext, hook: Optional[ExecutionHook] = None) -> ExecutionResult:
    """Run the frame until it halts.

    Handlers are never invoked once the context is stopped. Gas used never
    exceeds the call gas limit.
    """
    hook = hook or DefaultHook()

    result = step(ctx, hook)
    while isinstance(result, Continue):
        result = step(result.context, hook)

    final = result.context
    if result.reason is not None:
        logger.debug("Frame halted at pc=%d: %s", final.pc, result.reason.payload.decode())
    hook.on_halt(final, result.reason)

    return ExecutionResult(context=final, error=result.reason)


def execute(
    code: bytes,
    *,
    state: Optional[State] = None,
    host: Optional[HostOracle] = None,
    registry: Optional[BlockhashRegistry] = None,
    chain: ChainConfig = DEV_CONFIG,
    address: bytes = ZERO_ADDRESS,
    caller: bytes = ZERO_ADDRESS,
    calldata: bytes = b"",
    value: int = 0,
    gas_limit: int = DEFAULT_GAS_LIMIT,
    hook: Optional[ExecutionHook] = None,
) -> ExecutionResult:
    """Execute ``code`` as a top-level call frame.

    Args:
        code: bytecode to run
        state: world state snapshot (empty if omitted)
        host: block height / timestamp oracle
        registry: historical blockhash registry, cached for this frame only
        chain: chain config (chain id, coinbase)
        address: executing account
        caller: msg.sender
        calldata: input data
        value: wei sent with the call
        gas_limit: gas limit for this call
        hook: optional execution hook
    """
    call = CallContext(
        address=address,
        caller=caller,
        origin=caller,
        code=code,
        calldata=calldata,
        value=value,
        gas_limit=gas_limit,
    )
    ctx = ExecutionContext.create(
        call,
        state=state,
        host=host,
        registry=CachedBlockhashRegistry(registry) if registry is not None else None,
        chain=chain,
    )
    return run_bytecode(ctx, hook)
