"""
EVM execution context, the value threaded through every opcode handler.

CallContext holds the parameters fixed at call entry. ExecutionContext
aggregates them with the stack, state, collaborators, program counter,
gas used and halt flags. Both are frozen: handlers return a new context
built with ``dataclasses.replace`` instead of mutating the one they got.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from ethexec.common.config import ChainConfig, DEV_CONFIG, ZERO_ADDRESS
from ethexec.vm.errors import EvmError
from ethexec.vm.host import BlockhashRegistry, HostOracle, InMemoryBlockhashRegistry, StaticHost
from ethexec.vm.stack import Stack
from ethexec.vm.state import State


@dataclass(frozen=True)
class CallContext:
    """Parameters of one call, never mutated during execution."""

    address: bytes = ZERO_ADDRESS
    caller: bytes = ZERO_ADDRESS
    origin: bytes = ZERO_ADDRESS

    code: bytes = b""
    calldata: bytes = b""
    value: int = 0

    gas_limit: int = 0

    # Depth in call stack
    depth: int = 0
    # Static flag (STATICCALL)
    is_static: bool = False


@dataclass(frozen=True)
class ExecutionContext:
    """One frame's execution state."""

    call: CallContext = field(default_factory=CallContext)
    stack: Stack = field(default_factory=Stack)
    state: State = field(default_factory=State)

    # Collaborators
    host: HostOracle = field(default_factory=StaticHost)
    registry: BlockhashRegistry = field(default_factory=InMemoryBlockhashRegistry)
    chain: ChainConfig = DEV_CONFIG

    pc: int = 0
    gas_used: int = 0

    # Halt flags
    stopped: bool = False
    reverted: bool = False
    return_data: bytes = b""

    @classmethod
    def create(
        cls,
        call: CallContext,
        state: Optional[State] = None,
        host: Optional[HostOracle] = None,
        registry: Optional[BlockhashRegistry] = None,
        chain: ChainConfig = DEV_CONFIG,
    ) -> ExecutionContext:
        """Fresh frame: empty stack, pc 0, no gas used."""
        return cls(
            call=call,
            state=state if state is not None else State(),
            host=host if host is not None else StaticHost(),
            registry=registry if registry is not None else InMemoryBlockhashRegistry(),
            chain=chain,
        )

    @property
    def halted(self) -> bool:
        return self.stopped

    @property
    def remaining_gas(self) -> int:
        return self.call.gas_limit - self.gas_used

    def charge_gas(self, amount: int) -> ExecutionContext:
        """Add a fixed cost to gas used. The upper bound is the caller's concern."""
        if amount < 0:
            raise ValueError(f"Gas charge must be non-negative, got {amount}")
        return replace(self, gas_used=self.gas_used + amount)

    def with_stack(self, stack: Stack) -> ExecutionContext:
        return replace(self, stack=stack)

    def with_state(self, state: State) -> ExecutionContext:
        return replace(self, state=state)

    def advance_pc(self, n: int = 1) -> ExecutionContext:
        return replace(self, pc=self.pc + n)


def stop(ctx: ExecutionContext, error: Optional[EvmError] = None) -> ExecutionContext:
    """Halt the frame.

    With an error the frame is also reverted and the error payload becomes
    the return data. Stack and gas are left as they are.
    """
    if error is None:
        return replace(ctx, stopped=True)
    return replace(ctx, stopped=True, reverted=True, return_data=error.payload)
