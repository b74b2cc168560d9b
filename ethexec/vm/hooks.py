"""
EVM execution hook system.

Extension points around the dispatch loop. DefaultHook does nothing;
TraceHook records a replayable step trace.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ethexec.vm.context import ExecutionContext
    from ethexec.vm.errors import EvmError


class ExecutionHook:
    """Base hook interface. Override methods to observe execution."""

    def before_step(self, ctx: ExecutionContext, opcode: int) -> None:
        """Called before the handler for ``opcode`` runs."""
        pass

    def after_step(self, ctx: ExecutionContext, opcode: int) -> None:
        """Called with the context the handler returned."""
        pass

    def on_halt(self, ctx: ExecutionContext, error: Optional[EvmError]) -> None:
        """Called once when the frame halts."""
        pass


class DefaultHook(ExecutionHook):
    """No-op hook."""
    pass


@dataclass(frozen=True)
class TraceStep:
    pc: int
    opcode: int
    gas_used: int
    stack_size: int


class TraceHook(ExecutionHook):
    """Records (pc, opcode, gas used, stack size) after every step."""

    def __init__(self) -> None:
        self.steps: list[TraceStep] = []
        self._pc = 0
        self.halt_reason: Optional[bytes] = None

    def before_step(self, ctx: ExecutionContext, opcode: int) -> None:
        self._pc = ctx.pc

    def after_step(self, ctx: ExecutionContext, opcode: int) -> None:
        self.steps.append(TraceStep(
            pc=self._pc,
            opcode=opcode,
            gas_used=ctx.gas_used,
            stack_size=ctx.stack.size,
        ))

    def on_halt(self, ctx: ExecutionContext, error: Optional[EvmError]) -> None:
        self.halt_reason = error.payload if error is not None else None
