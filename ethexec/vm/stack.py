"""
EVM operand stack.

Stack: 1024-depth, 256-bit (uint256) values. The stack is an immutable
value: push/pop return a new Stack and leave the original untouched.
"""

from __future__ import annotations

from typing import Iterator

from ethexec.vm.errors import StackUnderflow

# Max uint256
UINT256_MAX = (1 << 256) - 1
UINT256_CEIL = 1 << 256

MAX_STACK_DEPTH = 1024


class Stack:
    """EVM stack: max 1024 items, each item is a 256-bit unsigned integer.

    Handlers must check ``is_full`` / ``size`` before calling push or pop;
    push does not re-validate the depth bound.
    """

    __slots__ = ("_data",)

    def __init__(self, items: tuple[int, ...] = ()) -> None:
        self._data = tuple(items)

    def push(self, value: int) -> Stack:
        return Stack(self._data + (value & UINT256_MAX,))

    def pop(self) -> tuple[Stack, int]:
        if not self._data:
            raise StackUnderflow("pop on empty stack")
        return Stack(self._data[:-1]), self._data[-1]

    def peek(self, depth: int = 0) -> int:
        if depth >= len(self._data):
            raise StackUnderflow(f"peek({depth}) on stack of size {len(self._data)}")
        return self._data[-(depth + 1)]

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def is_full(self) -> bool:
        return len(self._data) >= MAX_STACK_DEPTH

    @property
    def is_empty(self) -> bool:
        return not self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stack):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        top = ", ".join(hex(v) for v in self._data[-4:])
        return f"Stack(size={len(self._data)}, top=[{top}])"


def push(stack: Stack, value: int) -> Stack:
    return stack.push(value)


def pop(stack: Stack) -> tuple[Stack, int]:
    return stack.pop()
