"""Tests for the EVM operand stack and error payloads."""

import pytest

from ethexec.vm.errors import (
    EvmError,
    InvalidOpcode,
    OutOfGas,
    StackOverflow,
    StackUnderflow,
    error_from_payload,
)
from ethexec.vm.stack import MAX_STACK_DEPTH, Stack, pop, push


class TestStack:
    def test_push_pop(self):
        s = Stack().push(42)
        s, value = s.pop()
        assert value == 42
        assert s.size == 0

    def test_push_returns_new_stack(self):
        s = Stack()
        s2 = s.push(1)
        assert len(s) == 0
        assert len(s2) == 1

    def test_pop_leaves_original(self):
        s = Stack((1, 2))
        rest, top = s.pop()
        assert top == 2
        assert list(rest) == [1]
        assert list(s) == [1, 2]

    def test_underflow_is_a_caller_bug(self):
        with pytest.raises(StackUnderflow):
            Stack().pop()

    def test_peek(self):
        s = Stack().push(10).push(20)
        assert s.peek(0) == 20
        assert s.peek(1) == 10
        with pytest.raises(StackUnderflow):
            s.peek(2)

    def test_full(self):
        s = Stack(tuple(range(MAX_STACK_DEPTH - 1)))
        assert not s.is_full
        assert s.push(0).is_full

    def test_empty(self):
        assert Stack().is_empty
        assert not Stack((0,)).is_empty

    def test_uint256_overflow_wraps(self):
        _, value = Stack().push(2**256).pop()
        assert value == 0

    def test_uint256_max(self):
        _, value = Stack().push(2**256 - 1).pop()
        assert value == 2**256 - 1

    def test_equality(self):
        assert Stack((1, 2)) == Stack().push(1).push(2)
        assert Stack((1, 2)) != Stack((2, 1))

    def test_module_functions(self):
        s = push(Stack(), 7)
        s, value = pop(s)
        assert value == 7
        assert s == Stack()


class TestErrors:
    @pytest.mark.parametrize("cls,payload", [
        (StackUnderflow, b"StackUnderflow"),
        (StackOverflow, b"StackOverflow"),
        (InvalidOpcode, b"InvalidOpcode"),
        (OutOfGas, b"OutOfGas"),
    ])
    def test_payload(self, cls, payload):
        err = cls()
        assert err.payload == payload
        assert err.size == len(payload)
        assert isinstance(err, EvmError)

    def test_detail_does_not_change_payload(self):
        err = OutOfGas("need 30, have 2")
        assert err.payload == b"OutOfGas"
        assert str(err) == "need 30, have 2"

    def test_error_from_payload(self):
        assert isinstance(error_from_payload(b"StackOverflow"), StackOverflow)
        assert type(error_from_payload(b"custom revert")) is EvmError
