"""
EVM error taxonomy.

Opcode handlers build one of these and hand it to ``stop()``; the error's
payload becomes the frame's revert data. They are only raised for caller
bugs (e.g. popping an empty Stack directly).
"""

from __future__ import annotations


class EvmError(Exception):
    """Base class for EVM execution errors."""

    message: bytes = b"EvmError"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail or self.message.decode())

    @property
    def payload(self) -> bytes:
        """Fixed revert payload for this error kind."""
        return self.message

    @property
    def size(self) -> int:
        return len(self.message)


class StackUnderflow(EvmError):
    message = b"StackUnderflow"


class StackOverflow(EvmError):
    message = b"StackOverflow"


class InvalidOpcode(EvmError):
    message = b"InvalidOpcode"


class OutOfGas(EvmError):
    message = b"OutOfGas"


_ERRORS_BY_PAYLOAD: dict[bytes, type[EvmError]] = {
    cls.message: cls for cls in (StackUnderflow, StackOverflow, InvalidOpcode, OutOfGas)
}


def error_from_payload(payload: bytes) -> EvmError:
    """Rebuild the error a halted frame carries in its return data."""
    cls = _ERRORS_BY_PAYLOAD.get(payload, EvmError)
    return cls()
