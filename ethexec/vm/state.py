"""
World state snapshot seen by the execution core.

State is copy-on-write: every update returns a new State and reads that
record access (the EIP-2929 warm set) return the updated State alongside
the value. Callers thread the returned State forward.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from ethexec.vm.stack import UINT256_CEIL, UINT256_MAX


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Account:
    balance: int = 0
    nonce: int = 0
    code: bytes = b""
    storage: Mapping[int, int] = field(default_factory=lambda: _frozen({}))

    def __post_init__(self) -> None:
        if not 0 <= self.balance < UINT256_CEIL:
            raise ValueError(f"balance out of uint256 range: {self.balance}")
        # Storage slots hold words.
        storage = {key: value & UINT256_MAX for key, value in self.storage.items()}
        object.__setattr__(self, "storage", _frozen(storage))


@dataclass(frozen=True)
class State:
    accounts: Mapping[bytes, Account] = field(default_factory=lambda: _frozen({}))
    accessed_addresses: frozenset[bytes] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "accounts", _frozen(self.accounts))

    # -- Reads --

    def get_account(self, address: bytes) -> Account:
        return self.accounts.get(address) or Account()

    def get_balance(self, address: bytes) -> int:
        return self.get_account(address).balance

    def get_storage(self, address: bytes, key: int) -> int:
        return self.get_account(address).storage.get(key, 0)

    def is_warm(self, address: bytes) -> bool:
        return address in self.accessed_addresses

    # -- Copy-on-write updates --

    def mark_warm(self, address: bytes) -> State:
        if address in self.accessed_addresses:
            return self
        return replace(self, accessed_addresses=self.accessed_addresses | {address})

    def with_account(self, address: bytes, account: Account) -> State:
        accounts = dict(self.accounts)
        accounts[address] = account
        return replace(self, accounts=accounts)

    def with_balance(self, address: bytes, balance: int) -> State:
        return self.with_account(address, replace(self.get_account(address), balance=balance))

    def with_storage(self, address: bytes, key: int, value: int) -> State:
        account = self.get_account(address)
        storage = dict(account.storage)
        storage[key] = value
        return self.with_account(address, replace(account, storage=storage))

    @classmethod
    def from_alloc(cls, alloc: dict[str, dict[str, Any]]) -> State:
        """Build a State from a geth-style genesis ``alloc`` mapping."""

        def parse_int(val: str | int) -> int:
            if isinstance(val, str):
                return int(val, 0) if val else 0
            return int(val)

        accounts: dict[bytes, Account] = {}
        for addr_hex, account_data in alloc.items():
            addr_hex = addr_hex.lower().removeprefix("0x")
            address = bytes.fromhex(addr_hex.zfill(40))
            code_hex = account_data.get("code", "0x")
            storage = {
                int(k, 16): int(v, 16)
                for k, v in account_data.get("storage", {}).items()
            }
            accounts[address] = Account(
                balance=parse_int(account_data.get("balance", 0)),
                nonce=parse_int(account_data.get("nonce", 0)),
                code=bytes.fromhex(code_hex.removeprefix("0x")) if code_hex else b"",
                storage=storage,
            )
        return cls(accounts=accounts)


def read_balance(state: State, address: bytes) -> tuple[State, int]:
    """Read an account balance, recording the access in the returned State."""
    return state.mark_warm(address), state.get_balance(address)
