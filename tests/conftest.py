"""Pytest configuration and shared fixtures for all tests."""

import pytest

from ethexec.common.config import ChainConfig
from ethexec.vm.context import CallContext, ExecutionContext
from ethexec.vm.host import InMemoryBlockhashRegistry, StaticHost
from ethexec.vm.stack import MAX_STACK_DEPTH, Stack
from ethexec.vm.state import Account, State

from tests.fixtures.addresses import ALICE_ADDRESS, CONTRACT_ADDRESS, CONTRACT_BALANCE
from tests.fixtures.blocks import (
    CURRENT_HEIGHT,
    CURRENT_TIMESTAMP,
    TEST_GAS_LIMIT,
    recent_block_hashes,
)


# =============================================================================
# Collaborators
# =============================================================================

@pytest.fixture
def host():
    """Host pinned at block 1000."""
    return StaticHost(block_number=CURRENT_HEIGHT, timestamp=CURRENT_TIMESTAMP)


@pytest.fixture
def registry():
    """Registry populated with the 256 blocks before the current one."""
    return InMemoryBlockhashRegistry(recent_block_hashes())


@pytest.fixture
def chain_config():
    return ChainConfig(chain_id=0x123, chain_name="test")


@pytest.fixture
def state():
    return State(accounts={
        CONTRACT_ADDRESS: Account(balance=CONTRACT_BALANCE),
        ALICE_ADDRESS: Account(balance=5, nonce=1),
    })


# =============================================================================
# Execution contexts
# =============================================================================

@pytest.fixture
def call_context():
    return CallContext(
        address=CONTRACT_ADDRESS,
        caller=ALICE_ADDRESS,
        origin=ALICE_ADDRESS,
        gas_limit=TEST_GAS_LIMIT,
    )


@pytest.fixture
def ctx(call_context, state, host, registry, chain_config):
    """Fresh frame with an empty stack."""
    return ExecutionContext.create(
        call_context,
        state=state,
        host=host,
        registry=registry,
        chain=chain_config,
    )


@pytest.fixture
def full_ctx(ctx):
    """Frame whose stack is already at max depth."""
    return ctx.with_stack(Stack(tuple(range(MAX_STACK_DEPTH))))
