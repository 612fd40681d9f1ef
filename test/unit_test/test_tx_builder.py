"""
Test Transaction Builder

Unsigned transaction assembly for staking instructions.
"""

import sys
from pathlib import Path

import pytest
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.transaction import Transaction, VersionedTransaction

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from earn_staking.infra.tx_builder import TxBuilder, TxBuilderConfig
from earn_staking.program.instructions import (
    build_stake_instruction,
    build_update_rewards_instruction,
)
from earn_staking.errors import TransactionError, ErrorCode


MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
OWNER = "EARNsm7JPDHeYmmKkEYrzBVYkXot3tdiQW2Q2zWsiTZQ"
COMPUTE_BUDGET_PROGRAM = "ComputeBudget111111111111111111111111111111"


def test_build_unsigned_shell():
    """No fee payer beyond the signer and a default blockhash"""
    print("Testing unsigned transaction...")

    builder = TxBuilder(TxBuilderConfig(compute_units=0, compute_unit_price=0))
    ix = build_stake_instruction(OWNER, MINT, 1_000_000)

    tx = builder.build([ix])

    assert isinstance(tx, Transaction)
    assert tx.message.recent_blockhash == Hash.default()
    assert len(tx.message.instructions) == 1
    assert tx.message.header.num_required_signatures == 1
    assert Pubkey.from_string(OWNER) in tx.message.account_keys
    assert all(sig == tx.signatures[0] for sig in tx.signatures)

    print("  unsigned transaction: PASSED")


def test_compute_budget_prepended():
    builder = TxBuilder(TxBuilderConfig(compute_units=200_000, compute_unit_price=1_000))
    ix = build_update_rewards_instruction(MINT)

    instructions = builder.with_compute_budget([ix])

    assert len(instructions) == 3
    assert str(instructions[0].program_id) == COMPUTE_BUDGET_PROGRAM
    assert str(instructions[1].program_id) == COMPUTE_BUDGET_PROGRAM
    assert instructions[2] == ix


def test_compute_budget_overrides():
    builder = TxBuilder(TxBuilderConfig(compute_units=200_000, compute_unit_price=0))
    ix = build_update_rewards_instruction(MINT)

    assert len(builder.with_compute_budget([ix])) == 2
    assert builder.with_compute_budget([ix], compute_units=0) == [ix]


def test_empty_instructions():
    builder = TxBuilder(TxBuilderConfig(compute_units=0, compute_unit_price=0))

    with pytest.raises(TransactionError) as exc_info:
        builder.build([])
    assert exc_info.value.code == ErrorCode.TX_EMPTY

    with pytest.raises(TransactionError):
        builder.compile([], OWNER, Hash.default())


def test_compile_versioned():
    print("Testing versioned compile...")

    builder = TxBuilder(TxBuilderConfig(compute_units=0, compute_unit_price=0))
    blockhash = Hash(bytes([7] * 32))
    ix = build_stake_instruction(OWNER, MINT, 5)

    raw = builder.compile([ix], OWNER, str(blockhash))
    tx = VersionedTransaction.from_bytes(raw)

    assert tx.message.recent_blockhash == blockhash
    assert tx.message.account_keys[0] == Pubkey.from_string(OWNER)
    assert len(tx.signatures) == tx.message.header.num_required_signatures == 1

    print("  versioned compile: PASSED")


def test_config_defaults():
    from earn_staking.config import config as global_config

    tx_config = TxBuilderConfig()
    assert tx_config.compute_units == global_config.tx.compute_units
    assert tx_config.compute_unit_price == global_config.tx.compute_unit_price
