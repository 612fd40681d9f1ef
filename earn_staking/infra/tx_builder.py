"""
Transaction builder

Provides utilities for:
- Assembling unsigned transactions from staking instructions
- Adding compute budget instructions
- Compiling a versioned transaction once the caller has a payer and blockhash

Nothing here signs or sends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.hash import Hash
from solders.instruction import Instruction
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction, VersionedTransaction

from ..errors import TransactionError
from ..config import config as global_config

logger = logging.getLogger(__name__)


@dataclass
class TxBuilderConfig:
    """
    Transaction builder runtime configuration

    Pulls defaults from the global config (earn_staking.config.TxConfig).
    A value of 0 means the compute budget instruction is omitted.

    Usage:
        builder = TxBuilder(TxBuilderConfig(compute_units=200_000))
    """
    compute_units: int = None
    compute_unit_price: int = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.compute_units is None:
            self.compute_units = global_config.tx.compute_units
        if self.compute_unit_price is None:
            self.compute_unit_price = global_config.tx.compute_unit_price


class TxBuilder:
    """
    Unsigned transaction builder

    Usage:
        builder = TxBuilder()

        # Shell without blockhash / fee payer
        tx = builder.build([stake_ix])

        # Wire bytes for a signer that expects a v0 message
        tx_bytes = builder.compile([stake_ix], payer, blockhash)
    """

    def __init__(self, config: Optional[TxBuilderConfig] = None):
        self._config = config or TxBuilderConfig()

    @property
    def config(self) -> TxBuilderConfig:
        return self._config

    def with_compute_budget(
        self,
        instructions: Sequence[Instruction],
        compute_units: Optional[int] = None,
        compute_unit_price: Optional[int] = None,
    ) -> List[Instruction]:
        """
        Prepend compute budget instructions where configured.

        Args:
            instructions: Program instructions in execution order
            compute_units: Compute unit limit (overrides config)
            compute_unit_price: Priority fee in microlamports per CU (overrides config)
        """
        if not instructions:
            raise TransactionError.empty()

        cu_limit = compute_units if compute_units is not None else self._config.compute_units
        cu_price = compute_unit_price if compute_unit_price is not None else self._config.compute_unit_price

        all_instructions: List[Instruction] = []
        if cu_limit > 0:
            all_instructions.append(set_compute_unit_limit(cu_limit))
        if cu_price > 0:
            all_instructions.append(set_compute_unit_price(cu_price))
        all_instructions.extend(instructions)
        return all_instructions

    def build(
        self,
        instructions: Sequence[Instruction],
        compute_units: Optional[int] = None,
        compute_unit_price: Optional[int] = None,
    ) -> Transaction:
        """
        Build an unsigned legacy transaction.

        The recent blockhash is left at its default and no fee payer is set;
        both are the caller's to fill in at submission time.

        Raises:
            TransactionError: no instructions, or the message cannot be compiled
        """
        all_instructions = self.with_compute_budget(instructions, compute_units, compute_unit_price)
        try:
            message = Message(all_instructions)
        except Exception as e:
            raise TransactionError.build_failed(e) from e

        logger.debug(
            f"Built unsigned transaction: {len(all_instructions)} instruction(s), "
            f"{message.header.num_required_signatures} required signer(s)"
        )
        return Transaction.new_unsigned(message)

    def compile(
        self,
        instructions: Sequence[Instruction],
        payer: Union[Pubkey, str],
        recent_blockhash: Union[Hash, str],
        compute_units: Optional[int] = None,
        compute_unit_price: Optional[int] = None,
    ) -> bytes:
        """
        Compile an unsigned versioned (v0) transaction.

        Args:
            instructions: Program instructions
            payer: Fee payer
            recent_blockhash: Blockhash fetched by the caller

        Returns:
            Transaction bytes with placeholder signatures
        """
        all_instructions = self.with_compute_budget(instructions, compute_units, compute_unit_price)
        payer_pubkey = payer if isinstance(payer, Pubkey) else Pubkey.from_string(payer)
        blockhash = recent_blockhash if isinstance(recent_blockhash, Hash) else Hash.from_string(recent_blockhash)

        try:
            message = MessageV0.try_compile(
                payer_pubkey,
                all_instructions,
                [],  # Address lookup tables
                blockhash,
            )
        except Exception as e:
            raise TransactionError.build_failed(e) from e

        # Signature count must match num_required_signatures
        num_signers = message.header.num_required_signatures
        tx = VersionedTransaction.populate(message, [Signature.default()] * num_signers)
        return bytes(tx)
