"""
Result type definitions for queries and built transactions
"""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from .accounts import GlobalConfig, StakingPool, StakeAccount

Record = Union[GlobalConfig, StakingPool, StakeAccount]


class ProgramAccount(NamedTuple):
    """A decoded account together with its address"""
    address: Pubkey
    account: Record


@dataclass
class BuiltTransaction:
    """
    Unsigned transaction plus what went into it

    Attributes:
        transaction: Unsigned legacy transaction (no blockhash, no fee payer)
        instructions: Instructions in execution order
        addresses: Derived addresses the caller usually needs, by role
    """
    transaction: Transaction
    instructions: List[Instruction]
    addresses: Dict[str, Pubkey] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"BuiltTransaction({len(self.instructions)} instruction(s))"
