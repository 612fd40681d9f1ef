"""
Type definitions for the Earn staking client
"""

from .accounts import (
    AccountType,
    GlobalConfig,
    StakingPool,
    StakeAccount,
    RECORD_TYPES,
    to_account_type,
    record_class,
)
from .result import Record, ProgramAccount, BuiltTransaction

__all__ = [
    "AccountType",
    "GlobalConfig",
    "StakingPool",
    "StakeAccount",
    "RECORD_TYPES",
    "to_account_type",
    "record_class",
    "Record",
    "ProgramAccount",
    "BuiltTransaction",
]
