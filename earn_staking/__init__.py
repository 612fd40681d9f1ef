"""
Earn Staking - Python client for the Earn on-chain staking program

Provides:
- Program-derived address derivation
- Discriminator-tagged account decoding (GlobalConfig, StakingPool, StakeAccount)
- Instruction encoding with exact account lists
- Async account queries over Solana JSON-RPC
- Unsigned transaction building
"""

__version__ = "0.1.0"

from .client import StakingClient
from .types import (
    AccountType,
    GlobalConfig,
    StakingPool,
    StakeAccount,
    ProgramAccount,
    BuiltTransaction,
)
from .errors import (
    ErrorCode,
    EarnStakingError,
    RpcError,
    DerivationError,
    EncodingError,
    DiscriminatorError,
    TransactionError,
    ConfigurationError,
)
from .program import (
    STAKING_PROGRAM_ID,
    derive,
    decode_account,
    encode_instruction,
    PoolAddresses,
)

__all__ = [
    "__version__",
    # Client
    "StakingClient",
    # Types
    "AccountType",
    "GlobalConfig",
    "StakingPool",
    "StakeAccount",
    "ProgramAccount",
    "BuiltTransaction",
    # Errors
    "ErrorCode",
    "EarnStakingError",
    "RpcError",
    "DerivationError",
    "EncodingError",
    "DiscriminatorError",
    "TransactionError",
    "ConfigurationError",
    # Codec
    "STAKING_PROGRAM_ID",
    "derive",
    "decode_account",
    "encode_instruction",
    "PoolAddresses",
]
