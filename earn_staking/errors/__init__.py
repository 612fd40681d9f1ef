"""
Error definitions for the Earn staking client
"""

from .exceptions import (
    ErrorCode,
    EarnStakingError,
    RpcError,
    DerivationError,
    EncodingError,
    DiscriminatorError,
    TransactionError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "EarnStakingError",
    "RpcError",
    "DerivationError",
    "EncodingError",
    "DiscriminatorError",
    "TransactionError",
    "ConfigurationError",
]
