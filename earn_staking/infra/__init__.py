"""
Infrastructure layer for the Earn staking client

Provides:
- RpcClient: async JSON-RPC wrapper with retry and endpoint fallback
- TxBuilder: unsigned transaction assembly
- retry helpers with correlation IDs
"""

from .retry import (
    CorrelationContext,
    classify_error,
    retry_async,
    get_correlation_id,
)
from .rpc import (
    RpcClient,
    RpcClientConfig,
    account_data_bytes,
    memcmp_filter,
    data_size_filter,
)
from .tx_builder import TxBuilder, TxBuilderConfig

__all__ = [
    "CorrelationContext",
    "classify_error",
    "retry_async",
    "get_correlation_id",
    "RpcClient",
    "RpcClientConfig",
    "account_data_bytes",
    "memcmp_filter",
    "data_size_filter",
    "TxBuilder",
    "TxBuilderConfig",
]
