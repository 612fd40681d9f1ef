"""
Exception definitions for the Earn staking client
"""

from enum import Enum
from typing import Optional, Sequence


class ErrorCode(Enum):
    """
    Unified error codes for staking client operations

    1xxx - RPC errors
    2xxx - Transaction errors
    3xxx - Encoding errors
    4xxx - Address derivation errors
    5xxx - Account / discriminator errors
    9xxx - Configuration errors
    """
    # RPC errors (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"
    RPC_SERVER_ERROR = "1005"

    # Transaction errors
    TX_EMPTY = "2001"
    TX_BUILD_FAILED = "2002"

    # Encoding errors
    ENCODING_OUT_OF_RANGE = "3001"
    ENCODING_INVALID_TYPE = "3002"
    ENCODING_UNKNOWN_INSTRUCTION = "3003"
    ENCODING_INVALID_PARAMS = "3004"

    # Derivation errors
    DERIVATION_EXHAUSTED = "4001"
    DERIVATION_INVALID_SEEDS = "4002"

    # Account errors
    DISCRIMINATOR_MISMATCH = "5001"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class EarnStakingError(Exception):
    """
    Base exception for all staking client errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class RpcError(EarnStakingError):
    """
    RPC-related errors - typically recoverable

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - Invalid response received

    A JSON-RPC error object returned by the node is not recoverable: the
    same request would get the same answer.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
        recoverable: bool = True,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )

    @classmethod
    def invalid_response(cls, endpoint: str, reason: str) -> "RpcError":
        return cls(
            f"Invalid RPC response: {reason}",
            ErrorCode.RPC_INVALID_RESPONSE,
            endpoint=endpoint,
        )

    @classmethod
    def server_error(cls, endpoint: str, error: dict) -> "RpcError":
        rpc_error = cls(
            f"RPC error: {error.get('message', str(error))}",
            ErrorCode.RPC_SERVER_ERROR,
            endpoint=endpoint,
            recoverable=False,
        )
        # Preserve RPC error code in details for debugging
        rpc_error.details["rpc_error_code"] = error.get("code")
        rpc_error.details["rpc_error_data"] = error.get("data")
        return rpc_error


class DerivationError(EarnStakingError):
    """
    Program-derived address errors - never recoverable

    Raised when:
    - No bump in 255..0 yields an off-curve address
    - Seeds violate the runtime limits (count or length)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DERIVATION_EXHAUSTED,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, recoverable=False, details=details)

    @classmethod
    def exhausted(cls, seeds: Sequence[bytes], program_id: str) -> "DerivationError":
        return cls(
            f"No off-curve bump found for {len(seeds)} seed(s) under program {program_id}",
            ErrorCode.DERIVATION_EXHAUSTED,
            details={"seeds": [bytes(s).hex() for s in seeds], "program_id": program_id},
        )

    @classmethod
    def invalid_seeds(cls, reason: str) -> "DerivationError":
        return cls(f"Invalid seeds: {reason}", ErrorCode.DERIVATION_INVALID_SEEDS)


class EncodingError(EarnStakingError):
    """
    Instruction or account encoding errors - never recoverable

    Raised before any bytes are produced when:
    - A value does not fit the target width
    - A value has the wrong Python type
    - The instruction name is unknown
    - Parameters are missing or unexpected
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENCODING_OUT_OF_RANGE,
        field: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"field": field} if field else None,
        )
        self.field = field

    @classmethod
    def out_of_range(cls, field: str, value: int, kind: str) -> "EncodingError":
        return cls(
            f"Value {value} for '{field}' does not fit in {kind}",
            ErrorCode.ENCODING_OUT_OF_RANGE,
            field=field,
        )

    @classmethod
    def invalid_type(cls, field: str, value: object, kind: str) -> "EncodingError":
        return cls(
            f"Value {value!r} for '{field}' is not a valid {kind}",
            ErrorCode.ENCODING_INVALID_TYPE,
            field=field,
        )

    @classmethod
    def unknown_instruction(cls, name: str) -> "EncodingError":
        return cls(
            f"Unknown instruction: {name}",
            ErrorCode.ENCODING_UNKNOWN_INSTRUCTION,
        )

    @classmethod
    def invalid_params(cls, name: str, missing: Sequence[str], unexpected: Sequence[str]) -> "EncodingError":
        parts = []
        if missing:
            parts.append(f"missing {', '.join(missing)}")
        if unexpected:
            parts.append(f"unexpected {', '.join(unexpected)}")
        return cls(
            f"Invalid parameters for '{name}': {'; '.join(parts)}",
            ErrorCode.ENCODING_INVALID_PARAMS,
        )


class DiscriminatorError(EarnStakingError):
    """
    Discriminator registry self-check failure

    Raised when:
    - A literal tag no longer matches its Anchor hash
    - A live account carries a tag different from the registered one
    """

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.DISCRIMINATOR_MISMATCH,
            recoverable=False,
            details={"name": name} if name else None,
        )
        self.name = name

    @classmethod
    def mismatch(cls, name: str, expected: bytes, actual: bytes) -> "DiscriminatorError":
        return cls(
            f"Discriminator mismatch for {name}: expected {list(expected)}, got {list(actual)}",
            name=name,
        )


class TransactionError(EarnStakingError):
    """
    Transaction assembly errors

    Raised when:
    - No instructions were supplied
    - The message cannot be compiled
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_BUILD_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error)

    @classmethod
    def empty(cls) -> "TransactionError":
        return cls("Cannot build a transaction without instructions", ErrorCode.TX_EMPTY)

    @classmethod
    def build_failed(cls, error: Exception) -> "TransactionError":
        return cls(f"Failed to compile transaction: {error}", original_error=error)


class ConfigurationError(EarnStakingError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
