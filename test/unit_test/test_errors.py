"""
Test Errors Module

Tests for earn_staking.errors package.
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_error_code():
    """Test ErrorCode enum"""
    from earn_staking.errors import ErrorCode

    print("Testing ErrorCode...")

    assert ErrorCode.RPC_CONNECTION_FAILED.value == "1001"
    assert ErrorCode.TX_EMPTY.value == "2001"
    assert ErrorCode.ENCODING_OUT_OF_RANGE.value == "3001"
    assert ErrorCode.DERIVATION_EXHAUSTED.value == "4001"
    assert ErrorCode.DISCRIMINATOR_MISMATCH.value == "5001"
    assert ErrorCode.CONFIG_MISSING.value == "9002"

    print("  ErrorCode: PASSED")


def test_base_error():
    """Test EarnStakingError base class"""
    from earn_staking.errors import EarnStakingError, ErrorCode

    print("Testing EarnStakingError...")

    error = EarnStakingError(
        message="Test error",
        code=ErrorCode.RPC_CONNECTION_FAILED,
        recoverable=True,
    )

    # __str__ returns "[code] message" format
    assert "[1001] Test error" == str(error)
    assert error.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error.should_retry
    assert error.details == {}

    print("  EarnStakingError: PASSED")


def test_rpc_error():
    """Test RpcError exception"""
    from earn_staking.errors import RpcError, ErrorCode

    print("Testing RpcError...")

    error1 = RpcError.connection_failed("https://rpc.example.com")
    assert error1.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error1.recoverable == True
    assert error1.endpoint == "https://rpc.example.com"

    error2 = RpcError.timeout("https://rpc.example.com", 30.0)
    assert error2.code == ErrorCode.RPC_TIMEOUT
    assert error2.recoverable == True

    error3 = RpcError.rate_limited("https://rpc.example.com")
    assert error3.code == ErrorCode.RPC_RATE_LIMITED
    assert error3.recoverable == True

    error4 = RpcError.server_error("https://rpc.example.com", {"code": -32602, "message": "Invalid param"})
    assert error4.code == ErrorCode.RPC_SERVER_ERROR
    assert error4.recoverable == False
    assert error4.details["rpc_error_code"] == -32602
    assert "Invalid param" in str(error4)

    print("  RpcError: PASSED")


def test_encoding_error():
    from earn_staking.errors import EncodingError, ErrorCode

    print("Testing EncodingError...")

    error = EncodingError.out_of_range("amount", 2 ** 64, "u64")
    assert error.code == ErrorCode.ENCODING_OUT_OF_RANGE
    assert error.field == "amount"
    assert error.details == {"field": "amount"}
    assert not error.recoverable

    error = EncodingError.invalid_params("create_pool", ["cooldown_seconds"], ["extra"])
    assert error.code == ErrorCode.ENCODING_INVALID_PARAMS
    assert "missing cooldown_seconds" in error.message
    assert "unexpected extra" in error.message

    print("  EncodingError: PASSED")


def test_derivation_error():
    from earn_staking.errors import DerivationError, ErrorCode

    error = DerivationError.exhausted([b"ab"], "Program111")
    assert error.code == ErrorCode.DERIVATION_EXHAUSTED
    assert error.details["seeds"] == ["6162"]
    assert not error.recoverable


def test_discriminator_and_transaction_errors():
    from earn_staking.errors import DiscriminatorError, TransactionError, ConfigurationError, ErrorCode

    error = DiscriminatorError.mismatch("StakingPool", bytes(8), b"\x01" * 8)
    assert error.name == "StakingPool"
    assert error.code == ErrorCode.DISCRIMINATOR_MISMATCH

    assert TransactionError.empty().code == ErrorCode.TX_EMPTY
    cause = ValueError("bad key")
    failed = TransactionError.build_failed(cause)
    assert failed.original_error is cause
    assert failed.code == ErrorCode.TX_BUILD_FAILED

    assert ConfigurationError.missing("RPC endpoint").code == ErrorCode.CONFIG_MISSING
    assert ConfigurationError.invalid("x", "y").code == ErrorCode.CONFIG_INVALID


def test_error_inheritance():
    """Test error class inheritance"""
    from earn_staking.errors import (
        EarnStakingError,
        RpcError,
        DerivationError,
        EncodingError,
        DiscriminatorError,
        TransactionError,
        ConfigurationError,
    )

    print("Testing Error Inheritance...")

    for cls in (RpcError, DerivationError, EncodingError, DiscriminatorError, TransactionError, ConfigurationError):
        assert issubclass(cls, EarnStakingError)

    # All should be catchable as EarnStakingError
    try:
        raise RpcError.connection_failed("test")
    except EarnStakingError:
        pass  # Expected

    print("  Error Inheritance: PASSED")


def main():
    """Run all error tests"""
    print("=" * 60)
    print("Earn Staking Errors Tests")
    print("=" * 60)

    tests = [
        test_error_code,
        test_base_error,
        test_rpc_error,
        test_encoding_error,
        test_derivation_error,
        test_discriminator_and_transaction_errors,
        test_error_inheritance,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"  FAILED: {e}")
            failed += 1

    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
