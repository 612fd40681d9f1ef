"""
Unit tests for retry logic module
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, patch

from earn_staking.infra.retry import (
    retry_async,
    classify_error,
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    RECOVERABLE_KEYWORDS,
)
from earn_staking.errors import (
    ErrorCode,
    RpcError,
    EncodingError,
    DerivationError,
)


class TestClassifyError(unittest.TestCase):
    """Tests for error classification"""

    def test_timeout_error_is_recoverable(self):
        """Timeout errors should be classified as recoverable"""
        error = Exception("Connection timeout after 30 seconds")
        is_recoverable, error_code = classify_error(error)

        self.assertTrue(is_recoverable)
        self.assertEqual(error_code, ErrorCode.RPC_TIMEOUT)

    def test_network_error_is_recoverable(self):
        error = Exception("Network connection failed: ECONNRESET")
        is_recoverable, error_code = classify_error(error)

        self.assertTrue(is_recoverable)
        self.assertEqual(error_code, ErrorCode.RPC_CONNECTION_FAILED)

    def test_rate_limit_error_is_recoverable(self):
        error = Exception("Too many requests, rate limit exceeded")
        is_recoverable, error_code = classify_error(error)

        self.assertTrue(is_recoverable)
        self.assertEqual(error_code, ErrorCode.RPC_RATE_LIMITED)

    def test_503_error_is_recoverable(self):
        is_recoverable, error_code = classify_error(Exception("HTTP 503"))

        self.assertTrue(is_recoverable)
        self.assertEqual(error_code, ErrorCode.RPC_INVALID_RESPONSE)

    def test_unknown_error_not_recoverable(self):
        is_recoverable, error_code = classify_error(Exception("account data too small"))

        self.assertFalse(is_recoverable)
        self.assertIsNone(error_code)

    def test_typed_errors_use_their_own_flag(self):
        """A typed error is never reclassified by its message"""
        server = RpcError.server_error("https://rpc.example.com", {"code": -32002, "message": "connection refused"})
        self.assertEqual(classify_error(server), (False, ErrorCode.RPC_SERVER_ERROR))

        timeout = RpcError.timeout("https://rpc.example.com", 1.0)
        self.assertEqual(classify_error(timeout), (True, ErrorCode.RPC_TIMEOUT))

        encoding = EncodingError.out_of_range("amount", -1, "u64")
        self.assertEqual(classify_error(encoding), (False, ErrorCode.ENCODING_OUT_OF_RANGE))

        derivation = DerivationError.invalid_seeds("timeout")
        self.assertFalse(classify_error(derivation)[0])


class TestRetryAsync(unittest.TestCase):
    """Tests for retry_async"""

    def test_success_on_first_attempt(self):
        operation = AsyncMock(return_value="value")

        result = asyncio.run(retry_async(operation, "test_operation", max_retries=3, retry_delay=0.1))

        self.assertEqual(result, "value")
        self.assertEqual(operation.await_count, 1)

    @patch("earn_staking.infra.retry.asyncio.sleep", new_callable=AsyncMock)
    def test_success_after_retries(self, mock_sleep):
        """Linear backoff between recoverable failures"""
        operation = AsyncMock(side_effect=[
            RpcError.timeout("https://rpc.example.com", 1.0),
            RpcError.rate_limited("https://rpc.example.com"),
            "value",
        ])

        result = asyncio.run(retry_async(operation, "test_operation", max_retries=5, retry_delay=0.5))

        self.assertEqual(result, "value")
        self.assertEqual(operation.await_count, 3)
        self.assertEqual([c.args[0] for c in mock_sleep.await_args_list], [0.5, 1.0])

    def test_non_recoverable_error_no_retry(self):
        error = RpcError.server_error("https://rpc.example.com", {"code": -32600, "message": "bad"})
        operation = AsyncMock(side_effect=error)

        with self.assertRaises(RpcError) as ctx:
            asyncio.run(retry_async(operation, "test_operation", max_retries=5, retry_delay=0.1))

        self.assertIs(ctx.exception, error)
        self.assertEqual(operation.await_count, 1)

    @patch("earn_staking.infra.retry.asyncio.sleep", new_callable=AsyncMock)
    def test_max_retries_exceeded(self, mock_sleep):
        """The last recoverable error is re-raised"""
        operation = AsyncMock(side_effect=Exception("Connection timeout"))

        with self.assertRaises(Exception) as ctx:
            asyncio.run(retry_async(operation, "test_operation", max_retries=3, retry_delay=0.1))

        self.assertIn("timeout", str(ctx.exception))
        self.assertEqual(operation.await_count, 3)
        self.assertEqual(mock_sleep.await_count, 2)

    @patch("earn_staking.infra.retry.global_config")
    @patch("earn_staking.infra.retry.asyncio.sleep", new_callable=AsyncMock)
    def test_defaults_from_config(self, mock_sleep, mock_config):
        mock_config.rpc.max_retries = 2
        mock_config.rpc.retry_delay_seconds = 0.25

        operation = AsyncMock(side_effect=Exception("network down"))

        with self.assertRaises(Exception):
            asyncio.run(retry_async(operation, "test_operation"))

        self.assertEqual(operation.await_count, 2)
        mock_sleep.assert_awaited_once_with(0.25)

    def test_zero_retries_still_attempts_once(self):
        operation = AsyncMock(return_value=1)
        asyncio.run(retry_async(operation, "test_operation", max_retries=0, retry_delay=0))
        self.assertEqual(operation.await_count, 1)


class TestRetryKeywords(unittest.TestCase):

    def test_recoverable_keywords_present(self):
        for keyword in ["timeout", "connection", "network", "rate limit"]:
            self.assertIn(keyword, RECOVERABLE_KEYWORDS)


class TestCorrelationContext(unittest.TestCase):
    """Tests for correlation ID context management"""

    def test_generate_correlation_id(self):
        cid1 = generate_correlation_id()
        cid2 = generate_correlation_id()

        # Should be 12 hex characters
        self.assertEqual(len(cid1), 12)
        self.assertTrue(all(c in "0123456789abcdef" for c in cid1))
        self.assertNotEqual(cid1, cid2)

    def test_correlation_context_basic(self):
        self.assertIsNone(get_correlation_id())

        with CorrelationContext() as cid:
            self.assertEqual(get_correlation_id(), cid)
            self.assertEqual(len(cid), 12)

        self.assertIsNone(get_correlation_id())

    def test_correlation_context_with_prefix(self):
        with CorrelationContext("pools") as cid:
            self.assertTrue(cid.startswith("pools_"))
            self.assertEqual(get_correlation_id(), cid)

    def test_nested_correlation_context(self):
        """Inner context overrides and then restores the outer one"""
        with CorrelationContext("outer") as outer_cid:
            with CorrelationContext("inner") as inner_cid:
                self.assertEqual(get_correlation_id(), inner_cid)
            self.assertEqual(get_correlation_id(), outer_cid)

        self.assertIsNone(get_correlation_id())

    def test_set_correlation_id_manual(self):
        token = set_correlation_id("test_cid_12345")
        try:
            self.assertEqual(get_correlation_id(), "test_cid_12345")
        finally:
            from earn_staking.infra.retry import _correlation_id
            _correlation_id.reset(token)

        self.assertIsNone(get_correlation_id())


if __name__ == "__main__":
    unittest.main()
