"""
Async RPC Client for Solana

Provides the read-only JSON-RPC surface the staking client needs, with:
- Multiple endpoint fallback
- Retry logic for recoverable failures (reads only)
- Rate limit handling
- Request timeout management
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import base58
import httpx

from ..errors import ErrorCode, RpcError, ConfigurationError
from ..config import config as global_config
from .retry import retry_async

logger = logging.getLogger(__name__)


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Allows per-client overrides while pulling defaults from the global
    config (earn_staking.config.RpcConfig).

    Usage:
        # Use all defaults from environment
        client = RpcClient(endpoint)

        # Override specific settings
        config = RpcClientConfig(timeout_seconds=60, max_retries=5)
        client = RpcClient(endpoint, config=config)
    """
    timeout_seconds: float = None
    max_retries: int = None
    retry_delay_seconds: float = None
    commitment: str = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.timeout_seconds is None:
            self.timeout_seconds = global_config.rpc.timeout_seconds
        if self.max_retries is None:
            self.max_retries = global_config.rpc.max_retries
        if self.retry_delay_seconds is None:
            self.retry_delay_seconds = global_config.rpc.retry_delay_seconds
        if self.commitment is None:
            self.commitment = global_config.rpc.commitment


def memcmp_filter(offset: int, data: bytes) -> Dict[str, Any]:
    """getProgramAccounts byte-equality filter (base58 payload)"""
    return {"memcmp": {"offset": offset, "bytes": base58.b58encode(bytes(data)).decode("ascii")}}


def data_size_filter(size: int) -> Dict[str, Any]:
    return {"dataSize": size}


def account_data_bytes(account_info: Optional[Dict[str, Any]]) -> Optional[bytes]:
    """
    Extract raw bytes from a base64-encoded account info dict.

    Returns:
        Account data, or None for a missing account
    """
    if not account_info:
        return None
    data = account_info.get("data")
    if isinstance(data, list) and data:
        return base64.b64decode(data[0])
    if isinstance(data, str):
        return base64.b64decode(data)
    return None


class RpcClient:
    """
    Async Solana RPC client

    Supports:
    - Multiple RPC endpoints with automatic fallback
    - Retry with linear backoff for transient failures
    - Rate limit handling
    - Configurable timeouts

    Nothing here writes to the chain, so every call is safe to retry.

    Usage:
        async with RpcClient("https://api.devnet.solana.com") as rpc:
            info = await rpc.get_account_info("AccountAddress...")
    """

    def __init__(
        self,
        endpoint: Union[str, List[str]],
        config: Optional[RpcClientConfig] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL or list of URLs (for fallback)
            config: RPC configuration options
        """
        self._endpoints = [endpoint] if isinstance(endpoint, str) else list(endpoint)
        self._endpoints = [e for e in self._endpoints if e]
        if not self._endpoints:
            raise ConfigurationError.missing("RPC endpoint")

        self._config = config or RpcClientConfig()
        self._current_endpoint_idx = 0
        self._client: Optional[httpx.AsyncClient] = None
        self._request_id = 0

    @property
    def endpoint(self) -> str:
        """Current active endpoint"""
        return self._endpoints[self._current_endpoint_idx]

    @property
    def endpoints(self) -> List[str]:
        return list(self._endpoints)

    @property
    def commitment(self) -> str:
        """Default commitment level"""
        return self._config.commitment

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def _rotate_endpoint(self):
        """Rotate to next endpoint on failure"""
        if len(self._endpoints) > 1:
            self._current_endpoint_idx = (self._current_endpoint_idx + 1) % len(self._endpoints)
            logger.info(f"Rotating to RPC endpoint: {self.endpoint}")

    async def _post(self, method: str, params: List[Any], timeout: float) -> Any:
        """Single JSON-RPC round trip against the current endpoint"""
        endpoint = self.endpoint
        self._request_id += 1
        body = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        try:
            response = await self._get_client().post(endpoint, json=body, timeout=timeout)

            if response.status_code == 429:
                logger.warning(f"Rate limited by {endpoint}")
                raise RpcError.rate_limited(endpoint)

            response.raise_for_status()
            result = response.json()

        except httpx.TimeoutException:
            raise RpcError.timeout(endpoint, timeout) from None
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            # Only 5xx is retried; 429 is handled above
            raise RpcError(
                f"HTTP error {status}",
                code=ErrorCode.RPC_SERVER_ERROR if status >= 500 else ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=endpoint,
                original_error=e,
                recoverable=status >= 500,
            ) from e
        except httpx.RequestError as e:
            raise RpcError.connection_failed(endpoint, e) from e
        except ValueError as e:
            raise RpcError.invalid_response(endpoint, f"body is not JSON ({e})") from e

        if not isinstance(result, dict):
            raise RpcError.invalid_response(endpoint, "expected a JSON object")

        if "error" in result:
            raise RpcError.server_error(endpoint, result["error"])

        return result.get("result")

    async def call(
        self,
        method: str,
        params: List[Any],
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make JSON-RPC call

        Each endpoint gets max_retries attempts; recoverable failures then
        move on to the next endpoint. A JSON-RPC error object is raised
        immediately.

        Args:
            method: RPC method name
            params: RPC parameters
            timeout: Optional timeout override

        Returns:
            RPC result

        Raises:
            RpcError: On RPC failure
        """
        timeout_val = timeout or self._config.timeout_seconds
        last_error: Optional[RpcError] = None

        for _ in range(len(self._endpoints)):
            try:
                return await retry_async(
                    lambda: self._post(method, params, timeout_val),
                    f"rpc.{method}",
                    max_retries=self._config.max_retries,
                    retry_delay=self._config.retry_delay_seconds,
                )
            except RpcError as e:
                if not e.recoverable:
                    raise
                last_error = e
                self._rotate_endpoint()

        raise last_error or RpcError("All RPC endpoints failed")

    async def get_account_info(
        self,
        address: str,
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get account information

        Args:
            address: Account address (base58)
            encoding: Data encoding
            commitment: Commitment level

        Returns:
            Account info or None if not found
        """
        params = [
            str(address),
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = await self.call("getAccountInfo", params)
        return result.get("value") if result else None

    async def get_multiple_accounts(
        self,
        addresses: List[str],
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> List[Optional[Dict[str, Any]]]:
        """
        Get multiple account information in one call

        Returns:
            List of account info (None for accounts not found)
        """
        params = [
            [str(a) for a in addresses],
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = await self.call("getMultipleAccounts", params)
        return result.get("value", []) if result else []

    async def get_program_accounts(
        self,
        program_id: str,
        filters: Optional[List[Dict[str, Any]]] = None,
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get all accounts owned by a program

        Args:
            program_id: Program ID (base58)
            filters: Optional filters (memcmp, dataSize)
            encoding: Data encoding
            commitment: Commitment level

        Returns:
            List of dicts with pubkey and account fields

        Example filters:
            [
                {"memcmp": {"offset": 0, "bytes": "base58_data"}},
                {"dataSize": 178}
            ]
        """
        config: Dict[str, Any] = {
            "encoding": encoding,
            "commitment": commitment or self.commitment,
        }
        if filters:
            config["filters"] = filters

        result = await self.call("getProgramAccounts", [str(program_id), config])
        return result or []

    async def get_latest_blockhash(self, commitment: Optional[str] = None) -> Dict[str, Any]:
        """
        Get latest blockhash

        Returns:
            Dict with blockhash and lastValidBlockHeight
        """
        params = [{"commitment": commitment or self.commitment}]
        result = await self.call("getLatestBlockhash", params)
        return result.get("value", {}) if result else {}

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
