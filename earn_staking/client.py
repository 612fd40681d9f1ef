"""
StakingClient - entry point for the Earn staking program

Reads and decodes program accounts over async JSON-RPC and builds unsigned
transactions for every staking instruction. Signing and submission are left
to the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .config import config as global_config
from .errors import DiscriminatorError
from .infra import (
    RpcClient,
    RpcClientConfig,
    TxBuilder,
    TxBuilderConfig,
    account_data_bytes,
    memcmp_filter,
)
from .program import (
    PubkeyLike,
    as_pubkey,
    account_discriminator,
    verify_discriminators,
    find_global_config,
    find_staking_pool,
    find_stake_account,
    find_rewards_vault,
    find_pool_authority,
    get_associated_token_address,
    get_layout,
    owner_offset,
    decode_account,
    pending_rewards,
    build_initialize_instruction,
    build_create_pool_instruction,
    build_stake_instruction,
    build_request_unstake_instruction,
    build_unstake_instruction,
    build_cancel_unstake_instruction,
    build_claim_rewards_instruction,
    build_deposit_rewards_instruction,
    build_update_rewards_instruction,
    build_create_ata_idempotent_instruction,
    TOKEN_PROGRAM_ID,
    DEFAULT_MIN_STAKE_AMOUNT,
    DEFAULT_COOLDOWN_SECONDS,
)
from .types import (
    AccountType,
    GlobalConfig,
    StakingPool,
    StakeAccount,
    ProgramAccount,
    BuiltTransaction,
    to_account_type,
)

logger = logging.getLogger(__name__)


class StakingClient:
    """
    Staking program client

    Construct once and pass it to whoever needs it.

    Usage:
        async with StakingClient.from_url("https://api.devnet.solana.com") as client:
            pools = await client.get_all_pools()
            built = client.build_stake_tx(owner, mint, 1_000_000)
            # set fee payer + blockhash, sign, send
    """

    def __init__(
        self,
        rpc: Union[RpcClient, str, List[str], None] = None,
        program_id: Optional[PubkeyLike] = None,
        rpc_config: Optional[RpcClientConfig] = None,
        tx_config: Optional[TxBuilderConfig] = None,
    ):
        """
        Initialize StakingClient

        Args:
            rpc: RpcClient, endpoint URL, or list of URLs (defaults to SOLANA_RPC_URL)
            program_id: Staking program (defaults to STAKING_PROGRAM_ID)
            rpc_config: RPC configuration when an URL is given
            tx_config: Transaction builder configuration
        """
        if isinstance(rpc, RpcClient):
            self._rpc = rpc
        else:
            self._rpc = RpcClient(rpc or global_config.rpc.url, config=rpc_config)

        self._program_id = as_pubkey(program_id or global_config.staking.program_id)
        self._tx_builder = TxBuilder(tx_config)

    @classmethod
    def from_url(
        cls,
        rpc_url: Union[str, List[str]],
        program_id: Optional[PubkeyLike] = None,
        rpc_config: Optional[RpcClientConfig] = None,
        tx_config: Optional[TxBuilderConfig] = None,
    ) -> "StakingClient":
        return cls(RpcClient(rpc_url, config=rpc_config), program_id=program_id, tx_config=tx_config)

    @property
    def rpc(self) -> RpcClient:
        """Access to RPC client"""
        return self._rpc

    @property
    def tx_builder(self) -> TxBuilder:
        """Access to transaction builder"""
        return self._tx_builder

    @property
    def program_id(self) -> Pubkey:
        return self._program_id

    # =========================================================================
    # Generic reads
    # =========================================================================

    def _decode(self, address: str, account_info: Optional[dict], expected_type: AccountType):
        """Decode one account info dict, None on any mismatch"""
        if not account_info:
            return None

        owner = account_info.get("owner")
        if owner is not None and owner != str(self._program_id):
            logger.warning(f"Account {address} is owned by {owner}, not {self._program_id}")
            return None

        data = account_data_bytes(account_info)
        if data is None:
            logger.warning(f"Account {address} has no base64 data")
            return None

        record = decode_account(data, expected_type)
        if record is None:
            logger.debug(f"Account {address} is not a {expected_type.value} ({len(data)} bytes)")
        return record

    async def get_account(self, address: PubkeyLike, expected_type):
        """
        Fetch and decode a single account.

        Args:
            address: Account address
            expected_type: AccountType, its name, or a record class

        Returns:
            Decoded record, or None if missing or not of expected_type
        """
        expected_type = to_account_type(expected_type)
        address = str(as_pubkey(address))
        info = await self._rpc.get_account_info(address)
        return self._decode(address, info, expected_type)

    async def _scan(self, expected_type: AccountType, filters: List[dict]) -> List[ProgramAccount]:
        raw = await self._rpc.get_program_accounts(str(self._program_id), filters=filters)
        results = []
        for item in raw:
            address = item.get("pubkey")
            record = self._decode(address, item.get("account"), expected_type)
            if record is not None:
                results.append(ProgramAccount(Pubkey.from_string(address), record))
        logger.debug(f"Scanned {len(raw)} {expected_type.value} candidate(s), decoded {len(results)}")
        return results

    async def get_all_by_type(self, expected_type) -> List[ProgramAccount]:
        """
        Every account of a type, filtered server-side by discriminator.

        Returns:
            List of (address, record)
        """
        expected_type = to_account_type(expected_type)
        filters = [memcmp_filter(0, account_discriminator(expected_type.value))]
        return await self._scan(expected_type, filters)

    async def get_all_by_owner(self, owner: PubkeyLike, expected_type) -> List[ProgramAccount]:
        """
        Accounts of a type whose owner field equals owner.

        Owner field: StakeAccount.owner (offset 8), StakingPool.agent_wallet
        (offset 40), GlobalConfig.authority (offset 8).

        Returns:
            List of (address, record)
        """
        expected_type = to_account_type(expected_type)
        filters = [
            memcmp_filter(0, account_discriminator(expected_type.value)),
            memcmp_filter(owner_offset(expected_type), bytes(as_pubkey(owner))),
        ]
        return await self._scan(expected_type, filters)

    # =========================================================================
    # Convenience reads
    # =========================================================================

    async def get_global_config(self) -> Optional[GlobalConfig]:
        address, _ = find_global_config(self._program_id)
        return await self.get_account(address, AccountType.GLOBAL_CONFIG)

    async def get_staking_pool(self, mint: PubkeyLike) -> Optional[StakingPool]:
        address, _ = find_staking_pool(mint, self._program_id)
        return await self.get_account(address, AccountType.STAKING_POOL)

    async def get_stake_account(self, pool: PubkeyLike, owner: PubkeyLike) -> Optional[StakeAccount]:
        address, _ = find_stake_account(pool, owner, self._program_id)
        return await self.get_account(address, AccountType.STAKE_ACCOUNT)

    async def get_all_pools(self) -> List[ProgramAccount]:
        return await self.get_all_by_type(AccountType.STAKING_POOL)

    async def get_user_stakes(self, owner: PubkeyLike) -> List[ProgramAccount]:
        return await self.get_all_by_owner(owner, AccountType.STAKE_ACCOUNT)

    async def get_pending_rewards(self, mint: PubkeyLike, owner: PubkeyLike) -> int:
        """
        Claimable rewards (lamports) for owner in the pool of mint.

        Pool and position are fetched in one getMultipleAccounts call.
        Returns 0 when the pool or the position does not exist.
        """
        pool_address, _ = find_staking_pool(mint, self._program_id)
        stake_address, _ = find_stake_account(pool_address, owner, self._program_id)

        pool_info, stake_info = await self._rpc.get_multiple_accounts(
            [str(pool_address), str(stake_address)]
        )
        pool = self._decode(str(pool_address), pool_info, AccountType.STAKING_POOL)
        stake = self._decode(str(stake_address), stake_info, AccountType.STAKE_ACCOUNT)
        if pool is None or stake is None:
            return 0
        return pending_rewards(pool, stake)

    async def verify_deployment(self) -> bool:
        """
        Startup self-check of the discriminator registry.

        Recomputes every tag once, then compares the live global-config
        account's leading bytes with the registered tag.

        Returns:
            True if verified, False if global-config does not exist yet

        Raises:
            DiscriminatorError: a tag does not match
        """
        verify_discriminators()

        address, _ = find_global_config(self._program_id)
        info = await self._rpc.get_account_info(str(address))
        data = account_data_bytes(info)
        if data is None:
            logger.warning(f"Global config {address} not found, cannot verify against live program")
            return False

        expected = account_discriminator(AccountType.GLOBAL_CONFIG.value)
        actual = bytes(data[:8])
        if actual != expected:
            raise DiscriminatorError.mismatch(AccountType.GLOBAL_CONFIG.value, expected, actual)
        if len(data) < get_layout(AccountType.GLOBAL_CONFIG).body_size:
            logger.warning(f"Global config {address} is shorter than expected ({len(data)} bytes)")

        logger.info(f"Verified staking program {self._program_id}")
        return True

    # =========================================================================
    # Transaction builders
    # =========================================================================

    def _built(self, instructions: List[Instruction], addresses: Dict[str, Pubkey]) -> BuiltTransaction:
        return BuiltTransaction(
            transaction=self._tx_builder.build(instructions),
            instructions=list(instructions),
            addresses=addresses,
        )

    def build_initialize_tx(self, authority: PubkeyLike, earn_wallet: PubkeyLike) -> BuiltTransaction:
        global_config_address, _ = find_global_config(self._program_id)
        ix = build_initialize_instruction(authority, earn_wallet, self._program_id)
        return self._built([ix], {"global_config": global_config_address})

    def build_create_pool_tx(
        self,
        mint: PubkeyLike,
        agent_wallet: PubkeyLike,
        authority: PubkeyLike,
        min_stake_amount: int = DEFAULT_MIN_STAKE_AMOUNT,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
    ) -> BuiltTransaction:
        """
        Build create_pool transaction.

        Returns:
            BuiltTransaction with addresses["staking_pool"]
        """
        ix = build_create_pool_instruction(
            authority,
            mint,
            agent_wallet,
            min_stake_amount=min_stake_amount,
            cooldown_seconds=cooldown_seconds,
            program_id=self._program_id,
        )
        pool, _ = find_staking_pool(mint, self._program_id)
        return self._built([ix], {"staking_pool": pool})

    def _position_addresses(self, mint: PubkeyLike, owner: PubkeyLike, token_program: PubkeyLike) -> Dict[str, Pubkey]:
        pool, _ = find_staking_pool(mint, self._program_id)
        stake_account, _ = find_stake_account(pool, owner, self._program_id)
        pool_authority, _ = find_pool_authority(pool, self._program_id)
        return {
            "staking_pool": pool,
            "stake_account": stake_account,
            "pool_authority": pool_authority,
            "pool_token_account": get_associated_token_address(pool_authority, mint, token_program),
            "user_token_account": get_associated_token_address(owner, mint, token_program),
        }

    def build_stake_tx(
        self,
        owner: PubkeyLike,
        mint: PubkeyLike,
        amount: int,
        create_pool_token_account: bool = False,
        token_program: PubkeyLike = TOKEN_PROGRAM_ID,
    ) -> BuiltTransaction:
        """
        Build stake transaction.

        Args:
            owner: Staker (signer)
            mint: Pool token mint
            amount: Amount in base units
            create_pool_token_account: Prepend an idempotent ATA create for
                the pool-authority token account (first stake into a pool)
            token_program: Token program of the mint

        Returns:
            BuiltTransaction with stake_account and pool_token_account addresses
        """
        addresses = self._position_addresses(mint, owner, token_program)
        instructions = []
        if create_pool_token_account:
            instructions.append(build_create_ata_idempotent_instruction(
                owner, addresses["pool_authority"], mint, token_program,
            ))
        instructions.append(build_stake_instruction(
            owner, mint, amount, token_program=token_program, program_id=self._program_id,
        ))
        return self._built(instructions, addresses)

    def build_request_unstake_tx(self, owner: PubkeyLike, mint: PubkeyLike, amount: int) -> BuiltTransaction:
        addresses = self._position_addresses(mint, owner, TOKEN_PROGRAM_ID)
        ix = build_request_unstake_instruction(owner, mint, amount, self._program_id)
        return self._built([ix], addresses)

    def build_unstake_tx(
        self,
        owner: PubkeyLike,
        mint: PubkeyLike,
        amount: int,
        token_program: PubkeyLike = TOKEN_PROGRAM_ID,
    ) -> BuiltTransaction:
        """Build unstake transaction (no cooldown, or after it has elapsed)"""
        addresses = self._position_addresses(mint, owner, token_program)
        ix = build_unstake_instruction(
            owner, mint, amount, token_program=token_program, program_id=self._program_id,
        )
        return self._built([ix], addresses)

    def build_cancel_unstake_tx(self, owner: PubkeyLike, mint: PubkeyLike) -> BuiltTransaction:
        addresses = self._position_addresses(mint, owner, TOKEN_PROGRAM_ID)
        ix = build_cancel_unstake_instruction(owner, mint, self._program_id)
        return self._built([ix], addresses)

    def build_claim_rewards_tx(self, owner: PubkeyLike, mint: PubkeyLike) -> BuiltTransaction:
        addresses = self._position_addresses(mint, owner, TOKEN_PROGRAM_ID)
        addresses["rewards_vault"], _ = find_rewards_vault(addresses["staking_pool"], self._program_id)
        ix = build_claim_rewards_instruction(owner, mint, self._program_id)
        return self._built([ix], addresses)

    def build_deposit_rewards_tx(self, depositor: PubkeyLike, mint: PubkeyLike, amount: int) -> BuiltTransaction:
        pool, _ = find_staking_pool(mint, self._program_id)
        vault, _ = find_rewards_vault(pool, self._program_id)
        ix = build_deposit_rewards_instruction(depositor, mint, amount, self._program_id)
        return self._built([ix], {"staking_pool": pool, "rewards_vault": vault})

    def build_update_rewards_tx(self, mint: PubkeyLike) -> BuiltTransaction:
        pool, _ = find_staking_pool(mint, self._program_id)
        ix = build_update_rewards_instruction(mint, self._program_id)
        return self._built([ix], {"staking_pool": pool})

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self):
        """Close the underlying RPC client"""
        await self._rpc.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
