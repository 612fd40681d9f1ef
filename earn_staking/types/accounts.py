"""
Decoded account records of the staking program
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict

from solders.pubkey import Pubkey


class AccountType(Enum):
    """Account shapes owned by the staking program"""
    GLOBAL_CONFIG = "GlobalConfig"
    STAKING_POOL = "StakingPool"
    STAKE_ACCOUNT = "StakeAccount"


class _Record:
    """Shared helpers for decoded records"""

    account_type: AccountType

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view: pubkeys as base58, integers untouched"""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Pubkey) else value
        return result


@dataclass
class GlobalConfig(_Record):
    """
    Protocol-wide singleton

    Attributes:
        authority: Identity controlling protocol settings
        earn_wallet: Receives the protocol-level cut
        total_pools: Number of pools created
        total_staked_value: Aggregate staked amount
        total_rewards_distributed: Aggregate rewards paid out
        bump: global-config PDA bump
    """
    authority: Pubkey
    earn_wallet: Pubkey
    total_pools: int = 0
    total_staked_value: int = 0
    total_rewards_distributed: int = 0
    bump: int = 0

    account_type = AccountType.GLOBAL_CONFIG


@dataclass
class StakingPool(_Record):
    """
    One pool per staked mint

    Attributes:
        mint: Token accepted by the pool
        agent_wallet: Identity with a pool-specific revenue share
        total_staked: Sum of active stakes
        staker_count: Owners with a non-zero position
        rewards_available: Lamports waiting to be distributed
        rewards_distributed: Lamports already paid out
        reward_per_token_stored: u128 accumulator scaled by 1e18
        last_update_time: Unix timestamp of last accumulator update
        min_stake_amount: Smallest accepted stake
        cooldown_seconds: Delay between request_unstake and unstake
        created_at: Unix timestamp of pool creation
        paused: Whether staking is paused
        bump: staking-pool PDA bump
    """
    mint: Pubkey
    agent_wallet: Pubkey
    total_staked: int = 0
    staker_count: int = 0
    rewards_available: int = 0
    rewards_distributed: int = 0
    reward_per_token_stored: int = 0
    last_update_time: int = 0
    min_stake_amount: int = 0
    cooldown_seconds: int = 0
    created_at: int = 0
    paused: bool = False
    bump: int = 0

    account_type = AccountType.STAKING_POOL


@dataclass
class StakeAccount(_Record):
    """
    One position per (pool, owner)

    Timestamps use 0 for "never happened".
    """
    owner: Pubkey
    pool: Pubkey
    amount: int = 0
    reward_per_token_paid: int = 0
    rewards_earned: int = 0
    staked_at: int = 0
    last_claim_at: int = 0
    unstake_requested_at: int = 0
    unstake_amount: int = 0
    bump: int = 0

    account_type = AccountType.STAKE_ACCOUNT

    @property
    def has_pending_unstake(self) -> bool:
        return self.unstake_requested_at != 0

    @property
    def is_active(self) -> bool:
        return self.amount > 0


RECORD_TYPES = {
    AccountType.GLOBAL_CONFIG: GlobalConfig,
    AccountType.STAKING_POOL: StakingPool,
    AccountType.STAKE_ACCOUNT: StakeAccount,
}


def to_account_type(value) -> AccountType:
    """Accept an AccountType, its name string, or a record class"""
    if isinstance(value, AccountType):
        return value
    if isinstance(value, type) and issubclass(value, _Record):
        return value.account_type
    return AccountType(value)


def record_class(account_type) -> type:
    return RECORD_TYPES[to_account_type(account_type)]
