"""
Staking reward math

Read-side mirror of the program's reward-per-token accounting. All values
are integers; reward_per_token is scaled by REWARD_PRECISION (1e18).
"""

from typing import Optional

from ..types import StakingPool, StakeAccount
from .constants import REWARD_PRECISION, U64_MAX, U128_MAX


def saturating_sub(a: int, b: int) -> int:
    return a - b if a > b else 0


def calculate_earned(reward_per_token_stored: int, reward_per_token_paid: int, amount: int) -> int:
    """
    Rewards accrued since the last checkpoint.

    earned = amount * (stored - paid) / 1e18, truncated to u64 like the
    program's `as u64` cast.
    """
    delta = saturating_sub(reward_per_token_stored, reward_per_token_paid)
    return (amount * delta // REWARD_PRECISION) & U64_MAX


def pending_rewards(pool: StakingPool, stake: StakeAccount) -> int:
    """Claimable rewards: stored balance plus what accrued since the snapshot"""
    earned = calculate_earned(
        pool.reward_per_token_stored,
        stake.reward_per_token_paid,
        stake.amount,
    )
    return min(stake.rewards_earned + earned, U64_MAX)


def reward_per_token_increase(amount: int, total_staked: int) -> int:
    """Accumulator increase produced by depositing amount lamports"""
    if total_staked == 0:
        return 0
    scaled = min(amount * REWARD_PRECISION, U128_MAX)
    return scaled // total_staked


def can_unstake(stake: StakeAccount, cooldown_seconds: int, now: int) -> bool:
    """
    Whether the cooldown has elapsed.

    With no cooldown unstake is always allowed; otherwise a request must
    have been made first.
    """
    if cooldown_seconds == 0:
        return True
    if stake.unstake_requested_at == 0:
        return False
    return now >= stake.unstake_requested_at + cooldown_seconds


def unstake_available_at(stake: StakeAccount, cooldown_seconds: int) -> Optional[int]:
    """Unix time at which a pending request can be completed, or None"""
    if stake.unstake_requested_at == 0:
        return None
    return stake.unstake_requested_at + cooldown_seconds
