"""
Test Reward Math

Tests for earn_staking.program.math.
"""

import sys
from pathlib import Path

from solders.pubkey import Pubkey

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from earn_staking.program.math import (
    saturating_sub,
    calculate_earned,
    pending_rewards,
    reward_per_token_increase,
    can_unstake,
    unstake_available_at,
)
from earn_staking.program.constants import REWARD_PRECISION
from earn_staking.types import StakingPool, StakeAccount


KEY = Pubkey.from_bytes(bytes([1] * 32))
U64_MAX = 2 ** 64 - 1
U128_MAX = 2 ** 128 - 1


def make_pool(reward_per_token_stored=0, total_staked=0):
    return StakingPool(
        mint=KEY,
        agent_wallet=KEY,
        total_staked=total_staked,
        reward_per_token_stored=reward_per_token_stored,
    )


def make_stake(amount=0, paid=0, earned=0, requested_at=0):
    return StakeAccount(
        owner=KEY,
        pool=KEY,
        amount=amount,
        reward_per_token_paid=paid,
        rewards_earned=earned,
        unstake_requested_at=requested_at,
    )


def test_calculate_earned():
    """Test earned = amount * delta / 1e18"""
    print("Testing calculate_earned...")

    # 0.5 lamports per token over 1_000 tokens
    assert calculate_earned(REWARD_PRECISION // 2, 0, 1_000) == 500
    assert calculate_earned(3 * REWARD_PRECISION, REWARD_PRECISION, 7) == 14

    # Truncates toward zero
    assert calculate_earned(1, 0, 999) == 0

    print("  calculate_earned: PASSED")


def test_calculate_earned_saturates():
    """Paid ahead of stored never produces negative rewards"""
    assert calculate_earned(5, 10, 1_000_000) == 0
    assert saturating_sub(5, 10) == 0
    assert saturating_sub(10, 5) == 5


def test_calculate_earned_truncates_to_u64():
    value = calculate_earned(U128_MAX, 0, U64_MAX)
    assert 0 <= value <= U64_MAX
    assert value == (U64_MAX * U128_MAX // REWARD_PRECISION) & U64_MAX


def test_pending_rewards():
    print("Testing pending_rewards...")

    pool = make_pool(reward_per_token_stored=2 * REWARD_PRECISION)
    stake = make_stake(amount=10, paid=REWARD_PRECISION, earned=5)
    assert pending_rewards(pool, stake) == 15

    # Saturates at u64 max
    stake = make_stake(amount=10, paid=0, earned=U64_MAX)
    assert pending_rewards(pool, stake) == U64_MAX

    print("  pending_rewards: PASSED")


def test_reward_per_token_increase():
    assert reward_per_token_increase(1_000, 0) == 0
    assert reward_per_token_increase(1_000, 1_000) == REWARD_PRECISION
    assert reward_per_token_increase(1, 3) == REWARD_PRECISION // 3
    # u128 saturation before the division
    assert reward_per_token_increase(U128_MAX, 1) == U128_MAX


def test_can_unstake():
    print("Testing can_unstake...")

    # No cooldown: always allowed
    assert can_unstake(make_stake(), 0, now=0)

    # Cooldown but no request
    assert not can_unstake(make_stake(), 3600, now=10 ** 10)

    stake = make_stake(requested_at=1_000)
    assert not can_unstake(stake, 3600, now=4_599)
    assert can_unstake(stake, 3600, now=4_600)

    print("  can_unstake: PASSED")


def test_unstake_available_at():
    assert unstake_available_at(make_stake(), 3600) is None
    assert unstake_available_at(make_stake(requested_at=1_000), 3600) == 4_600
