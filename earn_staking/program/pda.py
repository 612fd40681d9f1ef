"""
Program-derived address helpers for the staking program

derive() runs the same search the runtime's find_program_address does:
bumps 255 down to 0, sha256(seeds + [bump] + program_id + marker), first
off-curve digest wins.
"""

import hashlib
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from solders.pubkey import Pubkey

from ..errors import DerivationError, EncodingError
from .constants import (
    STAKING_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    GLOBAL_CONFIG_SEED,
    STAKING_POOL_SEED,
    STAKE_ACCOUNT_SEED,
    POOL_TOKEN_ACCOUNT_SEED,
    REWARDS_VAULT_SEED,
    POOL_AUTHORITY_SEED,
    PDA_MARKER,
    MAX_SEEDS,
    MAX_SEED_LEN,
)

PubkeyLike = Union[Pubkey, str]


def as_pubkey(value: PubkeyLike) -> Pubkey:
    """Accept a Pubkey or a base58 string"""
    if isinstance(value, Pubkey):
        return value
    try:
        return Pubkey.from_string(value)
    except (TypeError, ValueError) as e:
        raise EncodingError.invalid_type("pubkey", value, "pubkey") from e


def _check_seeds(seeds: Sequence[bytes]) -> None:
    # The bump occupies the last seed slot
    if len(seeds) > MAX_SEEDS - 1:
        raise DerivationError.invalid_seeds(
            f"{len(seeds)} seeds given, at most {MAX_SEEDS - 1} allowed"
        )
    for i, seed in enumerate(seeds):
        if len(seed) > MAX_SEED_LEN:
            raise DerivationError.invalid_seeds(
                f"seed {i} is {len(seed)} bytes, max {MAX_SEED_LEN}"
            )


def create_program_address(seeds: Sequence[bytes], program_id: PubkeyLike) -> Optional[Pubkey]:
    """
    Hash seeds (bump included) into a candidate address.

    Returns:
        The address, or None if the digest lies on the ed25519 curve
    """
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(bytes(seed))
    hasher.update(bytes(as_pubkey(program_id)))
    hasher.update(PDA_MARKER)
    candidate = Pubkey.from_bytes(hasher.digest())
    if candidate.is_on_curve():
        return None
    return candidate


def derive(seeds: Sequence[bytes], program_id: PubkeyLike = STAKING_PROGRAM_ID) -> Tuple[Pubkey, int]:
    """
    Derive (address, bump) from seeds under program_id.

    Args:
        seeds: Ordered seed byte strings (without bump)
        program_id: Owning program

    Returns:
        (address, bump)

    Raises:
        DerivationError: seeds violate runtime limits or no bump is off-curve
    """
    seeds = [bytes(s) for s in seeds]
    _check_seeds(seeds)
    program = as_pubkey(program_id)

    for bump in range(255, -1, -1):
        address = create_program_address(seeds + [bytes([bump])], program)
        if address is not None:
            return address, bump

    raise DerivationError.exhausted(seeds, str(program))


def find_global_config(program_id: PubkeyLike = STAKING_PROGRAM_ID) -> Tuple[Pubkey, int]:
    return derive([GLOBAL_CONFIG_SEED], program_id)


def find_staking_pool(mint: PubkeyLike, program_id: PubkeyLike = STAKING_PROGRAM_ID) -> Tuple[Pubkey, int]:
    return derive([STAKING_POOL_SEED, bytes(as_pubkey(mint))], program_id)


def find_stake_account(
    pool: PubkeyLike,
    owner: PubkeyLike,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    return derive(
        [STAKE_ACCOUNT_SEED, bytes(as_pubkey(pool)), bytes(as_pubkey(owner))],
        program_id,
    )


def find_pool_token_account(pool: PubkeyLike, program_id: PubkeyLike = STAKING_PROGRAM_ID) -> Tuple[Pubkey, int]:
    return derive([POOL_TOKEN_ACCOUNT_SEED, bytes(as_pubkey(pool))], program_id)


def find_rewards_vault(pool: PubkeyLike, program_id: PubkeyLike = STAKING_PROGRAM_ID) -> Tuple[Pubkey, int]:
    return derive([REWARDS_VAULT_SEED, bytes(as_pubkey(pool))], program_id)


def find_pool_authority(pool: PubkeyLike, program_id: PubkeyLike = STAKING_PROGRAM_ID) -> Tuple[Pubkey, int]:
    return derive([POOL_AUTHORITY_SEED, bytes(as_pubkey(pool))], program_id)


def get_associated_token_address(
    owner: PubkeyLike,
    mint: PubkeyLike,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
) -> Pubkey:
    """
    Get associated token account address.

    Args:
        owner: Wallet owner (may itself be a PDA)
        mint: Token mint
        token_program: Token program (defaults to Tokenkeg)

    Returns:
        ATA address
    """
    seeds = [
        bytes(as_pubkey(owner)),
        bytes(as_pubkey(token_program)),
        bytes(as_pubkey(mint)),
    ]
    address, _ = derive(seeds, ASSOCIATED_TOKEN_PROGRAM_ID)
    return address


def get_pool_token_account(
    pool: PubkeyLike,
    mint: PubkeyLike,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
) -> Pubkey:
    """
    Token account holding a pool's staked tokens.

    This is the ATA of the pool-authority PDA, the only owner the program
    can sign transfers out of during unstake.
    """
    authority, _ = find_pool_authority(pool, program_id)
    return get_associated_token_address(authority, mint, token_program)


@dataclass(frozen=True)
class PoolAddresses:
    """Every address derived from a pool's mint"""
    mint: Pubkey
    staking_pool: Pubkey
    staking_pool_bump: int
    pool_authority: Pubkey
    pool_token_account: Pubkey
    rewards_vault: Pubkey

    @classmethod
    def derive(
        cls,
        mint: PubkeyLike,
        program_id: PubkeyLike = STAKING_PROGRAM_ID,
        token_program: PubkeyLike = TOKEN_PROGRAM_ID,
    ) -> "PoolAddresses":
        mint_key = as_pubkey(mint)
        pool, bump = find_staking_pool(mint_key, program_id)
        authority, _ = find_pool_authority(pool, program_id)
        vault, _ = find_rewards_vault(pool, program_id)
        return cls(
            mint=mint_key,
            staking_pool=pool,
            staking_pool_bump=bump,
            pool_authority=authority,
            pool_token_account=get_associated_token_address(authority, mint_key, token_program),
            rewards_vault=vault,
        )
