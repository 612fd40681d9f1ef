"""
Earn staking program codec

Address derivation, discriminators, account layouts and instruction
encoding for the on-chain staking program.
"""

from .constants import (
    STAKING_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    REWARD_PRECISION,
    GLOBAL_CONFIG_SIZE,
    STAKING_POOL_SIZE,
    STAKE_ACCOUNT_SIZE,
    DEFAULT_MIN_STAKE_AMOUNT,
    DEFAULT_COOLDOWN_SECONDS,
)
from .discriminators import (
    ACCOUNT_DISCRIMINATORS,
    INSTRUCTION_DISCRIMINATORS,
    account_discriminator,
    instruction_discriminator,
    anchor_discriminator,
    verify_discriminators,
)
from .encoding import combine_u128, split_u128
from .pda import (
    PubkeyLike,
    as_pubkey,
    derive,
    create_program_address,
    find_global_config,
    find_staking_pool,
    find_stake_account,
    find_pool_token_account,
    find_rewards_vault,
    find_pool_authority,
    get_associated_token_address,
    get_pool_token_account,
    PoolAddresses,
)
from .layouts import (
    AccountLayout,
    LAYOUTS,
    get_layout,
    field_offset,
    owner_offset,
    identify_account,
    decode_account,
    encode_account,
    parse_global_config,
    parse_staking_pool,
    parse_stake_account,
)
from .instructions import (
    INSTRUCTION_ARGS,
    encode_instruction,
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
)
from .math import (
    calculate_earned,
    pending_rewards,
    reward_per_token_increase,
    can_unstake,
    unstake_available_at,
)

__all__ = [
    # Constants
    "STAKING_PROGRAM_ID",
    "SYSTEM_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "REWARD_PRECISION",
    "GLOBAL_CONFIG_SIZE",
    "STAKING_POOL_SIZE",
    "STAKE_ACCOUNT_SIZE",
    "DEFAULT_MIN_STAKE_AMOUNT",
    "DEFAULT_COOLDOWN_SECONDS",
    # Discriminators
    "ACCOUNT_DISCRIMINATORS",
    "INSTRUCTION_DISCRIMINATORS",
    "account_discriminator",
    "instruction_discriminator",
    "anchor_discriminator",
    "verify_discriminators",
    # Encoding
    "combine_u128",
    "split_u128",
    # PDA
    "PubkeyLike",
    "as_pubkey",
    "derive",
    "create_program_address",
    "find_global_config",
    "find_staking_pool",
    "find_stake_account",
    "find_pool_token_account",
    "find_rewards_vault",
    "find_pool_authority",
    "get_associated_token_address",
    "get_pool_token_account",
    "PoolAddresses",
    # Layouts
    "AccountLayout",
    "LAYOUTS",
    "get_layout",
    "field_offset",
    "owner_offset",
    "identify_account",
    "decode_account",
    "encode_account",
    "parse_global_config",
    "parse_staking_pool",
    "parse_stake_account",
    # Instructions
    "INSTRUCTION_ARGS",
    "encode_instruction",
    "build_initialize_instruction",
    "build_create_pool_instruction",
    "build_stake_instruction",
    "build_request_unstake_instruction",
    "build_unstake_instruction",
    "build_cancel_unstake_instruction",
    "build_claim_rewards_instruction",
    "build_deposit_rewards_instruction",
    "build_update_rewards_instruction",
    "build_create_ata_idempotent_instruction",
    # Math
    "calculate_earned",
    "pending_rewards",
    "reward_per_token_increase",
    "can_unstake",
    "unstake_available_at",
]
