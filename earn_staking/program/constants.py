"""
Earn Staking Program Constants

Program IDs, PDA seeds and fixed layout sizes.
"""

# Earn staking program (devnet deployment)
STAKING_PROGRAM_ID = "E7JsJuQWGaEYC34AkEv8dcmkKUxR1KqUnje17mNCuTiY"

# Well-known programs
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

# PDA seeds
GLOBAL_CONFIG_SEED = b"global-config"
STAKING_POOL_SEED = b"staking-pool"
STAKE_ACCOUNT_SEED = b"stake-account"
POOL_TOKEN_ACCOUNT_SEED = b"pool-token-account"
REWARDS_VAULT_SEED = b"rewards-vault"
POOL_AUTHORITY_SEED = b"pool-authority"

# Runtime limits for create_program_address (bump counts as one seed)
PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEEDS = 16
MAX_SEED_LEN = 32

# Account layout
DISCRIMINATOR_SIZE = 8
PUBKEY_SIZE = 32
RESERVED_SIZE = 32

# Full on-chain sizes (discriminator + fields + reserved)
GLOBAL_CONFIG_SIZE = 129
STAKING_POOL_SIZE = 178
STAKE_ACCOUNT_SIZE = 169

# reward_per_token values are scaled by 1e18
REWARD_PRECISION = 10 ** 18

# Integer bounds
U8_MAX = 2 ** 8 - 1
U32_MAX = 2 ** 32 - 1
U64_MAX = 2 ** 64 - 1
U128_MAX = 2 ** 128 - 1
I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

# Defaults used by the deployed client when creating pools
DEFAULT_MIN_STAKE_AMOUNT = 1_000_000  # 0.001 tokens at 9 decimals
DEFAULT_COOLDOWN_SECONDS = 0
