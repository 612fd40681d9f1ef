"""
Staking Program Instruction Builders

Instruction data is the 8-byte discriminator followed by the arguments in
handler order, fixed width, little-endian, with no padding or length prefix.
Account order and signer/writable flags are part of the program's contract.
"""

from typing import Dict, List, Optional, Tuple

from solders.instruction import AccountMeta, Instruction

from ..errors import EncodingError
from .constants import (
    STAKING_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    DEFAULT_MIN_STAKE_AMOUNT,
    DEFAULT_COOLDOWN_SECONDS,
)
from .discriminators import instruction_discriminator
from .encoding import U8, U32, U64, pack_field
from .pda import (
    PubkeyLike,
    as_pubkey,
    find_global_config,
    find_staking_pool,
    find_stake_account,
    find_rewards_vault,
    find_pool_authority,
    get_associated_token_address,
)


# Argument order and width per instruction handler
INSTRUCTION_ARGS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "initialize": (("bump", U8),),
    "create_pool": (("min_stake_amount", U64), ("cooldown_seconds", U32)),
    "stake": (("amount", U64),),
    "request_unstake": (("amount", U64),),
    "unstake": (("amount", U64),),
    "cancel_unstake": (),
    "claim_rewards": (),
    "deposit_rewards": (("amount", U64),),
    "update_rewards": (),
}


def encode_instruction(name: str, **params) -> bytes:
    """
    Encode instruction data.

    Args:
        name: Instruction name (e.g. "stake")
        **params: Arguments by name

    Returns:
        discriminator + packed arguments

    Raises:
        EncodingError: unknown name, missing/unexpected params, or a value
            that does not fit its width. Nothing is produced on error.
    """
    if name not in INSTRUCTION_ARGS:
        raise EncodingError.unknown_instruction(name)
    args = INSTRUCTION_ARGS[name]

    expected = [arg for arg, _ in args]
    missing = [arg for arg in expected if arg not in params]
    unexpected = sorted(set(params) - set(expected))
    if missing or unexpected:
        raise EncodingError.invalid_params(name, missing, unexpected)

    parts = [instruction_discriminator(name)]
    for arg, kind in args:
        parts.append(pack_field(kind, params[arg], arg))
    return b"".join(parts)


def _meta(pubkey: PubkeyLike, signer: bool = False, writable: bool = False) -> AccountMeta:
    return AccountMeta(as_pubkey(pubkey), is_signer=signer, is_writable=writable)


# =============================================================================
# Account lists (explicit addresses)
# =============================================================================

def initialize_accounts(global_config: PubkeyLike, authority: PubkeyLike, earn_wallet: PubkeyLike) -> List[AccountMeta]:
    return [
        _meta(global_config, writable=True),             # 0: global_config
        _meta(authority, signer=True, writable=True),    # 1: authority
        _meta(earn_wallet),                              # 2: earn_wallet
        _meta(SYSTEM_PROGRAM_ID),                        # 3: system_program
    ]


def create_pool_accounts(
    global_config: PubkeyLike,
    staking_pool: PubkeyLike,
    mint: PubkeyLike,
    agent_wallet: PubkeyLike,
    authority: PubkeyLike,
) -> List[AccountMeta]:
    return [
        _meta(global_config, writable=True),             # 0: global_config
        _meta(staking_pool, writable=True),              # 1: staking_pool
        _meta(mint),                                     # 2: mint
        _meta(agent_wallet),                             # 3: agent_wallet
        _meta(authority, signer=True, writable=True),    # 4: authority
        _meta(SYSTEM_PROGRAM_ID),                        # 5: system_program
    ]


def stake_accounts(
    staking_pool: PubkeyLike,
    stake_account: PubkeyLike,
    user_token_account: PubkeyLike,
    pool_token_account: PubkeyLike,
    user: PubkeyLike,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
) -> List[AccountMeta]:
    return [
        _meta(staking_pool, writable=True),              # 0: staking_pool
        _meta(stake_account, writable=True),             # 1: stake_account
        _meta(user_token_account, writable=True),        # 2: user_token_account
        _meta(pool_token_account, writable=True),        # 3: pool_token_account
        _meta(user, signer=True, writable=True),         # 4: user
        _meta(token_program),                            # 5: token_program
        _meta(SYSTEM_PROGRAM_ID),                        # 6: system_program
    ]


def request_unstake_accounts(user: PubkeyLike, staking_pool: PubkeyLike, stake_account: PubkeyLike) -> List[AccountMeta]:
    return [
        _meta(user, signer=True),                        # 0: user
        _meta(staking_pool),                             # 1: staking_pool
        _meta(stake_account, writable=True),             # 2: stake_account
    ]


def unstake_accounts(
    staking_pool: PubkeyLike,
    stake_account: PubkeyLike,
    user_token_account: PubkeyLike,
    pool_token_account: PubkeyLike,
    pool_authority: PubkeyLike,
    user: PubkeyLike,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
) -> List[AccountMeta]:
    return [
        _meta(staking_pool, writable=True),              # 0: staking_pool
        _meta(stake_account, writable=True),             # 1: stake_account
        _meta(user_token_account, writable=True),        # 2: user_token_account
        _meta(pool_token_account, writable=True),        # 3: pool_token_account
        _meta(pool_authority),                           # 4: pool_authority
        _meta(user, signer=True, writable=True),         # 5: user
        _meta(token_program),                            # 6: token_program
    ]


def cancel_unstake_accounts(staking_pool: PubkeyLike, stake_account: PubkeyLike, user: PubkeyLike) -> List[AccountMeta]:
    return [
        _meta(staking_pool),                             # 0: staking_pool
        _meta(stake_account, writable=True),             # 1: stake_account
        _meta(user, signer=True),                        # 2: user
    ]


def claim_rewards_accounts(
    global_config: PubkeyLike,
    staking_pool: PubkeyLike,
    stake_account: PubkeyLike,
    rewards_vault: PubkeyLike,
    user: PubkeyLike,
) -> List[AccountMeta]:
    return [
        _meta(global_config, writable=True),             # 0: global_config
        _meta(staking_pool, writable=True),              # 1: staking_pool
        _meta(stake_account, writable=True),             # 2: stake_account
        _meta(rewards_vault, writable=True),             # 3: rewards_vault
        _meta(user, signer=True, writable=True),         # 4: user
        _meta(SYSTEM_PROGRAM_ID),                        # 5: system_program
    ]


def deposit_rewards_accounts(
    global_config: PubkeyLike,
    staking_pool: PubkeyLike,
    rewards_vault: PubkeyLike,
    depositor: PubkeyLike,
) -> List[AccountMeta]:
    return [
        _meta(global_config),                            # 0: global_config
        _meta(staking_pool, writable=True),              # 1: staking_pool
        _meta(rewards_vault, writable=True),             # 2: rewards_vault
        _meta(depositor, signer=True, writable=True),    # 3: depositor
        _meta(SYSTEM_PROGRAM_ID),                        # 4: system_program
    ]


def update_rewards_accounts(staking_pool: PubkeyLike) -> List[AccountMeta]:
    return [
        _meta(staking_pool, writable=True),              # 0: staking_pool
    ]


# =============================================================================
# Instruction builders (derive PDAs from mint / owner)
# =============================================================================

def build_initialize_instruction(
    authority: PubkeyLike,
    earn_wallet: PubkeyLike,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """
    Build initialize instruction (one-time protocol bootstrap).

    The global-config bump is passed as the only argument.
    """
    global_config, bump = find_global_config(program_id)
    data = encode_instruction("initialize", bump=bump)
    accounts = initialize_accounts(global_config, authority, earn_wallet)
    return Instruction(as_pubkey(program_id), data, accounts)


def build_create_pool_instruction(
    authority: PubkeyLike,
    mint: PubkeyLike,
    agent_wallet: PubkeyLike,
    min_stake_amount: int = DEFAULT_MIN_STAKE_AMOUNT,
    cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """
    Build create_pool instruction.

    Args:
        authority: Protocol authority (signer, pays rent)
        mint: Token the pool accepts
        agent_wallet: Pool revenue share recipient
        min_stake_amount: Smallest accepted stake (u64)
        cooldown_seconds: Unstake delay (u32)
        program_id: Staking program

    Returns:
        create_pool instruction
    """
    data = encode_instruction(
        "create_pool",
        min_stake_amount=min_stake_amount,
        cooldown_seconds=cooldown_seconds,
    )
    global_config, _ = find_global_config(program_id)
    staking_pool, _ = find_staking_pool(mint, program_id)
    accounts = create_pool_accounts(global_config, staking_pool, mint, agent_wallet, authority)
    return Instruction(as_pubkey(program_id), data, accounts)


def build_stake_instruction(
    user: PubkeyLike,
    mint: PubkeyLike,
    amount: int,
    user_token_account: Optional[PubkeyLike] = None,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """
    Build stake instruction.

    Args:
        user: Staker (signer)
        mint: Pool token mint
        amount: Amount in base units (u64)
        user_token_account: Source token account (defaults to the user's ATA)
        token_program: Token program of the mint
        program_id: Staking program

    Returns:
        stake instruction
    """
    data = encode_instruction("stake", amount=amount)
    staking_pool, _ = find_staking_pool(mint, program_id)
    stake_account, _ = find_stake_account(staking_pool, user, program_id)
    pool_authority, _ = find_pool_authority(staking_pool, program_id)

    if user_token_account is None:
        user_token_account = get_associated_token_address(user, mint, token_program)
    pool_token_account = get_associated_token_address(pool_authority, mint, token_program)

    accounts = stake_accounts(
        staking_pool, stake_account, user_token_account, pool_token_account, user, token_program,
    )
    return Instruction(as_pubkey(program_id), data, accounts)


def build_request_unstake_instruction(
    user: PubkeyLike,
    mint: PubkeyLike,
    amount: int,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """Build request_unstake instruction (starts the cooldown)"""
    data = encode_instruction("request_unstake", amount=amount)
    staking_pool, _ = find_staking_pool(mint, program_id)
    stake_account, _ = find_stake_account(staking_pool, user, program_id)
    accounts = request_unstake_accounts(user, staking_pool, stake_account)
    return Instruction(as_pubkey(program_id), data, accounts)


def build_unstake_instruction(
    user: PubkeyLike,
    mint: PubkeyLike,
    amount: int,
    user_token_account: Optional[PubkeyLike] = None,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """
    Build unstake instruction.

    Tokens move from the pool-authority ATA back to user_token_account.
    """
    data = encode_instruction("unstake", amount=amount)
    staking_pool, _ = find_staking_pool(mint, program_id)
    stake_account, _ = find_stake_account(staking_pool, user, program_id)
    pool_authority, _ = find_pool_authority(staking_pool, program_id)

    if user_token_account is None:
        user_token_account = get_associated_token_address(user, mint, token_program)
    pool_token_account = get_associated_token_address(pool_authority, mint, token_program)

    accounts = unstake_accounts(
        staking_pool,
        stake_account,
        user_token_account,
        pool_token_account,
        pool_authority,
        user,
        token_program,
    )
    return Instruction(as_pubkey(program_id), data, accounts)


def build_cancel_unstake_instruction(
    user: PubkeyLike,
    mint: PubkeyLike,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    data = encode_instruction("cancel_unstake")
    staking_pool, _ = find_staking_pool(mint, program_id)
    stake_account, _ = find_stake_account(staking_pool, user, program_id)
    accounts = cancel_unstake_accounts(staking_pool, stake_account, user)
    return Instruction(as_pubkey(program_id), data, accounts)


def build_claim_rewards_instruction(
    user: PubkeyLike,
    mint: PubkeyLike,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """Build claim_rewards instruction (SOL rewards paid from the rewards vault)"""
    data = encode_instruction("claim_rewards")
    global_config, _ = find_global_config(program_id)
    staking_pool, _ = find_staking_pool(mint, program_id)
    stake_account, _ = find_stake_account(staking_pool, user, program_id)
    rewards_vault, _ = find_rewards_vault(staking_pool, program_id)
    accounts = claim_rewards_accounts(global_config, staking_pool, stake_account, rewards_vault, user)
    return Instruction(as_pubkey(program_id), data, accounts)


def build_deposit_rewards_instruction(
    depositor: PubkeyLike,
    mint: PubkeyLike,
    amount: int,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    """Build deposit_rewards instruction (lamports into the pool's rewards vault)"""
    data = encode_instruction("deposit_rewards", amount=amount)
    global_config, _ = find_global_config(program_id)
    staking_pool, _ = find_staking_pool(mint, program_id)
    rewards_vault, _ = find_rewards_vault(staking_pool, program_id)
    accounts = deposit_rewards_accounts(global_config, staking_pool, rewards_vault, depositor)
    return Instruction(as_pubkey(program_id), data, accounts)


def build_update_rewards_instruction(
    mint: PubkeyLike,
    program_id: PubkeyLike = STAKING_PROGRAM_ID,
) -> Instruction:
    data = encode_instruction("update_rewards")
    staking_pool, _ = find_staking_pool(mint, program_id)
    return Instruction(as_pubkey(program_id), data, update_rewards_accounts(staking_pool))


def build_create_ata_idempotent_instruction(
    payer: PubkeyLike,
    owner: PubkeyLike,
    mint: PubkeyLike,
    token_program: PubkeyLike = TOKEN_PROGRAM_ID,
) -> Instruction:
    """
    Build create_associated_token_account_idempotent instruction.

    This creates the ATA if it doesn't exist, or does nothing if it does.

    Args:
        payer: Fee payer
        owner: Account owner
        mint: Token mint
        token_program: Token program (defaults to Tokenkeg)

    Returns:
        Instruction to create ATA
    """
    ata_address = get_associated_token_address(owner, mint, token_program)

    accounts = [
        _meta(payer, signer=True, writable=True),
        _meta(ata_address, writable=True),
        _meta(owner),
        _meta(mint),
        _meta(SYSTEM_PROGRAM_ID),
        _meta(token_program),
    ]

    # Instruction data: single byte 1 for idempotent create
    return Instruction(as_pubkey(ASSOCIATED_TOKEN_PROGRAM_ID), bytes([1]), accounts)
