"""
Account codec for the staking program

Layouts (little-endian, after the 8-byte discriminator):

GlobalConfig (129 bytes):
    pubkey authority (8), pubkey earn_wallet (40), u64 total_pools (72),
    u64 total_staked_value (80), u64 total_rewards_distributed (88),
    u8 bump (96), reserved[32] (97)

StakingPool (178 bytes):
    pubkey mint (8), pubkey agent_wallet (40), u64 total_staked (72),
    u32 staker_count (80), u64 rewards_available (84),
    u64 rewards_distributed (92), u128 reward_per_token_stored (100),
    i64 last_update_time (116), u64 min_stake_amount (124),
    u32 cooldown_seconds (132), i64 created_at (136), bool paused (144),
    u8 bump (145), reserved[32] (146)

StakeAccount (169 bytes):
    pubkey owner (8), pubkey pool (40), u64 amount (72),
    u128 reward_per_token_paid (80), u64 rewards_earned (96),
    i64 staked_at (104), i64 last_claim_at (112),
    i64 unstake_requested_at (120), u64 unstake_amount (128), u8 bump (136),
    reserved[32] (137)

Decoding needs the discriminator plus every field; the reserved tail and
anything past it is ignored.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..types import (
    AccountType,
    GlobalConfig,
    StakingPool,
    StakeAccount,
    record_class,
    to_account_type,
)
from .constants import DISCRIMINATOR_SIZE, RESERVED_SIZE
from .discriminators import ACCOUNT_DISCRIMINATORS
from .encoding import (
    U8,
    BOOL,
    U32,
    U64,
    I64,
    U128,
    PUBKEY,
    FIELD_WIDTHS,
    pack_field,
    read_field,
)


@dataclass(frozen=True)
class AccountLayout:
    """Field order and widths of one account type"""
    account_type: AccountType
    fields: Tuple[Tuple[str, str], ...]

    @property
    def discriminator(self) -> bytes:
        return ACCOUNT_DISCRIMINATORS[self.account_type.value]

    @property
    def body_size(self) -> int:
        """Discriminator plus documented fields"""
        return DISCRIMINATOR_SIZE + sum(FIELD_WIDTHS[kind] for _, kind in self.fields)

    @property
    def size(self) -> int:
        """Full on-chain size including the reserved tail"""
        return self.body_size + RESERVED_SIZE

    def offset_of(self, field: str) -> int:
        offset = DISCRIMINATOR_SIZE
        for name, kind in self.fields:
            if name == field:
                return offset
            offset += FIELD_WIDTHS[kind]
        raise KeyError(f"{self.account_type.value} has no field '{field}'")


GLOBAL_CONFIG_LAYOUT = AccountLayout(
    AccountType.GLOBAL_CONFIG,
    (
        ("authority", PUBKEY),
        ("earn_wallet", PUBKEY),
        ("total_pools", U64),
        ("total_staked_value", U64),
        ("total_rewards_distributed", U64),
        ("bump", U8),
    ),
)

STAKING_POOL_LAYOUT = AccountLayout(
    AccountType.STAKING_POOL,
    (
        ("mint", PUBKEY),
        ("agent_wallet", PUBKEY),
        ("total_staked", U64),
        ("staker_count", U32),
        ("rewards_available", U64),
        ("rewards_distributed", U64),
        ("reward_per_token_stored", U128),
        ("last_update_time", I64),
        ("min_stake_amount", U64),
        ("cooldown_seconds", U32),
        ("created_at", I64),
        ("paused", BOOL),
        ("bump", U8),
    ),
)

STAKE_ACCOUNT_LAYOUT = AccountLayout(
    AccountType.STAKE_ACCOUNT,
    (
        ("owner", PUBKEY),
        ("pool", PUBKEY),
        ("amount", U64),
        ("reward_per_token_paid", U128),
        ("rewards_earned", U64),
        ("staked_at", I64),
        ("last_claim_at", I64),
        ("unstake_requested_at", I64),
        ("unstake_amount", U64),
        ("bump", U8),
    ),
)

LAYOUTS: Dict[AccountType, AccountLayout] = {
    AccountType.GLOBAL_CONFIG: GLOBAL_CONFIG_LAYOUT,
    AccountType.STAKING_POOL: STAKING_POOL_LAYOUT,
    AccountType.STAKE_ACCOUNT: STAKE_ACCOUNT_LAYOUT,
}

# Field each account type is looked up by in owner queries
OWNER_FIELDS: Dict[AccountType, str] = {
    AccountType.GLOBAL_CONFIG: "authority",
    AccountType.STAKING_POOL: "agent_wallet",
    AccountType.STAKE_ACCOUNT: "owner",
}


def get_layout(account_type) -> AccountLayout:
    """Layout for an AccountType, its name, or a record class"""
    return LAYOUTS[to_account_type(account_type)]


def field_offset(account_type, field: str) -> int:
    """Byte offset of a field, discriminator included"""
    return get_layout(account_type).offset_of(field)


def owner_offset(account_type) -> int:
    """Offset of the field matched by owner queries"""
    account_type = to_account_type(account_type)
    return field_offset(account_type, OWNER_FIELDS[account_type])


def identify_account(data: bytes) -> Optional[AccountType]:
    """Return the account type whose discriminator leads data, or None"""
    if len(data) < DISCRIMINATOR_SIZE:
        return None
    prefix = bytes(data[:DISCRIMINATOR_SIZE])
    for layout in LAYOUTS.values():
        if layout.discriminator == prefix:
            return layout.account_type
    return None


def decode_account(data: bytes, expected_type):
    """
    Decode raw account data as expected_type.

    Args:
        data: Raw account bytes
        expected_type: AccountType, its name, or a record class

    Returns:
        Decoded record, or None on short buffer or discriminator mismatch
    """
    layout = get_layout(expected_type)
    if len(data) < layout.body_size:
        return None
    if bytes(data[:DISCRIMINATOR_SIZE]) != layout.discriminator:
        return None

    values = {}
    offset = DISCRIMINATOR_SIZE
    for name, kind in layout.fields:
        values[name], offset = read_field(kind, data, offset)

    return record_class(layout.account_type)(**values)


def parse_global_config(data: bytes) -> Optional[GlobalConfig]:
    return decode_account(data, AccountType.GLOBAL_CONFIG)


def parse_staking_pool(data: bytes) -> Optional[StakingPool]:
    return decode_account(data, AccountType.STAKING_POOL)


def parse_stake_account(data: bytes) -> Optional[StakeAccount]:
    return decode_account(data, AccountType.STAKE_ACCOUNT)


def encode_account(record) -> bytes:
    """
    Encode a record into its full on-chain buffer.

    Reserved bytes are zeroed. Every integer is range checked.

    Raises:
        EncodingError: a field does not fit its width
    """
    layout = get_layout(record.account_type)
    parts = [layout.discriminator]
    for name, kind in layout.fields:
        parts.append(pack_field(kind, getattr(record, name), name))
    parts.append(bytes(RESERVED_SIZE))
    return b"".join(parts)
