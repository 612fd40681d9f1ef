"""
Discriminator registry

8-byte tags prefixed to every account and instruction payload of the staking
program. The values are fixed contract data taken from the deployed program
(Anchor: first 8 bytes of sha256("account:<Name>") / sha256("global:<name>")).
They are shipped as literals; verify_discriminators() recomputes them once
as a self-check.
"""

import hashlib
from types import MappingProxyType
from typing import Mapping

from ..errors import DiscriminatorError, EncodingError

ACCOUNT_DISCRIMINATORS: Mapping[str, bytes] = MappingProxyType({
    "GlobalConfig": bytes([149, 8, 156, 202, 160, 252, 176, 217]),
    "StakingPool": bytes([203, 19, 214, 220, 220, 154, 24, 102]),
    "StakeAccount": bytes([80, 158, 67, 124, 50, 189, 192, 255]),
})

INSTRUCTION_DISCRIMINATORS: Mapping[str, bytes] = MappingProxyType({
    "initialize": bytes([175, 175, 109, 31, 13, 152, 155, 237]),
    "create_pool": bytes([233, 146, 209, 142, 207, 104, 64, 188]),
    "stake": bytes([206, 176, 202, 18, 200, 209, 179, 108]),
    "request_unstake": bytes([44, 154, 110, 253, 160, 202, 54, 34]),
    "unstake": bytes([90, 95, 107, 42, 205, 124, 50, 225]),
    "cancel_unstake": bytes([64, 65, 53, 227, 125, 153, 3, 167]),
    "claim_rewards": bytes([4, 144, 132, 71, 116, 23, 151, 80]),
    "deposit_rewards": bytes([52, 249, 112, 72, 206, 161, 196, 1]),
    "update_rewards": bytes([188, 38, 124, 42, 87, 77, 176, 90]),
})


def account_discriminator(name: str) -> bytes:
    """Get the registered tag for an account type name"""
    try:
        return ACCOUNT_DISCRIMINATORS[name]
    except KeyError:
        raise KeyError(f"Unknown account type: {name}") from None


def instruction_discriminator(name: str) -> bytes:
    """Get the registered tag for an instruction name"""
    try:
        return INSTRUCTION_DISCRIMINATORS[name]
    except KeyError:
        raise EncodingError.unknown_instruction(name) from None


def anchor_discriminator(namespace: str, name: str) -> bytes:
    """Compute an Anchor-style tag: sha256("<namespace>:<name>")[:8]"""
    return hashlib.sha256(f"{namespace}:{name}".encode()).digest()[:8]


def verify_discriminators() -> None:
    """
    Recompute every registered tag from the Anchor hashing rule.

    Raises:
        DiscriminatorError: a literal does not match its hash
    """
    for name, tag in ACCOUNT_DISCRIMINATORS.items():
        expected = anchor_discriminator("account", name)
        if expected != tag:
            raise DiscriminatorError.mismatch(name, expected, tag)
    for name, tag in INSTRUCTION_DISCRIMINATORS.items():
        expected = anchor_discriminator("global", name)
        if expected != tag:
            raise DiscriminatorError.mismatch(name, expected, tag)
