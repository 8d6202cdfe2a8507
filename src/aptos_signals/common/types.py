"""Shared type aliases."""

from __future__ import annotations

from typing import TypeAlias

# Hex account address, e.g. "0x1"
AccountAddress: TypeAlias = str


def normalize_address(address: str) -> AccountAddress:
    """Lower-case an account address and make sure it carries the 0x prefix."""
    address = address.strip().lower()
    if not address.startswith("0x"):
        address = "0x" + address
    return address
