"""
Child trie key derivation and value decoding for the relay-chain
crowdloan pallet.

A fund's contributions live in a child trie whose key is derived from the
fund index; each value is a ``(Balance, memo)`` pair.
"""

from __future__ import annotations

from substrateinterface.utils.hasher import blake2_256

from .errors import DecodeError

CHILD_STORAGE_PREFIX = b":child_storage:default:"
CROWDLOAN_TRIE_SEED = b"crowdloan"
BALANCE_LENGTH = 16


def encode_u32(value: int) -> bytes:
    return value.to_bytes(4, "little")


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def from_hex(value: str) -> bytes:
    text = value[2:] if value.startswith("0x") else value
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise DecodeError(f"Invalid hex value {value!r}: {exc}") from exc


def crowdloan_child_key(fund_index: int) -> str:
    """
    Return the prefixed child trie key holding a fund's contributions.
    """
    return to_hex(CHILD_STORAGE_PREFIX + blake2_256(CROWDLOAN_TRIE_SEED + encode_u32(fund_index)))


def decode_balance(data: bytes) -> int:
    """
    Decode the contributed balance from a crowdloan child trie value.

    Values are ``(Balance, Vec<u8> memo)``; only the leading u128 is read.
    """
    if not data:
        raise DecodeError("Empty contribution value")
    return int.from_bytes(data[:BALANCE_LENGTH], "little")
