from __future__ import annotations

from typing import Optional, Union

from substrateinterface.utils.ss58 import ss58_decode, ss58_encode

from .errors import DecodeError

PUBLIC_KEY_LENGTH = 32


def _public_key_bytes(public_key: Union[bytes, str]) -> bytes:
    if isinstance(public_key, str):
        text = public_key[2:] if public_key.startswith("0x") else public_key
        try:
            public_key = bytes.fromhex(text)
        except ValueError as exc:
            raise DecodeError(f"Invalid hex public key: {exc}") from exc
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise DecodeError(
            f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}"
        )
    return bytes(public_key)


def encode_address(public_key: Union[bytes, str], prefix: int) -> str:
    """
    Encode a 32-byte public key (raw bytes or ``0x`` hex) as an SS58 address.
    """
    return ss58_encode(_public_key_bytes(public_key), ss58_format=prefix)


def decode_address(address: str, prefix: Optional[int] = None) -> bytes:
    """
    Decode an SS58 address to its public key.

    When ``prefix`` is given the address must have been encoded under that
    network prefix. Checksum, length and prefix mismatches raise
    :class:`DecodeError`.
    """
    if not address or address.startswith("0x"):
        raise DecodeError(f"Not an SS58 address: {address!r}")
    try:
        public_key = bytes.fromhex(ss58_decode(address, valid_ss58_format=prefix))
    except (ValueError, IndexError) as exc:
        expected = "" if prefix is None else f" under SS58 prefix {prefix}"
        raise DecodeError(f"Invalid address {address!r}{expected}: {exc}") from exc
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise DecodeError(
            f"Invalid address length for {address!r}: expected a {PUBLIC_KEY_LENGTH}-byte key, "
            f"got {len(public_key)}"
        )
    return public_key


def normalize_address(address: str, source_prefix: Optional[int], target_prefix: int = 0) -> str:
    """
    Re-encode ``address`` from ``source_prefix`` under ``target_prefix``.

    The result is the join key used when merging contribution sources.
    """
    return encode_address(decode_address(address, source_prefix), target_prefix)
