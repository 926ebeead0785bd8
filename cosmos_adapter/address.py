"""Bech32 address helpers."""

import hashlib
from typing import List, Optional, Tuple

import bech32

from .constants import MAX_MEMO_LENGTH
from .exceptions import InvalidAddress


def _decode_words(address: str) -> Tuple[str, List[int]]:
    if not isinstance(address, str) or not address:
        raise InvalidAddress(f"Invalid address: {address!r}")
    prefix, words = bech32.bech32_decode(address)
    if prefix is None or not words:
        raise InvalidAddress(f"Invalid address: {address}")
    return prefix, words


def decode(address: str) -> Tuple[str, bytes]:
    """Decode an address into its prefix and raw payload bytes."""
    prefix, words = _decode_words(address)
    data = bech32.convertbits(words, 5, 8, False)
    if data is None:
        raise InvalidAddress(f"Invalid address payload: {address}")
    return prefix, bytes(data)


def encode(prefix: str, payload: bytes) -> str:
    words = bech32.convertbits(payload, 8, 5)
    if words is None:
        raise InvalidAddress("Failed to convert address bits")
    address = bech32.bech32_encode(prefix, words)
    if address is None:
        raise InvalidAddress(f"Cannot encode address with prefix {prefix!r}")
    return address


def validate(address: str, expected_prefix: Optional[str] = None) -> bool:
    """True when the checksum is valid and, if given, the prefix matches exactly."""
    try:
        prefix, _ = _decode_words(address)
    except InvalidAddress:
        return False
    return expected_prefix is None or prefix == expected_prefix


def get_prefix(address: str) -> str:
    """Prefix of ``address`` or an empty string when it does not decode."""
    try:
        prefix, _ = _decode_words(address)
    except InvalidAddress:
        return ""
    return prefix


def reencode(address: str, new_prefix: str) -> str:
    """Re-encode the payload of ``address`` under ``new_prefix``."""
    _, words = _decode_words(address)
    encoded = bech32.bech32_encode(new_prefix, words)
    if encoded is None:
        raise InvalidAddress(f"Cannot encode address with prefix {new_prefix!r}")
    return encoded


def account_to_validator(address: str, prefix: str = "cosmos") -> str:
    return reencode(address, f"{prefix}valoper")


def validator_to_account(address: str, prefix: str = "cosmos") -> str:
    return reencode(address, prefix)


def normalize_address(address: str) -> str:
    """Trim whitespace and lowercase; bech32 strings must be single-case."""
    return address.strip().lower()


def shorten(address: str, keep_chars: int = 8) -> str:
    if len(address) <= keep_chars * 2 + 3:
        return address
    return f"{address[:keep_chars]}...{address[-keep_chars:]}"


def address_from_public_key(public_key: bytes, prefix: str) -> str:
    """Account address for a compressed secp256k1 public key."""
    sha256_hash = hashlib.sha256(public_key).digest()
    ripemd160_hash = hashlib.new("ripemd160", sha256_hash).digest()
    return encode(prefix, ripemd160_hash)


def validate_memo(memo: str) -> bool:
    return len(memo.encode("utf-8")) <= MAX_MEMO_LENGTH
