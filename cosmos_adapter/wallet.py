"""Signing identity derived from a BIP39 mnemonic."""

import hashlib
import hmac
from typing import List, Optional

from ecdsa import SECP256k1, SigningKey
from ecdsa.util import sigencode_string_canonize
from mnemonic import Mnemonic

from .address import address_from_public_key
from .constants import DEFAULT_HD_PATH
from .exceptions import ConfigurationError

HARDENED_OFFSET = 0x80000000


def parse_hd_path(hd_path: str) -> List[int]:
    """Turn ``m/44'/118'/0'/0/0`` into a list of child indexes."""
    parts = hd_path.strip().split("/")
    if not parts or parts[0] != "m" or len(parts) < 2:
        raise ConfigurationError(f"Malformed derivation path: {hd_path!r}")
    indexes = []
    for part in parts[1:]:
        hardened = part.endswith("'")
        number = part[:-1] if hardened else part
        if not number.isdigit() or int(number) >= HARDENED_OFFSET:
            raise ConfigurationError(f"Malformed derivation path: {hd_path!r}")
        indexes.append(int(number) + (HARDENED_OFFSET if hardened else 0))
    return indexes


def _compressed_public_key(private_key: bytes) -> bytes:
    sk = SigningKey.from_string(private_key, curve=SECP256k1)
    return sk.get_verifying_key().to_string("compressed")


def derive_private_key(seed: bytes, hd_path: str) -> bytes:
    """BIP32 private key derivation along ``hd_path``."""
    order = SECP256k1.order
    master = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
    key, chain_code = master[:32], master[32:]

    for index in parse_hd_path(hd_path):
        if index >= HARDENED_OFFSET:
            data = b"\x00" + key + index.to_bytes(4, "big")
        else:
            data = _compressed_public_key(key) + index.to_bytes(4, "big")
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        tweak = int.from_bytes(digest[:32], "big")
        child = (tweak + int.from_bytes(key, "big")) % order
        if tweak >= order or child == 0:
            raise ConfigurationError(f"Derivation path {hd_path} yields an invalid key")
        key, chain_code = child.to_bytes(32, "big"), digest[32:]

    return key


class Wallet:
    """Cosmos wallet with BIP39/BIP32 support."""

    def __init__(self, prefix: str = "cosmos"):
        """Initialize wallet with address prefix."""
        self.prefix = prefix
        self._private_key: Optional[bytes] = None
        self._public_key: Optional[bytes] = None
        self._address: Optional[str] = None

    @staticmethod
    def generate_mnemonic(strength: int = 256) -> str:
        """Generate a new BIP39 mnemonic (24 words for 256 bits)."""
        return Mnemonic("english").generate(strength=strength)

    @staticmethod
    def validate_mnemonic(mnemonic: str) -> bool:
        """Validate a BIP39 mnemonic."""
        if not mnemonic:
            return False
        return Mnemonic("english").check(mnemonic)

    @classmethod
    def from_mnemonic(
        cls, mnemonic: str, hd_path: str = DEFAULT_HD_PATH, prefix: str = "cosmos"
    ) -> "Wallet":
        """Derive a wallet from ``mnemonic`` along ``hd_path``."""
        if not cls.validate_mnemonic(mnemonic):
            raise ConfigurationError("Invalid mnemonic phrase")

        seed = Mnemonic.to_seed(mnemonic)
        wallet = cls(prefix)
        wallet._private_key = derive_private_key(seed, hd_path)
        wallet._public_key = _compressed_public_key(wallet._private_key)
        wallet._address = address_from_public_key(wallet._public_key, prefix)
        return wallet

    @property
    def address(self) -> str:
        """Get wallet address."""
        if self._address is None:
            raise RuntimeError("Wallet not initialized")
        return self._address

    @property
    def public_key(self) -> bytes:
        """Compressed secp256k1 public key."""
        if self._public_key is None:
            raise RuntimeError("Wallet not initialized")
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """Sign SHA-256(message), returning a 64 byte low-S signature."""
        if self._private_key is None:
            raise RuntimeError("Wallet not initialized")

        sk = SigningKey.from_string(self._private_key, curve=SECP256k1)
        return sk.sign_digest_deterministic(
            hashlib.sha256(message).digest(),
            hashfunc=hashlib.sha256,
            sigencode=sigencode_string_canonize,
        )

    def __repr__(self) -> str:
        return f"Wallet(address={self._address!r})"
