"""
Argon2id Key Derivation
=======================

Derives fixed-length keys from passwords for vaults that store
derived keys instead of plaintext passwords.

Properties:
- Memory-hard (resistant to GPU/ASIC attacks)
- Deterministic: same password, salt and costs give the same key
- Length-checked, constant-time key comparison

Parameters (OWASP recommendations):
- memory_cost: 65536 KiB (64 MB)
- time_cost: 3 iterations
- parallelism: 4 lanes

References:
- RFC 9106: Argon2 Memory-Hard Function
- RFC 7914: The scrypt Password-Based Key Derivation Function
"""

from __future__ import annotations

import ctypes
import hmac
import logging
from enum import Enum
from typing import Final, Optional

from argon2.low_level import Type, hash_secret_raw
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from autologin.core.config import KdfConfig


ARGON2_MEMORY_COST: Final[int] = 65536  # 64 MB in KiB
ARGON2_TIME_COST: Final[int] = 3
ARGON2_PARALLELISM: Final[int] = 4
ARGON2_HASH_LENGTH: Final[int] = 32  # 256 bits

SCRYPT_BLOCK_SIZE: Final[int] = 8

_log = logging.getLogger("autologin.auth")


class KdfAlgorithm(Enum):
    """Supported memory-hard derivation functions."""
    ARGON2ID = "argon2id"  # Recommended
    SCRYPT = "scrypt"


def _secure_zero_memory(data: bytearray) -> None:
    """
    Overwrite a mutable buffer that held a password.

    Best effort only: Python may have made copies elsewhere.
    """
    if not data:
        return
    ctypes.memset(ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data)), 0, len(data))


def derive(
    password: str,
    salt: bytes,
    time_cost: int = ARGON2_TIME_COST,
    memory_cost: int = ARGON2_MEMORY_COST,
    parallelism: int = ARGON2_PARALLELISM,
    key_len: int = ARGON2_HASH_LENGTH,
) -> bytes:
    """
    Derive a key from a password with Argon2id.

    Args:
        password: The password to derive from
        salt: Salt bytes (at least 8)
        time_cost: Number of iterations
        memory_cost: Memory usage in KiB
        parallelism: Number of lanes
        key_len: Output length in bytes

    Returns:
        The derived key

    Raises:
        ValueError: If the password is empty or the salt is too short
    """
    if not password:
        raise ValueError("Password cannot be empty")
    if len(salt) < 8:
        raise ValueError("Salt must be at least 8 bytes")

    password_bytes = bytearray(password.encode("utf-8"))
    try:
        return hash_secret_raw(
            secret=bytes(password_bytes),
            salt=salt,
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=key_len,
            type=Type.ID,
        )
    finally:
        _secure_zero_memory(password_bytes)


def derive_scrypt(
    password: str,
    salt: bytes,
    memory_cost: int = ARGON2_MEMORY_COST,
    parallelism: int = ARGON2_PARALLELISM,
    key_len: int = ARGON2_HASH_LENGTH,
) -> bytes:
    """
    Derive a key from a password with scrypt.

    scrypt has no separate iteration count; ``memory_cost`` (KiB) is mapped
    to the largest power-of-two ``n`` whose working set fits in it.
    """
    if not password:
        raise ValueError("Password cannot be empty")

    n = _scrypt_cost(memory_cost)
    password_bytes = bytearray(password.encode("utf-8"))
    try:
        kdf = Scrypt(salt=salt, length=key_len, n=n, r=SCRYPT_BLOCK_SIZE, p=parallelism)
        return kdf.derive(bytes(password_bytes))
    finally:
        _secure_zero_memory(password_bytes)


def _scrypt_cost(memory_cost: int) -> int:
    # scrypt uses 128 * r * n bytes
    blocks = max(2, (memory_cost * 1024) // (128 * SCRYPT_BLOCK_SIZE))
    return 1 << (blocks.bit_length() - 1)


def verify(stored: bytes, candidate: bytes) -> bool:
    """
    Compare a stored derived key with a freshly derived candidate.

    Returns True only if both have the same length and every byte matches.
    """
    if len(stored) != len(candidate):
        return False
    return hmac.compare_digest(stored, candidate)


class Argon2Hasher:
    """
    Password hasher bound to one set of KDF parameters.

    Usage:
        hasher = Argon2Hasher.from_config(config.kdf)
        key = hasher.derive("user_password", salt)
        hasher.verify_password("user_password", salt, key)  # True
    """

    __slots__ = (
        "_algorithm", "_memory_cost", "_time_cost", "_parallelism", "_hash_length",
    )

    def __init__(
        self,
        memory_cost: int = ARGON2_MEMORY_COST,
        time_cost: int = ARGON2_TIME_COST,
        parallelism: int = ARGON2_PARALLELISM,
        hash_length: int = ARGON2_HASH_LENGTH,
        algorithm: KdfAlgorithm = KdfAlgorithm.ARGON2ID,
    ) -> None:
        if parallelism < 1:
            raise ValueError("parallelism must be at least 1")
        if memory_cost < 8 * parallelism:
            raise ValueError("memory_cost must be at least 8 KiB per lane")
        if time_cost < 1:
            raise ValueError("time_cost must be at least 1")
        if hash_length < 16:
            raise ValueError("hash_length must be at least 16 bytes")

        self._algorithm = algorithm
        self._memory_cost = memory_cost
        self._time_cost = time_cost
        self._parallelism = parallelism
        self._hash_length = hash_length

    @classmethod
    def from_config(cls, config: Optional[KdfConfig] = None) -> Argon2Hasher:
        config = config or KdfConfig()
        return cls(
            memory_cost=config.memory_cost,
            time_cost=config.time_cost,
            parallelism=config.parallelism,
            hash_length=config.hash_length,
            algorithm=KdfAlgorithm(config.algorithm),
        )

    @property
    def algorithm(self) -> KdfAlgorithm:
        return self._algorithm

    @property
    def parameters(self) -> dict[str, int]:
        """Get current derivation parameters."""
        return {
            "memory_cost": self._memory_cost,
            "time_cost": self._time_cost,
            "parallelism": self._parallelism,
            "hash_length": self._hash_length,
        }

    def derive(self, password: str, salt: bytes) -> bytes:
        """Derive a key with this hasher's parameters."""
        _log.debug("Deriving key with %s", self._algorithm.value)
        if self._algorithm is KdfAlgorithm.SCRYPT:
            return derive_scrypt(
                password,
                salt,
                memory_cost=self._memory_cost,
                parallelism=self._parallelism,
                key_len=self._hash_length,
            )
        return derive(
            password,
            salt,
            time_cost=self._time_cost,
            memory_cost=self._memory_cost,
            parallelism=self._parallelism,
            key_len=self._hash_length,
        )

    def verify_password(self, password: str, salt: bytes, stored: bytes) -> bool:
        """Derive a key from ``password`` and compare it with ``stored``."""
        if not password or not stored:
            return False
        return verify(stored, self.derive(password, salt))

    def __repr__(self) -> str:
        return f"Argon2Hasher(algorithm={self._algorithm.value}, time_cost={self._time_cost})"
