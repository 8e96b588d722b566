"""
Autologin Authentication Module
===============================

Provides:
- Argon2id (or scrypt) key derivation with configured cost factors
- Length-checked constant-time key comparison
- Per-install KDF salt
- Credential verification before login
"""

from autologin.core.auth.argon2_auth import (
    Argon2Hasher,
    KdfAlgorithm,
    derive,
    derive_scrypt,
    verify,
)
from autologin.core.auth.salt import SaltStore, SaltError
from autologin.core.auth.verifier import (
    CredentialVerifier,
    AuthenticationError,
    InvalidCredentialError,
    PasswordRequiredError,
)

__all__ = [
    "Argon2Hasher",
    "KdfAlgorithm",
    "derive",
    "derive_scrypt",
    "verify",
    "SaltStore",
    "SaltError",
    "CredentialVerifier",
    "AuthenticationError",
    "InvalidCredentialError",
    "PasswordRequiredError",
]
