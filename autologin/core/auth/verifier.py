"""
Credential Verification
=======================

Turns a stored credential into the secret that gets typed into the
client, verifying a password entered by the user when one is given.

- Plaintext credential, no password entered: the stored password is used.
- Plaintext credential, password entered: it must equal the stored one.
- Derived-key credential: a password must be entered; its derived key
  must equal the stored key. The entered password is what gets typed.
"""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from autologin.core.auth.argon2_auth import Argon2Hasher
from autologin.core.auth.salt import SaltStore
from autologin.core.vault.credentials import Credential, CredentialEncoding


class AuthenticationError(Exception):
    """Base exception for authentication failures."""
    pass


class InvalidCredentialError(AuthenticationError):
    """Raised when an entered password does not match the stored credential."""
    pass


class PasswordRequiredError(AuthenticationError):
    """Raised when a derived-key credential is used without entering a password."""
    pass


class CredentialVerifier:
    """
    Builds and checks credentials for one vault encoding.

    Usage:
        verifier = CredentialVerifier(Argon2Hasher.from_config(config.kdf),
                                      SaltStore(config.paths.salt_file))
        credential = verifier.enroll("alice", "pw", CredentialEncoding.DERIVED_KEY)
        secret = verifier.login_secret(credential, "pw")
    """

    __slots__ = ("_hasher", "_salt_store", "_log")

    def __init__(self, hasher: Argon2Hasher, salt_store: SaltStore) -> None:
        self._hasher = hasher
        self._salt_store = salt_store
        self._log = logging.getLogger("autologin.auth")

    def enroll(self, username: str, password: str, encoding: CredentialEncoding) -> Credential:
        """Create the credential to store for a new user."""
        if encoding is CredentialEncoding.PLAINTEXT:
            return Credential.plaintext(username, password)

        key = self._hasher.derive(password, self._salt_store.load_or_create())
        return Credential.derived(username, key)

    def login_secret(self, credential: Credential, password: Optional[str] = None) -> str:
        """
        Return the password to type for ``credential``.

        Raises:
            InvalidCredentialError: If ``password`` does not match
            PasswordRequiredError: If a derived-key credential has no password
            SaltError: If the installation salt is missing or unreadable
        """
        if credential.encoding is CredentialEncoding.PLAINTEXT:
            stored = credential.secret
            if password is None:
                return stored
            if not hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8")):
                self._log.warning("Password mismatch for user '%s'", credential.username)
                raise InvalidCredentialError("Invalid password")
            return password

        if not password:
            raise PasswordRequiredError(
                f"User '{credential.username}' has a hashed password; "
                "enter it to log in"
            )

        salt = self._salt_store.load()
        if not self._hasher.verify_password(password, salt, credential.secret):
            self._log.warning("Password mismatch for user '%s'", credential.username)
            raise InvalidCredentialError("Invalid password")
        return password
