"""
Credential Vault
================

Durable username -> credential mapping backed by one JSON file:

    {
      "users": [
        {"username": "alice", "password": "secret", "encoding": "plaintext"}
      ]
    }

Properties:
- Insertion order preserved, usernames unique
- Append-only: there is no update or delete of single entries
- Every save rewrites the whole file atomically (temp file + fsync + rename)
- A file that is absent reads as an empty vault; any other read or parse
  failure is a hard VaultIOError

No locking is done. Two processes saving at once race and the last
writer wins.
"""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, List, Optional

from autologin.core.config import AutologinConfig
from autologin.core.vault.credentials import Credential
from autologin.core.vault.errors import (
    CredentialExpiredError,
    DuplicateUserError,
    EncodingMismatchError,
    UserNotFoundError,
    VaultIOError,
)
from autologin.core.vault.expiry import ExpiryPolicy
from autologin.utils.paths import atomic_write_text


class CredentialVault:
    """
    JSON file vault of login credentials.

    Usage:
        vault = CredentialVault.from_config(config)

        vault.save(Credential.plaintext("alice", "secret"))
        credential = vault.read("alice")

    With an ExpiryPolicy, an expired file is deleted on access: ``read``
    raises CredentialExpiredError, ``save`` starts over with an empty vault.
    """

    __slots__ = ("_path", "_expiry", "_log")

    def __init__(self, path: Path | str, expiry: Optional[ExpiryPolicy] = None) -> None:
        """
        Initialize the vault.

        Args:
            path: Path to the JSON vault file (created on first save)
            expiry: Optional retention policy for the whole file
        """
        self._path = Path(path)
        self._expiry = expiry
        self._log = logging.getLogger("autologin.vault")

    @classmethod
    def from_config(cls, config: AutologinConfig) -> CredentialVault:
        return cls(
            config.paths.vault_file,
            ExpiryPolicy(timedelta(days=config.vault.retention_days)),
        )

    @property
    def path(self) -> Path:
        return self._path

    def save(self, credential: Credential) -> None:
        """
        Append a credential and rewrite the vault file.

        Raises:
            DuplicateUserError: If the username is already stored
            EncodingMismatchError: If the vault holds credentials of the other encoding
            VaultIOError: If the vault cannot be read or written
        """
        self._purge_if_expired(on_read=False)
        credentials = self._load()

        for existing in credentials:
            if existing.username == credential.username:
                raise DuplicateUserError(credential.username)

        if credentials and credentials[0].encoding is not credential.encoding:
            raise EncodingMismatchError(
                f"Vault stores {credentials[0].encoding.value} credentials, "
                f"cannot add a {credential.encoding.value} credential"
            )

        credentials.append(credential)
        self._write(credentials)
        self._log.info("Saved credentials for user '%s'", credential.username)

    def read(self, username: str) -> Credential:
        """
        Look up a credential by username.

        Raises:
            UserNotFoundError: If the username is not stored (also for an empty vault)
            CredentialExpiredError: If the vault file expired and was deleted
            VaultIOError: If the vault cannot be read or parsed
        """
        self._purge_if_expired(on_read=True)

        for credential in self._load():
            if credential.username == username:
                return credential

        raise UserNotFoundError(username)

    def delete(self) -> None:
        """Remove the vault file. Deleting a missing vault is a no-op."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise VaultIOError(f"Failed to delete vault file: {exc}") from exc
        self._log.info("Deleted vault file %s", self._path)

    def usernames(self) -> List[str]:
        """Stored usernames in insertion order."""
        return [c.username for c in self._load()]

    def _purge_if_expired(self, on_read: bool) -> None:
        if self._expiry is None or not self._expiry.is_expired(self._path):
            return

        self._log.warning(
            "Vault file is older than %d days, deleting it",
            self._expiry.retention.days,
        )
        self.delete()

        if on_read:
            raise CredentialExpiredError(
                "Stored credentials have expired. Please create your user again."
            )

    def _load(self) -> List[Credential]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            raise VaultIOError(f"Failed to read vault file: {exc}") from exc

        try:
            document: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise VaultIOError(f"Failed to parse vault file: {exc}") from exc

        if not isinstance(document, dict):
            raise VaultIOError("Failed to parse vault file: expected a JSON object")

        users = document.get("users")
        if users is None:
            return []
        if not isinstance(users, list):
            raise VaultIOError("Failed to parse vault file: 'users' must be a list")

        return [Credential.from_dict(entry) for entry in users]

    def _write(self, credentials: List[Credential]) -> None:
        document = {"users": [c.to_dict() for c in credentials]}
        try:
            atomic_write_text(self._path, json.dumps(document, indent=2))
        except (OSError, TypeError, ValueError) as exc:
            raise VaultIOError(f"Failed to save credentials: {exc}") from exc

    def __repr__(self) -> str:
        return f"CredentialVault(path={str(self._path)!r})"


def save_credentials(credential: Credential, path: Path | str) -> None:
    """Save ``credential`` to the vault at ``path``."""
    CredentialVault(path).save(credential)


def read_credentials(username: str, path: Path | str) -> Credential:
    """Read the credential for ``username`` from the vault at ``path``."""
    return CredentialVault(path).read(username)


def delete_vault(path: Path | str) -> None:
    """Delete the vault file at ``path``."""
    CredentialVault(path).delete()
