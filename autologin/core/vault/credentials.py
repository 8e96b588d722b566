"""
Credential Model
================

A stored login: a username and either the plaintext password or a key
derived from it. The ``encoding`` tag says which, so verification
branches on data rather than on how the vault was built.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from autologin.core.config import ENCODING_DERIVED_KEY, ENCODING_PLAINTEXT
from autologin.core.vault.errors import VaultIOError


class CredentialEncoding(Enum):
    """How a credential's secret is stored."""
    PLAINTEXT = ENCODING_PLAINTEXT
    DERIVED_KEY = ENCODING_DERIVED_KEY


@dataclass(frozen=True)
class Credential:
    """
    A single vault entry.

    ``secret`` is a ``str`` for plaintext credentials and ``bytes`` for
    derived-key credentials. It never appears in repr or str.
    """
    username: str
    secret: Union[str, bytes]
    encoding: CredentialEncoding = CredentialEncoding.PLAINTEXT

    def __post_init__(self) -> None:
        if not isinstance(self.username, str) or not self.username:
            raise ValueError("username must be a non-empty string")
        if self.encoding is CredentialEncoding.PLAINTEXT and not isinstance(self.secret, str):
            raise TypeError("plaintext credentials carry a str secret")
        if self.encoding is CredentialEncoding.DERIVED_KEY and not isinstance(self.secret, bytes):
            raise TypeError("derived-key credentials carry a bytes secret")

    def __repr__(self) -> str:
        return f"Credential(username={self.username!r}, encoding={self.encoding.value})"

    @classmethod
    def plaintext(cls, username: str, password: str) -> Credential:
        return cls(username=username, secret=password, encoding=CredentialEncoding.PLAINTEXT)

    @classmethod
    def derived(cls, username: str, key: bytes) -> Credential:
        return cls(username=username, secret=bytes(key), encoding=CredentialEncoding.DERIVED_KEY)

    @property
    def is_plaintext(self) -> bool:
        return self.encoding is CredentialEncoding.PLAINTEXT

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the vault file's entry format."""
        if self.is_plaintext:
            password: Any = self.secret
        else:
            password = list(self.secret)
        return {
            "username": self.username,
            "password": password,
            "encoding": self.encoding.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Credential:
        """
        Parse one vault entry.

        Entries written without an ``encoding`` field are classified by the
        type of ``password``: a string is plaintext, an integer array is a
        derived key.

        Raises:
            VaultIOError: If the entry is malformed
        """
        if not isinstance(data, dict):
            raise VaultIOError("Malformed vault entry: expected an object")

        username = data.get("username")
        password = data.get("password")
        if not isinstance(username, str) or not username:
            raise VaultIOError("Malformed vault entry: missing username")

        if isinstance(password, str):
            inferred = CredentialEncoding.PLAINTEXT
        elif isinstance(password, list) and all(
            isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255
            for b in password
        ):
            inferred = CredentialEncoding.DERIVED_KEY
        else:
            raise VaultIOError(f"Malformed vault entry for '{username}': bad password field")

        tag = data.get("encoding")
        if tag is not None:
            try:
                declared = CredentialEncoding(tag)
            except ValueError:
                raise VaultIOError(f"Unknown credential encoding: {tag!r}") from None
            if declared is not inferred:
                raise VaultIOError(
                    f"Vault entry for '{username}' declares {declared.value} "
                    f"but stores {inferred.value}"
                )

        if inferred is CredentialEncoding.PLAINTEXT:
            return cls.plaintext(username, password)
        return cls.derived(username, bytes(password))
