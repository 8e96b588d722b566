"""
Autologin Vault Module
======================

Local storage of login credentials:
- CredentialVault: JSON file of username -> credential
- DefaultUserPointer: which user logs in unattended
- ExpiryPolicy: file-level retention window
"""

from autologin.core.vault.credentials import Credential, CredentialEncoding
from autologin.core.vault.default_user import DefaultUserPointer
from autologin.core.vault.errors import (
    VaultError,
    VaultIOError,
    DuplicateUserError,
    UserNotFoundError,
    EncodingMismatchError,
    CredentialExpiredError,
    DefaultUserError,
)
from autologin.core.vault.expiry import ExpiryPolicy
from autologin.core.vault.store import (
    CredentialVault,
    save_credentials,
    read_credentials,
    delete_vault,
)

__all__ = [
    "Credential",
    "CredentialEncoding",
    "CredentialVault",
    "DefaultUserPointer",
    "ExpiryPolicy",
    "save_credentials",
    "read_credentials",
    "delete_vault",
    "VaultError",
    "VaultIOError",
    "DuplicateUserError",
    "UserNotFoundError",
    "EncodingMismatchError",
    "CredentialExpiredError",
    "DefaultUserError",
]
