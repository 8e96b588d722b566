"""
Autologin - Stored-Credential Client Login
==========================================

Stores a local user's login credentials and signs that user into a
desktop client by launching it and typing into its window.

Notes:
- Credentials stay on the local disk
- No secrets are logged
- All paths are OS-aware
"""

__version__ = "0.1.0"
__author__ = "Autologin Team"

__all__ = ["__version__"]
