"""
Command Line Interface
======================

    autologin                               log in as the default user
    autologin new -u USERNAME -p PASSWORD   store a new user
    autologin setdefault USERNAME           choose the default user
    autologin menu                          interactive menu

Failures are printed and the command returns normally; there are no
distinct exit codes.
"""

from __future__ import annotations

import argparse
import getpass
import logging
from typing import Callable, Optional, Sequence

from autologin import __version__
from autologin.automation import AutomationError, LoginSequencer
from autologin.core.auth import (
    Argon2Hasher,
    AuthenticationError,
    CredentialVerifier,
    PasswordRequiredError,
    SaltError,
    SaltStore,
)
from autologin.core.config import AutologinConfig
from autologin.core.logging import configure_root_logger
from autologin.core.vault import (
    Credential,
    CredentialEncoding,
    CredentialVault,
    DefaultUserPointer,
    VaultError,
)
from autologin.utils.validators import ValidationError, validate_password, validate_username


SequencerFactory = Callable[[AutologinConfig], LoginSequencer]
InputFunc = Callable[[str], str]

_log = logging.getLogger("autologin.cli")


def _default_sequencer_factory(config: AutologinConfig) -> LoginSequencer:
    return LoginSequencer.from_config(config.launcher)


class CommandContext:
    """Objects shared by all commands, built once from the configuration."""

    def __init__(
        self,
        config: AutologinConfig,
        sequencer_factory: SequencerFactory = _default_sequencer_factory,
        prompt: InputFunc = input,
        prompt_secret: InputFunc = getpass.getpass,
    ) -> None:
        self.config = config
        self.vault = CredentialVault.from_config(config)
        self.pointer = DefaultUserPointer.from_config(config)
        self.verifier = CredentialVerifier(
            Argon2Hasher.from_config(config.kdf),
            SaltStore(config.paths.salt_file, config.kdf.salt_length),
        )
        self.sequencer_factory = sequencer_factory
        self.prompt = prompt
        self.prompt_secret = prompt_secret

    @property
    def encoding(self) -> CredentialEncoding:
        return CredentialEncoding(self.config.vault.encoding)


def cmd_new(ctx: CommandContext, username: str, password: str) -> None:
    """Store a new user in the configured encoding."""
    try:
        validate_username(username)
        validate_password(password)
        credential = ctx.verifier.enroll(username, password, ctx.encoding)
        ctx.vault.save(credential)
    except (ValidationError, VaultError, SaltError) as exc:
        print(f"Failed to save credentials: {exc}")
        return

    print("User created successfully!")


def cmd_setdefault(ctx: CommandContext, username: str) -> None:
    """Point the default user at ``username`` (not checked against the vault)."""
    try:
        validate_username(username)
        ctx.pointer.set(username)
    except (ValidationError, VaultError) as exc:
        print(f"Failed to set default user: {exc}")
        return

    print(f"Default user set to: {username}")


def cmd_login(ctx: CommandContext) -> None:
    """Log in as the default user."""
    try:
        username = ctx.pointer.get()
    except VaultError as exc:
        print(f"Failed to get default user: {exc}")
        return

    if not username:
        print("No default user set. Please use 'new' and 'setdefault' to set a default user.")
        return

    try:
        credential = ctx.vault.read(username)
    except VaultError as exc:
        print(f"Failed to get credentials of the default user: {exc}")
        return

    try:
        secret = ctx.verifier.login_secret(credential)
    except PasswordRequiredError:
        secret = _verify_entered_password(ctx, credential)
        if secret is None:
            return

    _run_login(ctx, credential.username, secret)


def cmd_menu(ctx: CommandContext) -> None:
    """Interactive variant: create a user or log in as an existing one."""
    print("1) Create New User")
    print("2) Login as Existing User")
    choice = ctx.prompt("Select an option: ").strip()

    if choice == "1":
        username = ctx.prompt("Username: ").strip()
        password = ctx.prompt_secret("Password: ")
        cmd_new(ctx, username, password)
    elif choice == "2":
        try:
            usernames = ctx.vault.usernames()
        except VaultError as exc:
            print(f"Failed to get credentials: {exc}")
            return
        if not usernames:
            print("No users stored. Please create a user first.")
            return
        print("Stored users: " + ", ".join(usernames))

        username = ctx.prompt("Username: ").strip()
        try:
            credential = ctx.vault.read(username)
        except VaultError as exc:
            print(f"Failed to get credentials: {exc}")
            return
        secret = _verify_entered_password(ctx, credential)
        if secret is not None:
            _run_login(ctx, credential.username, secret)
    else:
        print(f"Invalid option: {choice!r}")


def _verify_entered_password(ctx: CommandContext, credential: Credential) -> Optional[str]:
    password = ctx.prompt_secret("Password: ")
    try:
        return ctx.verifier.login_secret(credential, password)
    except (AuthenticationError, SaltError) as exc:
        print(f"Login failed: {exc}")
        return None


def _run_login(ctx: CommandContext, username: str, password: str) -> None:
    launcher = ctx.config.launcher
    print(f"Logging in as {username}...")
    try:
        ctx.sequencer_factory(ctx.config).run(username, password)
    except AutomationError as exc:
        print(str(exc))
        return

    print(f"{launcher.window_title} window found! Credentials sent.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autologin",
        description="Store client credentials and log in automatically",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"autologin {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    new_parser = subparsers.add_parser("new", help="Create a new user")
    new_parser.add_argument("-u", "--username", default="", help="Username")
    new_parser.add_argument("-p", "--password", default="", help="Password")

    default_parser = subparsers.add_parser("setdefault", help="Set a user as default")
    default_parser.add_argument("username", help="Username to log in with by default")

    subparsers.add_parser("menu", help="Interactive menu")

    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    config: Optional[AutologinConfig] = None,
    sequencer_factory: SequencerFactory = _default_sequencer_factory,
    prompt: InputFunc = input,
    prompt_secret: InputFunc = getpass.getpass,
) -> int:
    """Entry point for the ``autologin`` command."""
    args = build_parser().parse_args(argv)

    try:
        config = config or AutologinConfig.load()
        config.ensure_directories()
        configure_root_logger(
            config.logging,
            log_dir=config.paths.log_dir,
            level="DEBUG" if args.verbose else None,
        )
    except (ValueError, OSError) as exc:
        print(f"Failed to load configuration: {exc}")
        return 0

    _log.debug("Loaded configuration %r", config)

    ctx = CommandContext(
        config,
        sequencer_factory=sequencer_factory,
        prompt=prompt,
        prompt_secret=prompt_secret,
    )

    if args.command == "new":
        cmd_new(ctx, args.username, args.password)
    elif args.command == "setdefault":
        cmd_setdefault(ctx, args.username)
    elif args.command == "menu":
        cmd_menu(ctx)
    else:
        cmd_login(ctx)

    return 0
