"""Tests for the command line interface, driven through main() with fakes."""

import pytest

from autologin import __version__
from autologin.automation import LoginSequencer
from autologin.automation.keyboard import KEY_ENTER, KEY_TAB
from autologin.cli import build_parser, main
from autologin.core.vault import (
    Credential,
    CredentialEncoding,
    CredentialVault,
    DefaultUserPointer,
)

from conftest import FakeWindowSource, make_config


class Prompts:
    """Feeds canned answers to input() and getpass() and records the questions."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked = []

    def __call__(self, question):
        self.asked.append(question)
        return self.answers.pop(0)


@pytest.fixture
def run_cli(config, fake_launcher, fake_keyboard, capsys):
    window_source = FakeWindowSource(0.0)

    def sequencer_factory(cfg):
        return LoginSequencer.from_config(
            cfg.launcher,
            launcher=fake_launcher,
            keyboard=fake_keyboard,
            window_source=window_source,
        )

    def run(*argv, prompt=None, prompt_secret=None, cfg=None):
        capsys.readouterr()
        code = main(
            list(argv),
            config=cfg or config,
            sequencer_factory=sequencer_factory,
            prompt=prompt or Prompts(),
            prompt_secret=prompt_secret or Prompts(),
        )
        assert code == 0
        return capsys.readouterr().out

    return run


def typed(keyboard):
    """Keystrokes sent after the splash-dismissing Enter."""
    return keyboard.events[1:]


# ── new / setdefault ─────────────────────────────────────────────────

def test_end_to_end_enrollment(run_cli, config):
    assert run_cli("new", "-u", "alice", "-p", "secret") == "User created successfully!\n"
    assert run_cli("setdefault", "alice") == "Default user set to: alice\n"

    assert DefaultUserPointer.from_config(config).get() == "alice"
    vault = CredentialVault.from_config(config)
    assert vault.read("alice") == Credential.plaintext("alice", "secret")

    out = run_cli("new", "--username", "alice", "--password", "other")
    assert out == "Failed to save credentials: User 'alice' already exists\n"
    assert vault.read("alice").secret == "secret"


def test_new_without_username_fails(run_cli, config):
    out = run_cli("new", "-p", "secret")
    assert out.startswith("Failed to save credentials: username cannot be empty")
    assert not config.paths.vault_file.exists()


def test_new_rejects_newline_in_password(run_cli):
    out = run_cli("new", "-u", "alice", "-p", "se\ncret")
    assert out.startswith("Failed to save credentials:")


def test_setdefault_does_not_check_vault(run_cli, config):
    assert run_cli("setdefault", "ghost") == "Default user set to: ghost\n"
    assert DefaultUserPointer.from_config(config).get() == "ghost"


def test_new_in_derived_key_mode_stores_key(run_cli, tmp_path):
    cfg = make_config(tmp_path, encoding="derived-key")
    assert run_cli("new", "-u", "alice", "-p", "secret", cfg=cfg) == "User created successfully!\n"

    credential = CredentialVault.from_config(cfg).read("alice")
    assert credential.encoding is CredentialEncoding.DERIVED_KEY
    assert len(credential.secret) == cfg.kdf.hash_length
    assert cfg.paths.salt_file.exists()


# ── login as the default user ────────────────────────────────────────

def test_login_types_default_user_credentials(run_cli, fake_launcher, fake_keyboard, config):
    run_cli("new", "-u", "alice", "-p", "secret")
    run_cli("setdefault", "alice")

    out = run_cli()

    assert out == "Logging in as alice...\nRiot Client Main window found! Credentials sent.\n"
    assert fake_launcher.calls[0][0] == config.launcher.executable_path
    assert fake_keyboard.events == [
        ("press", KEY_ENTER),
        ("type", "alice"),
        ("press", KEY_TAB),
        ("type", "secret"),
        ("press", KEY_ENTER),
    ]


def test_login_without_pointer_file(run_cli, fake_launcher):
    out = run_cli()
    assert out.startswith("Failed to get default user: Failed to read default user")
    assert fake_launcher.calls == []


def test_login_with_empty_pointer(run_cli, config, fake_launcher):
    config.ensure_directories()
    config.paths.default_user_file.write_text("")

    out = run_cli()

    assert out == (
        "No default user set. Please use 'new' and 'setdefault' to set a default user.\n"
    )
    assert fake_launcher.calls == []


def test_login_with_dangling_pointer(run_cli, fake_launcher):
    run_cli("new", "-u", "alice", "-p", "secret")
    run_cli("setdefault", "bob")

    out = run_cli()

    assert out == "Failed to get credentials of the default user: User 'bob' not found\n"
    assert fake_launcher.calls == []


def test_login_window_timeout(tmp_path, fake_launcher, fake_keyboard, capsys):
    cfg = make_config(tmp_path, window_timeout_seconds=0.2)

    def factory(c):
        return LoginSequencer.from_config(
            c.launcher,
            launcher=fake_launcher,
            keyboard=fake_keyboard,
            window_source=FakeWindowSource(appear_after=None),
        )

    main(["new", "-u", "alice", "-p", "secret"], config=cfg)
    main(["setdefault", "alice"], config=cfg)
    capsys.readouterr()

    assert main([], config=cfg, sequencer_factory=factory) == 0

    out = capsys.readouterr().out
    assert out == (
        "Logging in as alice...\n"
        "Timeout: window 'Riot Client Main' not found after 0.2 seconds\n"
    )
    assert typed(fake_keyboard) == []


def test_derived_key_login_prompts_for_password(run_cli, fake_keyboard, tmp_path):
    cfg = make_config(tmp_path, encoding="derived-key")
    run_cli("new", "-u", "alice", "-p", "secret", cfg=cfg)
    run_cli("setdefault", "alice", cfg=cfg)

    secret_prompt = Prompts("secret")
    out = run_cli(cfg=cfg, prompt_secret=secret_prompt)

    assert secret_prompt.asked == ["Password: "]
    assert out.endswith("Credentials sent.\n")
    assert ("type", "secret") in fake_keyboard.events


def test_derived_key_login_wrong_password(run_cli, fake_launcher, tmp_path):
    cfg = make_config(tmp_path, encoding="derived-key")
    run_cli("new", "-u", "alice", "-p", "secret", cfg=cfg)
    run_cli("setdefault", "alice", cfg=cfg)

    out = run_cli(cfg=cfg, prompt_secret=Prompts("wrong"))

    assert out == "Login failed: Invalid password\n"
    assert fake_launcher.calls == []


def test_derived_key_login_after_salt_loss(run_cli, fake_launcher, tmp_path):
    cfg = make_config(tmp_path, encoding="derived-key")
    run_cli("new", "-u", "alice", "-p", "secret", cfg=cfg)
    run_cli("setdefault", "alice", cfg=cfg)
    cfg.paths.salt_file.unlink()

    out = run_cli(cfg=cfg, prompt_secret=Prompts("secret"))

    assert out.startswith("Login failed: Salt file is missing")
    assert not cfg.paths.salt_file.exists()
    assert fake_launcher.calls == []


# ── configuration errors ─────────────────────────────────────────────

@pytest.mark.parametrize("name, value, message", [
    ("AUTOLOGIN_VAULT__ENCODING", "rot13", "Invalid vault encoding: rot13"),
    ("AUTOLOGIN_LAUNCHER__WINDOW_TIMEOUT_SECONDS", "soon", "could not convert"),
])
def test_bad_environment_override_is_reported(monkeypatch, capsys, tmp_path, name, value, message):
    monkeypatch.setenv("AUTOLOGIN_PATHS__DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("AUTOLOGIN_PATHS__LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv(name, value)

    assert main(["setdefault", "alice"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Failed to load configuration: ")
    assert message in out
    assert not (tmp_path / "data" / "default_user.txt").exists()


def test_unusable_data_dir_is_reported(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    cfg = make_config(blocker)

    assert main(["setdefault", "alice"], config=cfg) == 0

    assert capsys.readouterr().out.startswith("Failed to load configuration: ")


# ── menu ─────────────────────────────────────────────────────────────

def test_menu_create_user(run_cli, config):
    prompt = Prompts("1", "alice")
    out = run_cli("menu", prompt=prompt, prompt_secret=Prompts("secret"))

    assert prompt.asked == ["Select an option: ", "Username: "]
    assert out == "1) Create New User\n2) Login as Existing User\nUser created successfully!\n"
    assert CredentialVault.from_config(config).read("alice").secret == "secret"


def test_menu_login_existing_user(run_cli, fake_keyboard):
    run_cli("new", "-u", "alice", "-p", "secret")

    out = run_cli("menu", prompt=Prompts("2", "alice"), prompt_secret=Prompts("secret"))

    assert out.endswith("Logging in as alice...\nRiot Client Main window found! Credentials sent.\n")
    assert typed(fake_keyboard) == [
        ("type", "alice"),
        ("press", KEY_TAB),
        ("type", "secret"),
        ("press", KEY_ENTER),
    ]


def test_menu_login_wrong_password(run_cli, fake_launcher):
    run_cli("new", "-u", "alice", "-p", "secret")

    out = run_cli("menu", prompt=Prompts("2", "alice"), prompt_secret=Prompts("nope"))

    assert out.endswith("Login failed: Invalid password\n")
    assert fake_launcher.calls == []


def test_menu_login_lists_stored_users(run_cli):
    run_cli("new", "-u", "alice", "-p", "secret")
    run_cli("new", "-u", "bob", "-p", "hunter2")
    prompt = Prompts("2", "nobody")

    out = run_cli("menu", prompt=prompt)

    assert "Stored users: alice, bob\n" in out
    assert prompt.asked == ["Select an option: ", "Username: "]
    assert out.endswith("Failed to get credentials: User 'nobody' not found\n")


def test_menu_login_with_empty_vault(run_cli, fake_launcher):
    prompt = Prompts("2")

    out = run_cli("menu", prompt=prompt)

    assert out.endswith("No users stored. Please create a user first.\n")
    assert prompt.asked == ["Select an option: "]
    assert fake_launcher.calls == []


def test_menu_invalid_option(run_cli):
    out = run_cli("menu", prompt=Prompts("9"))
    assert out.endswith("Invalid option: '9'\n")


# ── parser ───────────────────────────────────────────────────────────

def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["--version"])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out.strip() == f"autologin {__version__}"


def test_parser_commands():
    parser = build_parser()
    assert parser.parse_args([]).command is None
    args = parser.parse_args(["new", "-u", "alice", "-p", "secret"])
    assert (args.command, args.username, args.password) == ("new", "alice", "secret")
    assert parser.parse_args(["setdefault", "alice"]).username == "alice"
    assert parser.parse_args(["-v", "menu"]).verbose
