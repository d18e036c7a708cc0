"""Shared fixtures and fakes for gitscribe tests."""

from __future__ import annotations

import subprocess
import time
from collections.abc import Iterable
from pathlib import Path

import pytest

from gitscribe.config import ConfigStore
from gitscribe.credentials import CredentialType
from gitscribe.errors import HookError
from gitscribe.hooks import HOOK_NAMES
from gitscribe.wizard.events import KeyPress, RawKeyEvent


class FakeHooks:
    """In-memory stand-in for HookManager."""

    def __init__(self, installed: Iterable[str] = (), error: str | None = None) -> None:
        self.installed = set(installed)
        self.error = error
        self.exists_calls = 0

    def hook_exists(self, name: str) -> bool:
        self.exists_calls += 1
        return name in self.installed

    def install_hook(self, name: str) -> str:
        if self.error:
            raise HookError(self.error)
        self.installed.add(name)
        return f"{name} hook installed"

    def uninstall_hook(self, name: str) -> bool:
        if self.error:
            raise HookError(self.error)
        if name not in self.installed:
            return False
        self.installed.discard(name)
        return True

    def uninstall_hooks(self) -> list[str]:
        return [name for name in HOOK_NAMES if self.uninstall_hook(name)]


class FakeCredentialStore:
    """In-memory stand-in for the keychain-backed CredentialStore."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.values: dict[str, str] = {}

    def get(self, credential_type: CredentialType) -> str | None:
        return self.values.get(credential_type.value)

    def set(self, credential_type: CredentialType, value: str) -> bool:
        if not self.available:
            return False
        self.values[credential_type.value] = value
        return True

    def delete(self, credential_type: CredentialType) -> bool:
        return self.values.pop(credential_type.value, None) is not None

    def exists(self, credential_type: CredentialType) -> bool:
        return self.get(credential_type) is not None

    def keychain_available(self) -> bool:
        return self.available

    def backend_name(self) -> str:
        return "memory" if self.available else "fail Keyring"


@pytest.fixture
def fake_hooks() -> FakeHooks:
    return FakeHooks()


@pytest.fixture
def credentials() -> FakeCredentialStore:
    return FakeCredentialStore()


@pytest.fixture
def store(tmp_path: Path, credentials: FakeCredentialStore) -> ConfigStore:
    """Config store writing under tmp_path with an in-memory keychain."""
    return ConfigStore(tmp_path / "gitscribe" / "config.yaml", credentials)  # type: ignore[arg-type]


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Empty git repository."""
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True)
    return repo


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point GITSCRIBE_CONFIG_HOME at a temporary directory.

    ConfigStore instances created by the code under test get an in-memory
    keychain.
    """
    home = tmp_path / "config-home"
    monkeypatch.setenv("GITSCRIBE_CONFIG_HOME", str(home))
    monkeypatch.delenv("GITSCRIBE_API_KEY", raising=False)
    monkeypatch.setattr("gitscribe.config.CredentialStore", FakeCredentialStore)
    return home


class ScriptedReader:
    """Terminal reader replaying a fixed script.

    Each script entry is either a list of RawKeyEvent (input ready) or None
    (the poll times out). Once the script is used up, ``read`` raises
    ``final`` (end of input by default).
    """

    def __init__(self, script: Iterable[object], final: Exception | None = None) -> None:
        self.script = list(script)
        self.final = final if final is not None else EOFError("end of script")
        self.polls = 0

    def poll(self, timeout: float) -> bool:
        self.polls += 1
        if self.script and self.script[0] is None:
            self.script.pop(0)
            return False
        return True

    def read(self) -> list[RawKeyEvent]:
        if not self.script:
            raise self.final
        return list(self.script.pop(0))  # type: ignore[call-overload]


class IdleReader:
    """Terminal reader that never has input."""

    def poll(self, timeout: float) -> bool:
        time.sleep(timeout)
        return False

    def read(self) -> list[RawKeyEvent]:
        return []


def presses(*keys: KeyPress) -> list[RawKeyEvent]:
    """Wrap key presses as one batch of raw events."""
    return [RawKeyEvent(key) for key in keys]
