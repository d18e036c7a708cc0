"""Git hook management for gitscribe.

gitscribe can install two hooks into ``.git/hooks``:

- prepare-commit-msg: interactive, runs ``gitscribe --hook`` with the tty
- commit-msg: non-interactive message generation

An existing foreign hook is backed up to ``<hook>.backup`` on install and
restored on uninstall. A hook counts as installed only when its file
references ``gitscribe --hook``.
"""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from pathlib import Path

from gitscribe.errors import HookError

logger = logging.getLogger(__name__)

PREPARE_COMMIT_MSG = "prepare-commit-msg"
COMMIT_MSG = "commit-msg"
HOOK_NAMES: tuple[str, ...] = (PREPARE_COMMIT_MSG, COMMIT_MSG)

HOOK_MARKER = "gitscribe --hook"

HOOK_SCRIPTS: dict[str, str] = {
    PREPARE_COMMIT_MSG: (
        "#!/bin/sh\n"
        "# gitscribe git hook\n"
        'exec < /dev/tty && gitscribe --hook "$@" || true\n'
    ),
    COMMIT_MSG: (
        "#!/bin/sh\n"
        "# gitscribe git hook - non-interactive commit message generation\n"
        'gitscribe --hook "$@" || true\n'
    ),
}


def find_repo_root(cwd: Path | None = None) -> Path:
    """Return the top-level directory of the enclosing git repository.

    Raises:
        HookError: If git is missing or cwd is not inside a repository
    """
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd) if cwd else None,
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise HookError(f"failed to execute git: {exc}") from exc

    if completed.returncode != 0:
        raise HookError("Not a git repository (run this inside your project)")
    return Path(completed.stdout.strip())


class HookManager:
    """Installs, removes and inspects gitscribe git hooks.

    The hooks directory is resolved lazily so that constructing a manager
    outside a repository is fine; only the operations fail.
    """

    def __init__(self, repo_root: Path | None = None, cwd: Path | None = None) -> None:
        """Initialize the manager.

        Args:
            repo_root: Repository root; discovered with git when omitted
            cwd: Directory used for discovery (defaults to process cwd)
        """
        self._repo_root = repo_root
        self._cwd = cwd
        self._lookup_error: HookError | None = None

    @property
    def hooks_dir(self) -> Path:
        """Path to ``.git/hooks`` of the repository.

        The repository is looked up once; a failed lookup is remembered and
        raised again without running git.
        """
        if self._lookup_error is not None:
            raise self._lookup_error
        if self._repo_root is None:
            try:
                self._repo_root = find_repo_root(self._cwd)
            except HookError as e:
                self._lookup_error = e
                raise
        return self._repo_root / ".git" / "hooks"

    def _hook_path(self, name: str) -> Path:
        if name not in HOOK_SCRIPTS:
            raise HookError(f"Unknown hook '{name}'. Valid: {list(HOOK_NAMES)}")
        return self.hooks_dir / name

    def hook_exists(self, name: str) -> bool:
        """Check whether a gitscribe hook is installed.

        Returns False outside a git repository.
        """
        try:
            path = self._hook_path(name)
            if not path.is_file():
                return False
            return HOOK_MARKER in path.read_text(encoding="utf-8", errors="replace")
        except (HookError, OSError):
            return False

    def status(self) -> dict[str, bool]:
        """Installed state of every known hook."""
        return {name: self.hook_exists(name) for name in HOOK_NAMES}

    def install_hook(self, name: str) -> str:
        """Install a gitscribe hook.

        Returns:
            Human-readable description of what happened

        Raises:
            HookError: If the hook cannot be written
        """
        path = self._hook_path(name)
        if self.hook_exists(name):
            return f"{name} hook already installed"

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            message = f"{name} hook installed"
            if path.exists():
                backup = path.with_name(f"{name}.backup")
                backup.write_bytes(path.read_bytes())
                message += f" (previous hook backed up to {backup.name})"
            path.write_text(HOOK_SCRIPTS[name], encoding="utf-8")
            mode = path.stat().st_mode
            path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise HookError(f"Failed to write {name} hook: {e}") from e

        logger.info("Installed %s hook at %s", name, path)
        return message

    def uninstall_hook(self, name: str) -> bool:
        """Remove a gitscribe hook, restoring any backed-up hook.

        Returns:
            True if a gitscribe hook was removed

        Raises:
            HookError: If the hook file cannot be removed
        """
        path = self._hook_path(name)
        if not self.hook_exists(name):
            return False

        try:
            path.unlink()
            backup = path.with_name(f"{name}.backup")
            if backup.exists():
                os.replace(backup, path)
        except OSError as e:
            raise HookError(f"Failed to remove {name} hook: {e}") from e

        logger.info("Removed %s hook", name)
        return True

    def uninstall_hooks(self) -> list[str]:
        """Remove every gitscribe hook.

        Returns:
            Names of the hooks that were removed
        """
        # hooks_dir raises outside a repository instead of reporting nothing
        if not self.hooks_dir.is_dir():
            return []
        return [name for name in HOOK_NAMES if self.uninstall_hook(name)]
