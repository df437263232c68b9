"""Shared test fixtures."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest


def _git(repo: Path, *args: str) -> str:
    proc = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "init.defaultBranch=main",
            "-c", "commit.gpgsign=false",
            "-C", str(repo),
            *args,
        ],
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout


@pytest.fixture
def isolated_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Stop git from discovering a repository above ``tmp_path``.

    Skips the test when git is not installed.
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)
    return tmp_path


@pytest.fixture
def run_git(isolated_git: Path) -> Callable[..., str]:
    """Run a git command in a repo with a fixed identity, returning stdout."""
    return _git


@pytest.fixture
def git_repo(isolated_git: Path) -> Path:
    repo = isolated_git / "repo"
    repo.mkdir()
    _git(repo, "init")
    _git(repo, "commit", "--allow-empty", "-m", "initial")
    _git(repo, "branch", "feat/my-feature")
    _git(repo, "branch", "bug/my-bug")
    return repo


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG dirs at ``tmp_path`` and clear branchpick env vars."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for name in ("BRANCHPICK_REMOTE", "BRANCHPICK_GIT_TIMEOUT", "BRANCHPICK_MATCH_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "config" / "branchpick"
