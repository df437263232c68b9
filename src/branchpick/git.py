"""Branch listing and checkout via the ``git`` command line."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from branchpick.exceptions import (
    BranchListError,
    BranchNameDecodeError,
    CheckoutError,
    RepositoryNotFoundError,
)

logger = logging.getLogger(__name__)

_LOCAL_PREFIX = b"refs/heads/"
_REMOTE_PREFIX = b"refs/remotes/"


def _run_git(
    directory: Path, args: list[str], timeout: float
) -> subprocess.CompletedProcess[bytes]:
    """Run git in ``directory`` and return raw bytes output.

    Raises ``FileNotFoundError`` if git is not installed and
    ``subprocess.TimeoutExpired`` if it does not finish in time.
    """
    return subprocess.run(
        ["git", "-C", str(directory), *args],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
        timeout=timeout,
    )


def _stderr_line(proc: subprocess.CompletedProcess[bytes]) -> str:
    text = proc.stderr.decode("utf-8", errors="replace").strip()
    lines = [line for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else f"git exited with status {proc.returncode}"


def find_repository(directory: Path, timeout: float = 10.0) -> None:
    """Check that ``directory`` is inside a git work tree or git dir."""
    try:
        proc = _run_git(directory, ["rev-parse", "--git-dir"], timeout)
    except FileNotFoundError:
        raise RepositoryNotFoundError(
            "Couldn't run git. Is it installed and on your PATH?"
        ) from None
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.debug("git rev-parse failed in %s: %s", directory, exc)
        raise RepositoryNotFoundError(
            f"Couldn't find a git repo in {directory}: {exc}"
        ) from exc

    if proc.returncode != 0:
        logger.debug("git rev-parse in %s: %s", directory, _stderr_line(proc))
        raise RepositoryNotFoundError(f"Couldn't find a git repo in {directory}.")


def load_branches(
    directory: Path, remote: bool = False, timeout: float = 10.0
) -> list[str]:
    """Return the branch names of the repository containing ``directory``.

    Local branches are listed by default; ``remote=True`` lists
    remote-tracking branches instead (``origin/main``, ``origin/HEAD``...).
    Names come back in git's ref order and duplicates are kept.
    """
    find_repository(directory, timeout)

    prefix = _REMOTE_PREFIX if remote else _LOCAL_PREFIX
    namespace = prefix.decode("ascii").rstrip("/")
    try:
        proc = _run_git(
            directory,
            ["for-each-ref", "--format=%(refname)", namespace],
            timeout,
        )
    except (subprocess.TimeoutExpired, OSError) as exc:
        raise BranchListError(f"Error listing branches in the git repo: {exc}") from exc

    if proc.returncode != 0:
        raise BranchListError(
            f"Error listing branches in the git repo: {_stderr_line(proc)}"
        )

    branches = _parse_refs(proc.stdout, prefix)
    logger.info(
        "Loaded %d %s branch(es) from %s",
        len(branches),
        "remote" if remote else "local",
        directory,
    )
    return branches


def _parse_refs(output: bytes, prefix: bytes) -> list[str]:
    names: list[str] = []
    for raw in output.split(b"\n"):
        if not raw:
            continue
        if raw.startswith(prefix):
            raw = raw[len(prefix) :]
        try:
            names.append(raw.decode("utf-8"))
        except UnicodeDecodeError:
            raise BranchNameDecodeError(
                f"Failed to parse a branch name into a UTF-8 string: {raw!r}"
            ) from None
    return names


def checkout_branch(
    directory: Path, branch: str, remote: bool = False, timeout: float = 10.0
) -> None:
    """Check out ``branch``, creating a tracking branch for remote names."""
    if remote:
        args = ["checkout", "--track", branch, "--"]
    else:
        args = ["checkout", branch, "--"]
    try:
        proc = _run_git(directory, args, timeout)
    except (subprocess.TimeoutExpired, OSError) as exc:
        raise CheckoutError(f"Failed to check out {branch}: {exc}") from exc

    if proc.returncode != 0:
        raise CheckoutError(f"Failed to check out {branch}: {_stderr_line(proc)}")

    logger.info("Checked out %s in %s", branch, directory)
