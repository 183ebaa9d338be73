# git.py
# Small, focused wrapper around the Git CLI.
# This module centralizes the Git queries the release task makes so the rest
# of the codebase never needs to call subprocess("git ...") directly.

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..errors import CommandError, RepositoryUrlError
from ..model import Command


def _git(args: list[str], cwd: Optional[str] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    This is the single low-level entry point for all Git queries in this file.

    Args:
        args: List of git arguments (e.g. ["branch", "-a"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        CommandError: if git is missing or exits non-zero (message carries
            git's stderr).
    """
    cmdline = " ".join(["git", *args])
    try:
        out = subprocess.run(
            ["git", *args],
            cwd=cwd,
            text=True,
            capture_output=True,
            check=True,
        ).stdout
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip()
        raise CommandError(
            message=f"Command failed with exit code {e.returncode}: {cmdline}" + (f"\n{detail}" if detail else ""),
            program="git",
            argv=list(args),
        ) from e
    except OSError as e:
        raise CommandError(
            message=f"Command failed: {cmdline}\n{e.strerror or e}",
            suggestion="Install Git or fix PATH.",
            program="git",
            argv=list(args),
        ) from e

    return out.strip()


def current_branch(cwd: Optional[str] = None) -> str:
    """Return the name of the checked out branch ("HEAD" when detached)."""
    return _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)


def local_branches(name: str, cwd: Optional[str] = None) -> List[str]:
    """
    Return local branches whose name ends with `name`.

    Remote-tracking entries from `git branch -a` are left out.
    """
    out = _git(["branch", "-a"], cwd=cwd)
    branches = []
    for line in out.splitlines():
        # "* main", "  release-1.0.0", "  remotes/origin/main"
        branch = line.lstrip("*").strip()
        if "remote" in branch:
            continue
        if branch.endswith(name):
            branches.append(branch)
    return branches


def checkout_branch(branch_name: str, cwd: Optional[str] = None) -> Command:
    """
    Return the command that puts the work tree on `branch_name`.

    - already on it      -> empty command (nothing to run)
    - exists locally     -> git checkout <branch>
    - does not exist yet -> git checkout -b <branch>
    """
    if current_branch(cwd=cwd) == branch_name:
        return Command.noop()

    if local_branches(branch_name, cwd=cwd) == [branch_name]:
        return Command("git", ["checkout", branch_name])
    return Command("git", ["checkout", "-b", branch_name])


# ----------------------------------------------------------------------
# Remote URLs
# ----------------------------------------------------------------------

_SSH_PREFIX = re.compile(r"^git@github.com")
_SSH_URL = re.compile(r"^git@github.com:(.*?)/(.*?)\.git")
_HTTPS_PREFIX = re.compile(r"^https://github.com/")
# Requires a "/" before ".git": "https://github.com/owner/repo.git" is rejected.
_HTTPS_URL = re.compile(r"^https://github.com/(.*?)/(.*?)/.git")


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str


def git_url_parse(url: str) -> RepoRef:
    """
    Extract owner and repository name from a GitHub remote URL.

    Raises:
        RepositoryUrlError: if the URL is neither an ssh nor an https
            GitHub remote.
    """
    match = None
    if _SSH_PREFIX.match(url):
        match = _SSH_URL.match(url)
    elif _HTTPS_PREFIX.match(url):
        match = _HTTPS_URL.match(url)

    if match:
        return RepoRef(owner=match.group(1), name=match.group(2))

    raise RepositoryUrlError(
        message=f"Could not find a suitable git repository. Received [{url}]",
        suggestion="Use an ssh remote such as git@github.com:owner/repo.git",
    )
