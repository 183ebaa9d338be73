# config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError

REPOSITORY_URL_VAR = "CIRCLE_REPOSITORY_URL"
GITHUB_TOKEN_VAR = "GITHUB_TOKEN"

GIT_EMAIL = "eng@grafana.com"
GIT_USERNAME = "CircleCI Automation"


@dataclass(frozen=True)
class Settings:
    """Everything the publish task reads from the environment."""
    repository_url: str
    github_token: str
    work_dir: Path

    @property
    def ci_dir(self) -> Path:
        return self.work_dir / "ci"

    @property
    def dist_dir(self) -> Path:
        return self.ci_dir / "dist"

    @property
    def packages_dir(self) -> Path:
        return self.ci_dir / "packages"


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    work_dir: Optional[Path] = None,
) -> Settings:
    """
    Read and validate the release environment once.

    Raises:
        ConfigurationError: if a required variable is unset or empty.
    """
    env = os.environ if environ is None else environ

    repository_url = env.get(REPOSITORY_URL_VAR)
    if not repository_url:
        raise ConfigurationError(
            message=(
                "The release plugin requires you specify the repository url "
                f"as environment variable {REPOSITORY_URL_VAR}"
            ),
            suggestion=f"export {REPOSITORY_URL_VAR}=git@github.com:<owner>/<repo>.git",
        )

    github_token = env.get(GITHUB_TOKEN_VAR)
    if not github_token:
        raise ConfigurationError(
            message=(
                "Github publish requires that you set the environment variable "
                f"{GITHUB_TOKEN_VAR} to a valid github api token."
            ),
            suggestion="See: https://github.com/settings/tokens for more details.",
        )

    return Settings(
        repository_url=repository_url,
        github_token=github_token,
        work_dir=Path(work_dir) if work_dir is not None else Path.cwd(),
    )
