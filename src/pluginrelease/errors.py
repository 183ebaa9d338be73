# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(eq=False)
class PublishError(Exception):
    """
    Structured release error with enough context for:
      - clean CLI output (title + message)
      - a hint when the user can fix it
    """
    message: str
    suggestion: str | None = None

    kind = "error"

    def __str__(self) -> str:
        return self.message


class ConfigurationError(PublishError):
    kind = "configuration"


class RepositoryUrlError(PublishError):
    kind = "repository-url"


class ManifestError(PublishError):
    kind = "manifest"


class ReleaseNotesError(PublishError):
    kind = "release-notes"


@dataclass(eq=False)
class ReleaseApiError(PublishError):
    status: int | None = None

    kind = "release-api"


@dataclass(eq=False)
class CommandError(PublishError):
    program: str = ""
    argv: List[str] = field(default_factory=list)
    reported: bool = False     # already printed by the executor

    kind = "command"
