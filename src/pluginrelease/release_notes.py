# release_notes.py
from __future__ import annotations

import re
from pathlib import Path
from typing import List

from .errors import ReleaseNotesError

# awk 'BEGIN {FS="##"; RS=""} FNR==3 {print; exit}' CHANGELOG.md
# RS="" is awk paragraph mode: records are separated by runs of empty lines,
# and newlines before the first / after the last record are ignored.
_PARAGRAPH_SEP = re.compile(r"\n\n+")
RECORD_NUMBER = 3


def paragraphs(text: str) -> List[str]:
    """Split text into awk paragraph-mode records."""
    text = text.strip("\n")
    if not text:
        return []
    return _PARAGRAPH_SEP.split(text)


def extract_release_notes(changelog: str | Path = "CHANGELOG.md") -> str:
    """
    Return the third paragraph of the changelog.

    For a changelog laid out as title, newest "## <version>" heading and its
    notes, each separated by an empty line, these are the newest notes.
    Returns "" when there are fewer records.

    Raises:
        ReleaseNotesError: if the changelog cannot be read.
    """
    path = Path(changelog)
    try:
        # undecodable bytes become U+FFFD; awk does not reject them either
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ReleaseNotesError(
            message=f"Could not read release notes from {path}: {e}",
            suggestion="Add a CHANGELOG.md to the repository root.",
        ) from e

    records = paragraphs(text)
    if len(records) < RECORD_NUMBER:
        return ""
    return records[RECORD_NUMBER - 1]
