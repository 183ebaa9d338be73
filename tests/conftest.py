"""Shared fixtures for pluginrelease tests."""

import json
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from pluginrelease.config import Settings
from pluginrelease.runner import CommandFailure
from pluginrelease.ui.console import Console


class FakeRunner:
    """Records every invocation instead of starting processes."""

    def __init__(self, failures: Optional[Dict[str, str]] = None):
        # maps "program arg1 arg2" prefix -> failure message
        self.failures = failures or {}
        self.calls: List[Tuple[str, List[str]]] = []

    def __call__(self, program: str, args: Sequence[str]) -> str:
        self.calls.append((program, list(args)))
        cmdline = " ".join([program, *args])
        for prefix, message in self.failures.items():
            if cmdline.startswith(prefix):
                raise CommandFailure(program=program, argv=list(args), message=message, exit_code=1)
        return f"ran {cmdline}"

    @property
    def cmdlines(self) -> List[str]:
        return [" ".join([p, *a]) for p, a in self.calls]


@pytest.fixture
def fake_run() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def console() -> Console:
    return Console(debug=False)


def write_plugin(work_dir: Path, plugin: Dict) -> Path:
    """Lay out src/plugin.json and ci/dist/<id>/plugin.json like a CI build."""
    (work_dir / "src").mkdir(parents=True, exist_ok=True)
    (work_dir / "src" / "plugin.json").write_text(json.dumps({"id": plugin["id"]}))

    content_dir = work_dir / "ci" / "dist" / plugin["id"]
    content_dir.mkdir(parents=True, exist_ok=True)
    (content_dir / "plugin.json").write_text(json.dumps(plugin))
    return content_dir


@pytest.fixture
def plugin_json() -> Dict:
    return {
        "id": "acme-widget-panel",
        "type": "panel",
        "name": "Widget",
        "info": {"version": "1.2.0", "build": {"hash": "abc123"}},
    }


@pytest.fixture
def settings(tmp_path: Path, plugin_json: Dict) -> Settings:
    write_plugin(tmp_path, plugin_json)
    return Settings(
        repository_url="git@github.com:acme/widget.git",
        github_token="secret-token",
        work_dir=tmp_path,
    )


@pytest.fixture
def make_runner():
    """Build a FakeRunner that fails on the given command prefixes."""
    return FakeRunner
