# manifest.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .errors import ManifestError
from .model import PluginManifest

PLUGIN_TYPES = ("panel", "datasource", "app")


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ManifestError(message=f"Plugin manifest not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(message=f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(message=f"{path} must contain a JSON object")
    return data


def get_plugin_id(work_dir: Path) -> str:
    """Return the plugin id declared in <work_dir>/src/plugin.json."""
    path = work_dir / "src" / "plugin.json"
    plugin_id = _read_json(path).get("id")
    if not plugin_id:
        raise ManifestError(message=f"{path} does not declare an id")
    return plugin_id


def load_plugin_json(path: Path) -> PluginManifest:
    """
    Load and validate a built plugin.json.

    Required: id, type (panel | datasource | app), info.version.
    """
    data = _read_json(path)

    if not data.get("id"):
        raise ManifestError(message=f"{path}: missing id")
    if data.get("type") not in PLUGIN_TYPES:
        raise ManifestError(
            message=f"{path}: invalid type {data.get('type')!r}",
            suggestion=f"type must be one of: {', '.join(PLUGIN_TYPES)}",
        )
    info = data.get("info")
    if not isinstance(info, dict):
        raise ManifestError(message=f"{path}: missing info")
    if not info.get("version"):
        raise ManifestError(message=f"{path}: missing info.version")

    return PluginManifest(
        id=data["id"],
        type=data["type"],
        name=data.get("name", data["id"]),
        version=str(info["version"]),
        enterprise=bool(data.get("enterprise", False)),
        raw=data,
    )
