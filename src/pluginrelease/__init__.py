from .model import Command, CommandOptions, PluginManifest
from .runner import run_commands
from .publish import github_publish

__all__ = ["Command", "CommandOptions", "PluginManifest", "run_commands", "github_publish"]
