# publish.py
# The github-publish task:
#   prepare release  -> commit the built plugin to release-<version>, tag, push
#   create release   -> GitHub release v<version> with changelog notes

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .config import GIT_EMAIL, GIT_USERNAME, Settings
from .git_facts.git import RepoRef, checkout_branch, git_url_parse
from .github_release import GitHubRelease
from .manifest import get_plugin_id, load_plugin_json
from .model import Command, CommandOptions, PluginManifest
from .release_notes import extract_release_notes
from .runner import Run, run_commands, run_process
from .ui.console import Console, get_console

NOTHING_TO_COMMIT = (
    re.compile(r"nothing to commit"),
    re.compile(r"nothing added to commit"),
    re.compile(r"no changes added to commit"),
)


def dist_content_dir(settings: Settings) -> Path:
    return settings.dist_dir / get_plugin_id(settings.work_dir)


def load_manifest(settings: Settings) -> PluginManifest:
    return load_plugin_json(dist_content_dir(settings) / "plugin.json")


def publish_commands(
    settings: Settings,
    manifest: PluginManifest,
    checkout: Command,
) -> List[Command]:
    """
    Build the ordered command list that commits the build to the release branch.

    `checkout` is the branch-resolution result (possibly an empty command).
    """
    version = manifest.version
    dry = CommandOptions(dryrun=True)

    return [
        Command("git", ["config", "user.email", GIT_EMAIL]),
        Command("git", ["config", "user.name", GIT_USERNAME]),
        checkout,
        Command("cp", ["-rf", str(dist_content_dir(settings)), "dist"]),
        Command("git", ["add", "--force", str(settings.dist_dir)], dry),
        Command("git", ["add", "--force", "dist"], dry),
        Command("/bin/rm", ["-rf", "src"], CommandOptions(enterprise=True)),
        Command(
            "git",
            ["commit", "-m", f"automated release {version} [skip ci]"],
            CommandOptions(dryrun=True, ok_on_error=NOTHING_TO_COMMIT),
        ),
        Command("git", ["tag", "-f", version]),
        Command("git", ["push", "-f", "origin", manifest.release_branch], dry),
    ]


def prepare_release(
    settings: Settings,
    manifest: PluginManifest,
    *,
    dryrun: bool = False,
    verbose: bool = False,
    run: Run = run_process,
    checkout: Optional[Callable[[str], Command]] = None,
    console: Optional[Console] = None,
) -> None:
    """Commit, tag and push the built plugin on its release branch."""
    console = console or get_console()
    checkout = checkout or checkout_branch

    with console.task("Preparing release"):
        commands = publish_commands(
            settings,
            manifest,
            checkout(manifest.release_branch),
        )
        run_commands(
            commands,
            dryrun=dryrun,
            verbose=verbose,
            enterprise=manifest.enterprise,
            run=run,
            console=console,
        )


def create_release(
    settings: Settings,
    repo: RepoRef,
    manifest: PluginManifest,
    *,
    commit_hash: Optional[str] = None,
    changelog: Optional[Path] = None,
    client_factory: Callable[..., GitHubRelease] = GitHubRelease,
    console: Optional[Console] = None,
) -> Dict[str, Any]:
    """Create the hosted GitHub release for the manifest's version."""
    console = console or get_console()

    with console.task("Creating release"):
        notes = extract_release_notes(changelog or settings.work_dir / "CHANGELOG.md")
        client = client_factory(
            settings.github_token,
            repo.owner,
            repo.name,
            notes,
            commit_hash,
        )
        created = client.release(manifest, settings.packages_dir)

    console.print_release_created(f"v{manifest.version}", created.get("html_url"))
    return created


def github_publish(
    settings: Settings,
    *,
    dryrun: bool = False,
    verbose: bool = False,
    commit_hash: Optional[str] = None,
    dev: bool = False,
    run: Run = run_process,
    checkout: Optional[Callable[[str], Command]] = None,
    client_factory: Callable[..., GitHubRelease] = GitHubRelease,
    console: Optional[Console] = None,
) -> Dict[str, Any]:
    """
    Run the whole publish task.

    `dev` is accepted for CLI compatibility and has no effect here.
    `dryrun` only reaches the git commands that opt into --dry-run; the
    hosted release is created either way.

    Raises:
        PublishError: any configuration, manifest, command or API failure.
    """
    console = console or get_console()

    repo = git_url_parse(settings.repository_url)
    manifest = load_manifest(settings)

    console.print_publish_started(
        repository=f"{repo.owner}/{repo.name}",
        plugin_id=manifest.id,
        version=manifest.version,
        dryrun=dryrun,
    )

    prepare_release(
        settings,
        manifest,
        dryrun=dryrun,
        verbose=verbose,
        run=run,
        checkout=checkout,
        console=console,
    )

    return create_release(
        settings,
        repo,
        manifest,
        commit_hash=commit_hash,
        client_factory=client_factory,
        console=console,
    )
