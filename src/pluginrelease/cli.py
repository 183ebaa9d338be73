# cli.py
from __future__ import annotations

import sys

import click

from pluginrelease.config import load_settings
from pluginrelease.errors import CommandError, PublishError
from pluginrelease.publish import github_publish
from pluginrelease.ui.console import Console, set_console, get_console


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """pluginrelease: publish built plugins to GitHub from CI."""
    # Initialize console with debug flag
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command("github-publish")
@click.option("--dryrun", is_flag=True, default=False, help="Pass --dry-run to git add/commit/push")
@click.option("--verbose", is_flag=True, default=False, help="Print every command and its output")
@click.option("--commit-hash", default=None, help="Commit the GitHub release should point at")
@click.option("--dev", is_flag=True, default=False, help="Development build (accepted for compatibility)")
def github_publish_cmd(dryrun, verbose, commit_hash, dev):
    """Commit the built plugin to its release branch and create a GitHub release."""
    console = get_console()

    try:
        settings = load_settings()
        console.print_debug(f"Repository URL: {settings.repository_url}")
        console.print_debug(f"CI folder: {settings.ci_dir}")
        github_publish(
            settings,
            dryrun=dryrun,
            verbose=verbose,
            commit_hash=commit_hash,
            dev=dev,
            console=console,
        )
    except PublishError as e:
        # commands failing inside the executor were printed there already
        if not (isinstance(e, CommandError) and e.reported):
            console.print_error(
                f"Github Publish failed ({e.kind})",
                e.message,
                suggestion=e.suggestion,
            )
        sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
