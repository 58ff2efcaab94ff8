"""HookKit command-line interface."""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

try:
    from importlib.metadata import version as get_version
except ImportError:
    from importlib_metadata import version as get_version

from .config import discover_profile, load_profile
from .exceptions import ConfigError, HookKitError
from .installer import default_source_app, run_install
from .models import InstallOptions, OptionalGroup, RunResult
from .settings import SETTINGS_FILE

app = typer.Typer(
    name="hookkit",
    help="HookKit: install observability hooks into a project's .claude directory",
    add_completion=False,
)
console = Console()


def _get_version_string() -> str:
    """Get version string from package metadata or pyproject.toml."""
    try:
        return get_version("hookkit")
    except (ImportError, ModuleNotFoundError):
        pass

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        content = pyproject_path.read_text()
        match = re.search(r'version\s*=\s*["\']([^"\']+)["\']', content)
        if match:
            return f"{match.group(1)} (development)"

    return "unknown"


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"HookKit version {_get_version_string()}")
        raise typer.Exit


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """HookKit: install observability hooks into a project's .claude directory."""


@app.command()
def init(
    target: Path = typer.Argument(
        ...,
        help="Target repository path",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    source: Path | None = typer.Option(
        None,
        "--source",
        envvar="HOOKKIT_SOURCE",
        help="Asset root to install from (defaults to ./.claude)",
    ),
    source_app: str | None = typer.Option(
        None,
        "--source-app",
        help="Set OBSERVABILITY_APP_NAME (defaults to the target directory name)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be done without writing",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing files",
    ),
    with_agents: bool = typer.Option(False, "--with-agents", help="Also install agents/"),
    with_commands: bool = typer.Option(
        False,
        "--with-commands",
        help="Also install commands/ and hooks/validators/",
    ),
    with_skills: bool = typer.Option(False, "--with-skills", help="Also install skills/"),
    with_output_styles: bool = typer.Option(
        False,
        "--with-output-styles",
        help="Also install output-styles/",
    ),
    with_all: bool = typer.Option(False, "--with-all", help="Install all optional extras"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Install profile (defaults to <target>/.hookkit.yaml when present)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each installed file"),
) -> None:
    """Install observability hooks into a target repo's .claude/ directory.

    Existing files are left alone unless --force is given. settings.json is
    merged: missing hook types and OBSERVABILITY_APP_NAME are added, anything
    else the project already has is kept.
    """
    _configure_logging(verbose)

    if source_app is not None and not source_app.strip():
        raise typer.BadParameter("--source-app requires a value", param_hint="--source-app")

    try:
        profile_path = config or discover_profile(target)
        profile = load_profile(profile_path) if profile_path else None

        source_root = (source or Path.cwd() / ".claude").resolve()
        if not source_root.is_dir():
            console.print(f"[red]Error:[/red] Asset source not found: {source_root}")
            raise typer.Exit(1)

        extras: set[OptionalGroup] = set(profile.extras) if profile else set()
        selected = {
            OptionalGroup.AGENTS: with_agents,
            OptionalGroup.COMMANDS: with_commands,
            OptionalGroup.SKILLS: with_skills,
            OptionalGroup.OUTPUT_STYLES: with_output_styles,
        }
        extras.update(group for group, flag in selected.items() if flag or with_all)

        try:
            options = InstallOptions(
                source_root=source_root,
                target_root=target / ".claude",
                source_app=source_app or (profile and profile.source_app) or default_source_app(target),
                dry_run=dry_run or bool(profile and profile.dry_run),
                force=force or bool(profile and profile.force),
                extras=extras,
                exclude_dirs=frozenset(profile.exclude_dirs) if profile else frozenset({"__pycache__"}),
            )
        except ValidationError as e:
            msg = f"Invalid install options: {e}"
            raise ConfigError(msg, details={"target": str(target)}) from e

        console.print(f"HookKit init: {options.source_root} → {options.target_root}")
        console.print(f"  source-app: {options.source_app}")
        if options.dry_run:
            console.print("  [dim](dry-run mode)[/dim]")
        if options.force:
            console.print("  [dim](force mode)[/dim]")
        console.print()

        result = run_install(options)

    except HookKitError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if options.dry_run:
        _print_dry_run(result)
    _print_summary(result)


def _print_dry_run(result: RunResult) -> None:
    for rel in result.installed_files:
        label = f"{rel} (merge)" if rel == SETTINGS_FILE else rel
        console.print(f"  [yellow]\\[dry-run][/yellow] {escape(label)}", highlight=False)


def _print_summary(result: RunResult) -> None:
    console.print()
    console.print(
        f"[green]Done:[/green] {result.installed} installed, {result.skipped} skipped",
    )
    if result.skipped_files:
        console.print("Skipped (already exist):")
        for rel in result.skipped_files:
            console.print(f"  {escape(rel)}", highlight=False)


@app.command()
def version() -> None:
    """Show HookKit version information."""
    console.print(f"HookKit version {_get_version_string()}")


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
