"""Install orchestration: settings merge first, then asset groups."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .copier import install_group
from .models import AssetGroup, GroupKind, InstallOptions, MergeStatus, OptionalGroup, RunResult
from .settings import SETTINGS_FILE, merge_settings

logger = logging.getLogger(__name__)

# Developer-only hook script that must never reach a project.
TEST_ONLY_HOOK = "test_hitl.py"

CORE_GROUPS: list[AssetGroup] = [
    AssetGroup(
        name="hooks",
        path="hooks",
        kind=GroupKind.FILES,
        pattern="*.py",
        exclude=frozenset({TEST_ONLY_HOOK}),
    ),
    AssetGroup(name="hook utilities", path="hooks/utils"),
    AssetGroup(name="status lines", path="status_lines"),
]

OPTIONAL_GROUPS: list[AssetGroup] = [
    AssetGroup(name="agents", path="agents", optional=OptionalGroup.AGENTS),
    AssetGroup(name="commands", path="commands", optional=OptionalGroup.COMMANDS),
    # Commands invoke the validator hooks.
    AssetGroup(
        name="validator hooks",
        path="hooks/validators",
        optional=OptionalGroup.COMMANDS,
    ),
    AssetGroup(name="skills", path="skills", optional=OptionalGroup.SKILLS),
    AssetGroup(
        name="output styles",
        path="output-styles",
        optional=OptionalGroup.OUTPUT_STYLES,
    ),
]


def selected_groups(extras: Iterable[OptionalGroup]) -> list[AssetGroup]:
    """Return the core groups followed by the enabled optional groups."""
    enabled = set(extras)
    return CORE_GROUPS + [g for g in OPTIONAL_GROUPS if g.optional in enabled]


def default_source_app(project: Path) -> str:
    """Derive the application name from the target project directory."""
    return project.resolve().name


def run_install(options: InstallOptions) -> RunResult:
    """Install settings and assets into the target configuration directory.

    The settings merge runs to completion before any file is copied, so a
    malformed target settings document aborts the run with nothing installed.

    Args:
        options: Resolved install options

    Returns:
        Counters and path lists for the run

    Raises:
        SourceSettingsError: If the bundled settings document is malformed
        TargetSettingsError: If the target settings document is malformed
        OSError: If any write fails
    """
    result = RunResult()

    status = merge_settings(
        options.source_root / SETTINGS_FILE,
        options.target_root / SETTINGS_FILE,
        options.source_app,
        dry_run=options.dry_run,
        force=options.force,
    )
    if status == MergeStatus.APPLIED:
        result.record_installed(SETTINGS_FILE)
    else:
        result.record_skipped(SETTINGS_FILE)

    for group in selected_groups(options.extras):
        install_group(group, options, result)

    logger.info(
        "Install finished: %d installed, %d skipped",
        result.installed,
        result.skipped,
    )
    return result
