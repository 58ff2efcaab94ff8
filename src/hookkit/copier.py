"""Copy engine: install individual assets without clobbering existing files."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

from .models import AssetGroup, GroupKind, InstallOptions, RunResult

logger = logging.getLogger(__name__)

ExcludePredicate = Callable[[Path], bool]


def cache_dir_filter(names: Iterable[str]) -> ExcludePredicate:
    """Build a predicate matching files below any directory named in *names*.

    The predicate receives a path relative to the directory being walked.
    """
    excluded = frozenset(names)

    def _excluded(relative: Path) -> bool:
        return any(part in excluded for part in relative.parts[:-1])

    return _excluded


def copy_asset(rel: str, options: InstallOptions, result: RunResult) -> None:
    """Install one asset identified by its path relative to the asset root.

    Args:
        rel: POSIX-style path relative to both source and target roots
        options: Resolved install options
        result: Run accumulator updated in place

    Raises:
        OSError: If the destination cannot be written
    """
    src = options.source_root / rel
    dst = options.target_root / rel

    if not src.is_file():
        return

    if dst.is_file() and not options.force:
        logger.debug("Skipping existing %s", rel)
        result.record_skipped(rel)
        return

    if options.dry_run:
        logger.info("[dry-run] %s", rel)
        result.record_installed(rel)
        return

    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
    logger.debug("Installed %s", rel)
    result.record_installed(rel)


def copy_files(group: AssetGroup, options: InstallOptions, result: RunResult) -> None:
    """Install the top-level files of a flat group that match its pattern."""
    src_dir = options.source_root / group.path
    if not src_dir.is_dir():
        return

    for file in sorted(src_dir.glob(group.pattern)):
        if not file.is_file() or file.name in group.exclude:
            continue
        copy_asset(f"{group.path}/{file.name}", options, result)


def copy_tree(
    path: str,
    options: InstallOptions,
    result: RunResult,
    exclude: ExcludePredicate | None = None,
) -> None:
    """Install every regular file below a source directory.

    Args:
        path: Directory relative to the asset root
        options: Resolved install options
        result: Run accumulator updated in place
        exclude: Predicate over paths relative to *path*; matching files are
            ignored. Defaults to the option's ``exclude_dirs``.
    """
    src_dir = options.source_root / path
    if not src_dir.is_dir():
        return

    if exclude is None:
        exclude = cache_dir_filter(options.exclude_dirs)

    for file in sorted(src_dir.rglob("*")):
        if not file.is_file():
            continue
        relative = file.relative_to(src_dir)
        if exclude(relative):
            continue
        copy_asset(file.relative_to(options.source_root).as_posix(), options, result)


def install_group(group: AssetGroup, options: InstallOptions, result: RunResult) -> None:
    """Install one asset group according to its kind."""
    logger.info("Installing group %s", group.name)
    if group.kind == GroupKind.FILES:
        copy_files(group, options, result)
    else:
        copy_tree(group.path, options, result)
