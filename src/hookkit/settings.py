"""Additive merge of the bundled settings document into a target project."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

import jsonschema

from .exceptions import SourceSettingsError, TargetSettingsError
from .models import MergeStatus

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
APP_NAME_KEY = "OBSERVABILITY_APP_NAME"

SOURCE_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "HookKit bundled settings",
    "type": "object",
    "properties": {
        "hooks": {"type": "object"},
        "env": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
    },
}


def load_source_settings(path: Path) -> dict[str, Any]:
    """Load and validate the settings document shipped with the assets.

    Raises:
        SourceSettingsError: If the file is missing, unreadable or malformed
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        msg = f"Source settings not found: {path}"
        raise SourceSettingsError(msg, details={"path": str(path)}) from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = f"{path} contains invalid JSON: {e}"
        raise SourceSettingsError(msg, details={"path": str(path)}) from e
    except OSError as e:
        msg = f"Failed to read source settings {path}: {e}"
        raise SourceSettingsError(msg, details={"path": str(path)}) from e

    try:
        jsonschema.validate(data, SOURCE_SCHEMA)
    except jsonschema.ValidationError as e:
        msg = f"Source settings {path} are malformed: {e.message}"
        raise SourceSettingsError(
            msg,
            details={"path": str(path), "field": list(e.absolute_path)},
        ) from e

    return data


def load_target_settings(path: Path) -> dict[str, Any]:
    """Load the target settings document, or an empty one if it is absent.

    An existing file that cannot be parsed is an error rather than being
    treated as absent, since rewriting it would discard its content.

    Raises:
        TargetSettingsError: If the file exists but is not a JSON object
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = f"{path} contains invalid JSON: {e}"
        raise TargetSettingsError(msg, details={"path": str(path)}) from e

    if not isinstance(data, dict):
        msg = f"{path} must contain a JSON object, found {type(data).__name__}"
        raise TargetSettingsError(msg, details={"path": str(path)})

    return data


def _canonical(document: dict[str, Any]) -> str:
    return json.dumps(document, sort_keys=True)


def _check_object_fields(document: dict[str, Any], path: Path | None) -> None:
    for key in ("hooks", "env"):
        if key in document and not isinstance(document[key], dict):
            msg = f"'{key}' in {path or 'target settings'} must be an object"
            details: dict[str, Any] = {"field": key}
            if path is not None:
                details["path"] = str(path)
            raise TargetSettingsError(msg, details=details)


def merge_documents(
    source: dict[str, Any],
    target: dict[str, Any],
    source_app: str,
    force: bool = False,
    target_path: Path | None = None,
) -> bool:
    """Merge recognized fields of *source* into *target* in place.

    Hook types and the app-name variable are only added when missing unless
    *force* is set. Hook values are copied whole, never deep-merged.

    Args:
        source: Bundled settings document
        target: Project settings document, mutated in place
        source_app: Value for the app-name environment variable
        force: Overwrite values the target already has
        target_path: Used in error messages only

    Returns:
        Whether the target changed
    """
    _check_object_fields(target, target_path)
    original = _canonical(target)

    target_hooks = target.setdefault("hooks", {})
    for hook_type, hook_value in source.get("hooks", {}).items():
        if force or hook_type not in target_hooks:
            target_hooks[hook_type] = hook_value

    # A null statusLine is copied too; it means "no status line".
    if force or "statusLine" not in target:
        target["statusLine"] = source.get("statusLine")

    target_env = target.setdefault("env", {})
    if force or APP_NAME_KEY not in target_env:
        target_env[APP_NAME_KEY] = source_app

    return _canonical(target) != original


def _file_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_settings(path: Path, document: dict[str, Any]) -> None:
    """Replace *path* with pretty-printed JSON, never leaving a partial file.

    A symlinked *path* is written through to its target, and the file keeps
    its permission bits (new files follow the umask).
    """
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(document, indent=2) + "\n"
    mode = _file_mode(path)
    fd, temp_name = tempfile.mkstemp(prefix=".tmp-", suffix=".json", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    finally:
        if os.path.exists(temp_name):
            os.unlink(temp_name)


def merge_settings(
    source_path: Path,
    target_path: Path,
    source_app: str,
    dry_run: bool = False,
    force: bool = False,
) -> MergeStatus:
    """Merge the bundled settings document into the target project.

    Args:
        source_path: Bundled settings document
        target_path: Project settings document, created if absent
        source_app: Value for the app-name environment variable
        dry_run: Compute the outcome without writing
        force: Overwrite values the target already has

    Returns:
        ``MergeStatus.APPLIED`` when the target changed (or would change in
        dry-run), ``MergeStatus.UNCHANGED`` when nothing needed doing

    Raises:
        SourceSettingsError: If the bundled document is missing or malformed
        TargetSettingsError: If the existing target document is malformed
        OSError: If the merged document cannot be written
    """
    source = load_source_settings(source_path)
    target = load_target_settings(target_path)

    if not merge_documents(source, target, source_app, force=force, target_path=target_path):
        logger.info("%s already up to date", target_path)
        return MergeStatus.UNCHANGED

    if dry_run:
        logger.info("[dry-run] %s (merge)", SETTINGS_FILE)
    else:
        write_settings(target_path, target)
        logger.info("Merged settings into %s", target_path)

    return MergeStatus.APPLIED
