"""Install profile loading with schema validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jsonschema
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .models import OptionalGroup

PROFILE_FILE = ".hookkit.yaml"

PROFILE_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "HookKit install profile",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "source_app": {"type": "string", "pattern": "\\S"},
        "force": {"type": "boolean"},
        "dry_run": {"type": "boolean"},
        "extras": {
            "oneOf": [
                {"type": "string", "enum": ["all"]},
                {"type": "array", "items": {"type": "string"}},
            ],
        },
        "exclude_dirs": {"type": "array", "items": {"type": "string"}},
    },
}


class InstallProfile(BaseModel):
    """Per-project defaults for ``hookkit init``."""

    source_app: str | None = Field(default=None, description="App name override")
    force: bool = Field(default=False, description="Overwrite existing files")
    dry_run: bool = Field(default=False, description="Report without writing")
    extras: set[OptionalGroup] = Field(
        default_factory=set,
        description="Optional groups to install",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["__pycache__"],
        description="Directory names skipped during tree traversal",
    )

    @field_validator("extras", mode="before")
    @classmethod
    def expand_all(cls, v: Any) -> Any:
        """Accept ``all`` as shorthand for every optional group."""
        if v == "all":
            return set(OptionalGroup)
        return v


def load_profile(path: Path) -> InstallProfile:
    """Load and validate an install profile.

    Args:
        path: YAML profile file

    Returns:
        Validated profile; an empty file yields the defaults

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Failed to parse profile YAML {path}: {e}"
        raise ConfigError(msg, details={"path": str(path)}) from e
    except OSError as e:
        msg = f"Failed to read profile {path}: {e}"
        raise ConfigError(msg, details={"path": str(path)}) from e

    if data is None:
        data = {}

    try:
        jsonschema.validate(data, PROFILE_SCHEMA)
    except jsonschema.ValidationError as e:
        msg = f"Profile {path} is invalid: {e.message}"
        raise ConfigError(
            msg,
            details={"path": str(path), "field": list(e.absolute_path)},
        ) from e

    try:
        return InstallProfile.model_validate(data)
    except ValidationError as e:
        msg = f"Profile {path} is invalid: {e}"
        raise ConfigError(msg, details={"path": str(path)}) from e


def discover_profile(project: Path) -> Path | None:
    """Return the project's profile file if it has one."""
    candidate = project / PROFILE_FILE
    if candidate.is_file():
        return candidate
    return None
