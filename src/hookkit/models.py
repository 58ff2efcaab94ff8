"""Core data models for the HookKit installer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class OptionalGroup(str, Enum):
    """Asset categories installed only when selected."""

    AGENTS = "agents"
    COMMANDS = "commands"
    SKILLS = "skills"
    OUTPUT_STYLES = "output-styles"


class GroupKind(str, Enum):
    """How the files of an asset group are enumerated."""

    FILES = "files"  # top level of one directory, filtered by glob
    TREE = "tree"  # whole subtree


class MergeStatus(str, Enum):
    """Outcome of a settings merge that did not fail."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"


class AssetGroup(BaseModel):
    """A named set of installable files below the asset root."""

    name: str = Field(..., description="Display name of the group")
    path: str = Field(..., description="Directory relative to the asset root")
    kind: GroupKind = Field(default=GroupKind.TREE, description="Enumeration mode")
    pattern: str = Field(default="*", description="Glob for flat file groups")
    exclude: frozenset[str] = Field(
        default_factory=frozenset,
        description="File names that are never installed",
    )
    optional: OptionalGroup | None = Field(
        default=None,
        description="Selector enabling this group, None when mandatory",
    )

    model_config = {"frozen": True}

    @field_validator("path")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        """Reject paths that escape the asset root."""
        candidate = Path(v)
        if candidate.is_absolute() or ".." in candidate.parts:
            msg = "Group path must be relative to the asset root"
            raise ValueError(msg)
        return v

    @property
    def mandatory(self) -> bool:
        """Whether the group is always installed."""
        return self.optional is None


class InstallOptions(BaseModel):
    """Resolved parameters for a single install run."""

    source_root: Path = Field(..., description="Asset root to install from")
    target_root: Path = Field(..., description="Configuration directory to install into")
    source_app: str = Field(..., description="Application name written to settings env")
    dry_run: bool = Field(default=False, description="Report without writing")
    force: bool = Field(default=False, description="Overwrite existing files")
    extras: set[OptionalGroup] = Field(
        default_factory=set,
        description="Optional groups to install",
    )
    exclude_dirs: frozenset[str] = Field(
        default=frozenset({"__pycache__"}),
        description="Directory names skipped during tree traversal",
    )

    @field_validator("source_app")
    @classmethod
    def validate_source_app(cls, v: str) -> str:
        """Require a non-blank application name."""
        if not v.strip():
            msg = "source_app must not be empty"
            raise ValueError(msg)
        return v


@dataclass
class RunResult:
    """Counters and path lists accumulated during one install run."""

    installed: int = 0
    skipped: int = 0
    installed_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)

    def record_installed(self, rel: str) -> None:
        """Count a path as installed (or, in dry-run, as would-be installed)."""
        self.installed += 1
        self.installed_files.append(rel)

    def record_skipped(self, rel: str) -> None:
        """Count a path as skipped because it already exists."""
        self.skipped += 1
        self.skipped_files.append(rel)

    @property
    def total(self) -> int:
        """Number of assets that were considered."""
        return self.installed + self.skipped
