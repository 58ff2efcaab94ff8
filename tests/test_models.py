"""Tests for HookKit data models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hookkit.models import AssetGroup, GroupKind, InstallOptions, OptionalGroup, RunResult


class TestAssetGroup:
    """Test AssetGroup validation."""

    def test_defaults(self) -> None:
        """Test that groups default to mandatory recursive trees."""
        group = AssetGroup(name="status lines", path="status_lines")
        assert group.kind == GroupKind.TREE
        assert group.mandatory
        assert group.exclude == frozenset()

    def test_optional_group(self) -> None:
        """Test an optional group selector."""
        group = AssetGroup(name="skills", path="skills", optional="skills")
        assert group.optional == OptionalGroup.SKILLS
        assert not group.mandatory

    @pytest.mark.parametrize("path", ["/etc", "../outside", "hooks/../../x"])
    def test_path_must_stay_inside_root(self, path: str) -> None:
        """Test that escaping paths are rejected."""
        with pytest.raises(ValidationError, match="relative to the asset root"):
            AssetGroup(name="bad", path=path)


class TestInstallOptions:
    """Test InstallOptions validation."""

    def test_defaults(self) -> None:
        """Test default flags and exclusions."""
        options = InstallOptions(
            source_root=Path("src/.claude"),
            target_root=Path("repo/.claude"),
            source_app="svc",
        )
        assert options.dry_run is False
        assert options.force is False
        assert options.extras == set()
        assert options.exclude_dirs == frozenset({"__pycache__"})

    def test_extras_from_strings(self) -> None:
        """Test that group names are coerced to enum members."""
        options = InstallOptions(
            source_root=Path("a"),
            target_root=Path("b"),
            source_app="svc",
            extras=["agents", "output-styles"],
        )
        assert options.extras == {OptionalGroup.AGENTS, OptionalGroup.OUTPUT_STYLES}

    def test_blank_source_app(self) -> None:
        """Test that the app name cannot be blank."""
        with pytest.raises(ValidationError, match="source_app must not be empty"):
            InstallOptions(source_root=Path("a"), target_root=Path("b"), source_app="  ")


class TestRunResult:
    """Test RunResult bookkeeping."""

    def test_records_in_discovery_order(self) -> None:
        """Test counters and ordered path lists."""
        result = RunResult()
        result.record_installed("settings.json")
        result.record_skipped("hooks/b.py")
        result.record_skipped("hooks/a.py")

        assert result.installed == 1
        assert result.skipped == 2
        assert result.skipped_files == ["hooks/b.py", "hooks/a.py"]
        assert result.total == 3
