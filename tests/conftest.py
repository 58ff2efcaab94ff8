"""Shared fixtures for HookKit tests."""

import json
import tempfile
from pathlib import Path

import pytest

SOURCE_SETTINGS = {
    "hooks": {
        "PreToolUse": [
            {"matcher": "", "hooks": [{"type": "command", "command": "uv run .claude/hooks/pre_tool_use.py"}]},
        ],
        "Stop": [
            {"matcher": "", "hooks": [{"type": "command", "command": "uv run .claude/hooks/stop.py"}]},
        ],
    },
    "statusLine": {"type": "command", "command": "uv run .claude/status_lines/status_line.py"},
}

CORE_FILES = [
    "hooks/pre_tool_use.py",
    "hooks/stop.py",
    "hooks/utils/constants.py",
    "hooks/utils/llm/anth.py",
    "status_lines/status_line.py",
]

OPTIONAL_FILES = [
    "agents/reviewer.md",
    "commands/validate.md",
    "hooks/validators/check_paths.py",
    "skills/observe/SKILL.md",
    "output-styles/terse.md",
]


def write_file(path: Path, content: str) -> None:
    """Write *content* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def build_source_tree(root: Path) -> Path:
    """Populate a bundled .claude asset tree under *root*."""
    write_file(root / "settings.json", json.dumps(SOURCE_SETTINGS, indent=2))
    for rel in CORE_FILES + OPTIONAL_FILES:
        write_file(root / rel, f"# {rel}\n")
    write_file(root / "hooks" / "test_hitl.py", "# developer only\n")
    write_file(root / "hooks" / "README.md", "not a hook\n")
    (root / "hooks" / "utils" / "__pycache__").mkdir()
    (root / "hooks" / "utils" / "__pycache__" / "constants.cpython-312.pyc").write_bytes(b"\x00\x01")
    return root


@pytest.fixture
def source_root() -> Path:
    """Create a complete bundled asset tree."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield build_source_tree(Path(temp_dir) / "observability" / ".claude")


@pytest.fixture
def target_repo() -> Path:
    """Create an empty target repository."""
    with tempfile.TemporaryDirectory() as temp_dir:
        repo_path = Path(temp_dir) / "my-service"
        repo_path.mkdir()
        yield repo_path
