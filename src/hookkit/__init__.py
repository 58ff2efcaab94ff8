"""HookKit: non-destructive installer for Claude Code observability hooks."""

__version__ = "0.1.0"
__author__ = "HookKit Contributors"
__description__ = "Non-destructive installer for Claude Code observability hooks"

from .installer import run_install
from .models import InstallOptions, MergeStatus, OptionalGroup, RunResult
from .settings import merge_settings

__all__ = [
    "InstallOptions",
    "MergeStatus",
    "OptionalGroup",
    "RunResult",
    "merge_settings",
    "run_install",
]
