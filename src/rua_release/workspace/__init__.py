"""Workspace reset step."""

from rua_release.workspace.reset import ResetResult, reset_workspace

__all__ = ["ResetResult", "reset_workspace"]
