"""Workspace path resolution."""

from .resolver import WorkspacePaths, resolve_workspace, windows_to_wsl_path

__all__ = ["WorkspacePaths", "resolve_workspace", "windows_to_wsl_path"]
