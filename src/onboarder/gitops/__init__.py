"""Git operations helpers."""

from .manager import GitClient, GitCommandError, is_git_repository

__all__ = ["GitClient", "GitCommandError", "is_git_repository"]
