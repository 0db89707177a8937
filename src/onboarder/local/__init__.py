"""Local machine helpers: process execution, platform probing, environment refresh."""

from .environment import EnvironmentRefresher, combine_path
from .probe import Architecture, OperatingSystem, PlatformDetector, PlatformFacts
from .session import ProcessLaunchError, ProcessResult, ProcessRunner

__all__ = [
    "Architecture",
    "EnvironmentRefresher",
    "OperatingSystem",
    "PlatformDetector",
    "PlatformFacts",
    "ProcessLaunchError",
    "ProcessResult",
    "ProcessRunner",
    "combine_path",
]
