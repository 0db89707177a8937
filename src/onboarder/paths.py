"""Unified path constants for onboarder.

All data is stored under the user's ~/.onboarder directory:
- ~/.onboarder/config.json   # optional user configuration
- ~/.onboarder/logs/         # per-run transcripts
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

# 基础目录（用户主目录下）
BASE_DIR = Path.home() / ".onboarder"

USER_CONFIG_PATH = BASE_DIR / "config.json"
LOGS_DIR = BASE_DIR / "logs"


def get_logs_dir(override: Optional[str] = None) -> Path:
    """获取日志目录路径."""
    logs_dir = Path(override).expanduser() if override else LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def new_transcript_path(logs_dir: Path, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"onboard_{stamp}.log"
