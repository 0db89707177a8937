"""Logging helpers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"

_LOGGING_CONFIGURED = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    global _LOGGING_CONFIGURED
    if not _LOGGING_CONFIGURED:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        _LOGGING_CONFIGURED = True
    return logging.getLogger(name)


def configure_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    transcript_logger: str = "onboarder.transcript",
) -> None:
    """Set up logging for a CLI run.

    Diagnostics go to stderr (warnings only unless ``verbose``). When
    ``log_file`` is given, diagnostics and the console transcript are both
    written there in full.
    """
    global _LOGGING_CONFIGURED

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(stream_handler)

    # 控制台输出已由 rich 渲染，转录只写入文件
    transcript = logging.getLogger(transcript_logger)
    for handler in list(transcript.handlers):
        transcript.removeHandler(handler)
        handler.close()
    transcript.propagate = False
    transcript.setLevel(logging.INFO)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)
        transcript.addHandler(file_handler)
    else:
        transcript.addHandler(logging.NullHandler())

    _LOGGING_CONFIGURED = True
