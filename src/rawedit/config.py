"""Editor configuration.

Editing behaviour is fixed; the environment only switches on diagnostics
(``RAWEDIT_LOG`` / ``RAWEDIT_LOG_LEVEL``). Stdout is the editing surface, so
logs always go to a file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_WELCOME_MESSAGE = "type CTRL + q and give me text"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class EditorConfig:
    """Static editor settings."""

    welcome_message: str = DEFAULT_WELCOME_MESSAGE
    # Filename characters shown in the status bar.
    status_filename_width: int = 20
    # The size indicator is an estimate: rows times this many bytes.
    bytes_per_line: int = 80
    log_path: str | None = None
    log_level: str = "info"


def load_config(environ: Mapping[str, str] | None = None) -> EditorConfig:
    """Build an :class:`EditorConfig` from defaults plus the environment."""
    env = os.environ if environ is None else environ
    config = EditorConfig()
    log_path = env.get("RAWEDIT_LOG", "")
    if log_path:
        config.log_path = log_path
    log_level = env.get("RAWEDIT_LOG_LEVEL", "")
    if log_level:
        config.log_level = log_level.lower()
    return config
