from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    quiet: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        level = env.get("ESRDECODE_LOG_LEVEL", "WARNING").strip().upper()
        if level not in LOG_LEVELS:
            level = "WARNING"
        quiet = env.get("ESRDECODE_QUIET", "").strip().lower() in ("1", "true", "yes", "on")
        return cls(log_level=level, quiet=quiet)
