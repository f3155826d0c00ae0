"""
Runtime Settings

Process-level settings for the vertexdag runner, read from the environment.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class RuntimeSettings:
    """Runner configuration"""
    pipeline: Optional[Path] = None
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    @classmethod
    def from_env(cls, prefix: str = "VERTEXDAG") -> "RuntimeSettings":
        """Create settings from environment variables"""
        pipeline = os.getenv(f"{prefix}_PIPELINE")
        return cls(
            pipeline=Path(pipeline) if pipeline else None,
            log_level=os.getenv(f"{prefix}_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv(f"{prefix}_LOG_FORMAT", DEFAULT_LOG_FORMAT),
        )
