"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

OutputFormat = Literal["terminal", "json"]
LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

OUTPUT_FORMATS = ("terminal", "json")
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StatusConfig:
    entry_limit: int = 0  # 0 = unbounded
    no_optional_locks: bool = True

    @property
    def limit(self) -> Optional[int]:
        """Entry limit as understood by the parser (None = unbounded)."""
        return self.entry_limit if self.entry_limit > 0 else None


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class GitConfig:
    executable: str = "git"
    timeout: int = 30


@dataclass
class LoggingConfig:
    level: LogLevel = "WARNING"


@dataclass
class GitStateConfig:
    version: str = "1.0"
    status: StatusConfig = field(default_factory=StatusConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    git: GitConfig = field(default_factory=GitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
