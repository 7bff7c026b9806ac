"""Runtime settings for the symbolic engine."""

import logging
import os
from dataclasses import dataclass, field


@dataclass
class SymbolicConfig:
    """Central configuration; environment variables override defaults."""

    # Sums and products with more operands than this are reduced on the
    # worker pool, smaller ones inline.
    parallelism: int = field(default_factory=lambda: int(os.getenv("SYMBOLIC_PARALLELISM", "1000")))
    workers: int = field(default_factory=lambda: int(os.getenv("SYMBOLIC_WORKERS", "4")))

    log_level: str = field(default_factory=lambda: os.getenv("SYMBOLIC_LOG_LEVEL", "WARNING"))

    @classmethod
    def from_env(cls) -> "SymbolicConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of warnings."""
        warnings = []
        if self.parallelism < 1:
            warnings.append("SYMBOLIC_PARALLELISM < 1 - every reduction will use the worker pool")
        if self.workers < 1:
            warnings.append("SYMBOLIC_WORKERS < 1 - the worker pool cannot start")
        return warnings


config = SymbolicConfig.from_env()


def configure_logging(level=None):
    """Set up root logging for scripts; the library itself never does this."""
    logging.basicConfig(
        level=level or config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
