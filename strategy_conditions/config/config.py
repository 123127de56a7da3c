"""
Configuration management for the condition algebra.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from typing import List, Optional
from pathlib import Path
from dotenv import load_dotenv

from .constants import CANONICAL_TIMEFRAME_ID_PREFIX


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = "logs"
    # File output is opt-in; the core does no I/O unless asked to
    log_to_file: bool = False


@dataclass
class EditingConfig:
    """
    Condition tree editing behaviour.

    prune_empty_groups:
        When True, groups left without children by a removal or a move are
        dropped from the tree (the root group is never dropped). When False
        (default) empty groups stay and render as "No conditions defined".
    """
    prune_empty_groups: bool = False


@dataclass
class MigrationConfig:
    """
    Timeframe migration behaviour.

    timeframe_id_prefix:
        Prefix that marks an already-canonical timeframe ID.
    scan_node_data:
        Walk node data outside of the known condition keys looking for
        expression-shaped objects. Disable to only touch condition trees.
    """
    timeframe_id_prefix: str = CANONICAL_TIMEFRAME_ID_PREFIX
    scan_node_data: bool = True


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables and provides
    typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=True)

        self.log = self._load_log_config()
        self.editing = self._load_editing_config()
        self.migration = self._load_migration_config()

        self._initialized = True

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("CONDITIONS_LOG_LEVEL", "INFO"),
            log_dir=os.getenv("CONDITIONS_LOG_DIR", "logs"),
            log_to_file=_env_flag("CONDITIONS_LOG_TO_FILE", "false"),
        )

    def _load_editing_config(self) -> EditingConfig:
        """Load tree editing configuration from environment."""
        return EditingConfig(
            prune_empty_groups=_env_flag("CONDITIONS_PRUNE_EMPTY_GROUPS", "false"),
        )

    def _load_migration_config(self) -> MigrationConfig:
        """Load migration configuration from environment."""
        return MigrationConfig(
            timeframe_id_prefix=os.getenv(
                "CONDITIONS_TIMEFRAME_ID_PREFIX", CANONICAL_TIMEFRAME_ID_PREFIX
            ),
            scan_node_data=_env_flag("CONDITIONS_MIGRATION_SCAN_NODE_DATA", "true"),
        )

    def reload(self, env_file: str = ".env"):
        """Reload configuration from environment."""
        self._initialized = False
        Config._instance = None
        return Config(env_file)

    def validate(self) -> tuple[bool, List[str]]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid, list of error/warning messages)
        """
        errors = []
        warnings = []

        if self.log.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(
                f"INVALID: CONDITIONS_LOG_LEVEL={self.log.level!r}. "
                "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )

        prefix = self.migration.timeframe_id_prefix
        if not prefix:
            errors.append("INVALID: CONDITIONS_TIMEFRAME_ID_PREFIX must not be empty.")
        elif prefix != CANONICAL_TIMEFRAME_ID_PREFIX:
            warnings.append(
                f"Timeframe ID prefix is {prefix!r}; documents migrated with the "
                f"default prefix {CANONICAL_TIMEFRAME_ID_PREFIX!r} will be re-migrated."
            )

        return len(errors) == 0, errors + warnings

    def summary_short(self) -> str:
        """Generate a short one-line configuration summary."""
        prune = "prune" if self.editing.prune_empty_groups else "keep"
        return (
            f"log={self.log.level.upper()} | empty groups={prune} | "
            f"tf prefix={self.migration.timeframe_id_prefix}"
        )


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)
