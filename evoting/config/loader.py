"""
eVoting TOML Configuration Loader

Loads evoting.toml with environment variable overrides. Each [section] maps
to a dataclass with ``from_dict`` and ``apply_env``.

Environment variable mapping:
    [governance] min_proposal_duration → EVOTING_MIN_PROPOSAL_DURATION
    [governance] lock_period           → EVOTING_LOCK_PERIOD
    [governance] min_reward_pool       → EVOTING_MIN_REWARD_POOL
    [reputation] per_proposal          → EVOTING_REPUTATION_PER_PROPOSAL
    [reputation] per_vote              → EVOTING_REPUTATION_PER_VOTE
    [logging] level                    → EVOTING_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import (
    EVOTING_LOCK_PERIOD,
    EVOTING_MIN_PROPOSAL_DURATION,
    EVOTING_MIN_REWARD_POOL,
    EVOTING_REPUTATION_PER_PROPOSAL,
    EVOTING_REPUTATION_PER_VOTE,
    MAX_DESCRIPTION_LENGTH,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Section dataclasses
# ---------------------------------------------------------------------------

@dataclass
class GovernanceSectionConfig:
    """[governance] section."""
    min_proposal_duration: int = int(EVOTING_MIN_PROPOSAL_DURATION)
    lock_period: int = int(EVOTING_LOCK_PERIOD)
    min_reward_pool: int = int(EVOTING_MIN_REWARD_POOL)
    max_description_length: int = MAX_DESCRIPTION_LENGTH

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernanceSectionConfig":
        return cls(
            min_proposal_duration=data.get("min_proposal_duration", int(EVOTING_MIN_PROPOSAL_DURATION)),
            lock_period=data.get("lock_period", int(EVOTING_LOCK_PERIOD)),
            min_reward_pool=data.get("min_reward_pool", int(EVOTING_MIN_REWARD_POOL)),
            max_description_length=data.get("max_description_length", MAX_DESCRIPTION_LENGTH),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("EVOTING_MIN_PROPOSAL_DURATION"):
            self.min_proposal_duration = int(v)
        if v := os.environ.get("EVOTING_LOCK_PERIOD"):
            self.lock_period = int(v)
        if v := os.environ.get("EVOTING_MIN_REWARD_POOL"):
            self.min_reward_pool = int(v)


@dataclass
class ReputationSectionConfig:
    """[reputation] section: points awarded per participation event."""
    per_proposal: int = int(EVOTING_REPUTATION_PER_PROPOSAL)
    per_vote: int = int(EVOTING_REPUTATION_PER_VOTE)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReputationSectionConfig":
        return cls(
            per_proposal=data.get("per_proposal", int(EVOTING_REPUTATION_PER_PROPOSAL)),
            per_vote=data.get("per_vote", int(EVOTING_REPUTATION_PER_VOTE)),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("EVOTING_REPUTATION_PER_PROPOSAL"):
            self.per_proposal = int(v)
        if v := os.environ.get("EVOTING_REPUTATION_PER_VOTE"):
            self.per_vote = int(v)


@dataclass
class LoggingSectionConfig:
    """[logging] section."""
    level: str = "INFO"
    file_output: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingSectionConfig":
        return cls(
            level=str(data.get("level", "INFO")).upper(),
            file_output=data.get("file_output", False),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("EVOTING_LOG_LEVEL"):
            self.level = v.upper()


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass
class GovernanceConfig:
    """Complete engine configuration."""
    governance: GovernanceSectionConfig = field(default_factory=GovernanceSectionConfig)
    reputation: ReputationSectionConfig = field(default_factory=ReputationSectionConfig)
    logging: LoggingSectionConfig = field(default_factory=LoggingSectionConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernanceConfig":
        return cls(
            governance=GovernanceSectionConfig.from_dict(data.get("governance", {})),
            reputation=ReputationSectionConfig.from_dict(data.get("reputation", {})),
            logging=LoggingSectionConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "GovernanceConfig":
        """
        Load from a TOML file, then apply environment overrides.

        A missing file yields the defaults (still env-overridden).
        """
        path = Path(path)
        if path.exists():
            with open(path, "rb") as f:
                data = tomli.load(f)
            logger.info(f"Loaded configuration from {path}")
        else:
            logger.debug(f"Config file {path} not found, using defaults")
            data = {}

        config = cls.from_dict(data)
        config.apply_env()
        config.validate()
        return config

    def apply_env(self) -> None:
        self.governance.apply_env()
        self.reputation.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ValueError: on invalid config
        """
        g = self.governance
        if g.min_proposal_duration < 0:
            raise ValueError("min_proposal_duration must be >= 0")
        if g.lock_period < 0:
            raise ValueError("lock_period must be >= 0")
        if g.min_reward_pool < 0:
            raise ValueError("min_reward_pool must be >= 0")
        if not 1 <= g.max_description_length <= MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"max_description_length must be 1-{MAX_DESCRIPTION_LENGTH}"
            )
        if self.reputation.per_proposal < 0 or self.reputation.per_vote < 0:
            raise ValueError("Reputation awards must be >= 0")
        if self.logging.level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.logging.level}")
        return True

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "governance": {
                "min_proposal_duration": self.governance.min_proposal_duration,
                "lock_period": self.governance.lock_period,
                "min_reward_pool": self.governance.min_reward_pool,
                "max_description_length": self.governance.max_description_length,
            },
            "reputation": {
                "per_proposal": self.reputation.per_proposal,
                "per_vote": self.reputation.per_vote,
            },
            "logging": {
                "level": self.logging.level,
                "file_output": self.logging.file_output,
            },
        }


# -----------------------------------------------------------------------
# Convenience function
# -----------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> GovernanceConfig:
    """
    Load engine configuration.

    Resolution order:
        1. Explicit *path* argument
        2. EVOTING_CONFIG env var
        3. ./evoting.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("EVOTING_CONFIG", "evoting.toml")

    return GovernanceConfig.from_file(path)
