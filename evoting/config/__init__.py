"""
eVoting Configuration

Loads evoting.toml at startup. Environment variables override TOML values.
"""

from .loader import (
    GovernanceConfig,
    GovernanceSectionConfig,
    LoggingSectionConfig,
    ReputationSectionConfig,
    load_config,
)

__all__ = [
    "GovernanceConfig",
    "GovernanceSectionConfig",
    "LoggingSectionConfig",
    "ReputationSectionConfig",
    "load_config",
]
