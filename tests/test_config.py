"""
Configuration Test Suite

Covers the dotenv-backed constants and the TOML loader with environment
overrides.
"""

import os
import sys

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from evoting import constants
from evoting.config import GovernanceConfig, load_config


_ENV_KEYS = (
    "EVOTING_CONFIG",
    "EVOTING_MIN_PROPOSAL_DURATION",
    "EVOTING_LOCK_PERIOD",
    "EVOTING_MIN_REWARD_POOL",
    "EVOTING_REPUTATION_PER_PROPOSAL",
    "EVOTING_REPUTATION_PER_VOTE",
    "EVOTING_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConstants:
    """Config wrappers and parsing helpers."""

    def test_parse_bool(self):
        assert constants.parse_bool(" true ") is True
        assert constants.parse_bool("FALSE") is False
        assert constants.parse_bool("1440") == "1440"
        assert constants.parse_bool("") == ""

    def test_parse_int(self):
        assert constants.parse_int("1440") == 1440
        assert constants.parse_int(" -3 ") == -3
        assert constants.parse_int("abc") == "abc"

    def test_config_string_default(self):
        s = constants.ConfigString("DEBUG", "INFO")
        assert s == "DEBUG"
        assert s.default() == "INFO"

    def test_config_bool(self):
        b = constants.ConfigBool(False, True)
        assert b == False  # noqa: E712
        assert str(b) == "False"
        assert b.default() is True

    def test_config_int(self):
        i = constants.ConfigInt(10, 1440)
        assert i + 1 == 11
        assert i.default() == 1440

    def test_engine_defaults_are_ints(self):
        assert isinstance(constants.EVOTING_MIN_PROPOSAL_DURATION, int)
        assert isinstance(constants.EVOTING_LOCK_PERIOD, int)

    def test_error_codes(self):
        assert constants.ERR_PROPOSAL_NOT_FOUND == 100
        assert constants.ERR_TRANSFER_FAILED == 108


class TestGovernanceConfig:
    """TOML loading, env overrides and validation."""

    def test_defaults_when_file_missing(self, tmp_path):
        config = GovernanceConfig.from_file(tmp_path / "missing.toml")
        assert config.governance.max_description_length == 500
        assert config.logging.level == "INFO"

    def test_load_from_toml(self, tmp_path):
        path = tmp_path / "evoting.toml"
        path.write_text(
            "[governance]\n"
            "min_proposal_duration = 20\n"
            "lock_period = 7\n"
            "min_reward_pool = 100\n"
            "\n"
            "[reputation]\n"
            "per_vote = 3\n"
            "\n"
            "[logging]\n"
            "level = \"debug\"\n"
        )
        config = GovernanceConfig.from_file(path)
        assert config.governance.min_proposal_duration == 20
        assert config.governance.lock_period == 7
        assert config.governance.min_reward_pool == 100
        assert config.reputation.per_vote == 3
        assert config.logging.level == "DEBUG"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "evoting.toml"
        path.write_text("[governance]\nlock_period = 7\n")
        monkeypatch.setenv("EVOTING_LOCK_PERIOD", "99")
        monkeypatch.setenv("EVOTING_REPUTATION_PER_PROPOSAL", "0")
        config = GovernanceConfig.from_file(path)
        assert config.governance.lock_period == 99
        assert config.reputation.per_proposal == 0

    def test_load_config_uses_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text("[governance]\nmin_proposal_duration = 5\n")
        monkeypatch.setenv("EVOTING_CONFIG", str(path))
        assert load_config().governance.min_proposal_duration == 5

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.toml"
        env_path.write_text("[governance]\nmin_proposal_duration = 5\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("[governance]\nmin_proposal_duration = 6\n")
        monkeypatch.setenv("EVOTING_CONFIG", str(env_path))
        assert load_config(str(explicit)).governance.min_proposal_duration == 6

    @pytest.mark.parametrize("section,body,match", [
        ("governance", "lock_period = -1", "lock_period"),
        ("governance", "min_reward_pool = -5", "min_reward_pool"),
        ("governance", "max_description_length = 501", "max_description_length"),
        ("reputation", "per_vote = -1", "Reputation"),
        ("logging", "level = \"LOUD\"", "log level"),
    ])
    def test_validation(self, tmp_path, section, body, match):
        path = tmp_path / "bad.toml"
        path.write_text(f"[{section}]\n{body}\n")
        with pytest.raises(ValueError, match=match):
            GovernanceConfig.from_file(path)

    def test_to_dict(self):
        d = GovernanceConfig().to_dict()
        assert set(d) == {"governance", "reputation", "logging"}
        assert d["governance"]["max_description_length"] == 500
