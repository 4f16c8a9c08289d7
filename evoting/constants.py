"""
eVoting Engine Constants

This module consolidates the global constants and environment configuration
used by the governance engine. Constants are organized by category for easy
reference and maintenance.
"""
import ast
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

ENGINE_DEFAULTS = {
    'EVOTING_MIN_PROPOSAL_DURATION':   '1440',
    'EVOTING_LOCK_PERIOD':             '1440',
    'EVOTING_MIN_REWARD_POOL':         '0',
    'EVOTING_REPUTATION_PER_PROPOSAL': '10',
    'EVOTING_REPUTATION_PER_VOTE':     '1',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# ==================================================================================
# PROTOCOL CONSTANTS
# ==================================================================================
# Maximum proposal description length (characters), fixed by the contract
MAX_DESCRIPTION_LENGTH = 500


# ==================================================================================
# ERROR CODES
# ==================================================================================
# Mirrors the contract's (err uNNN) values
ERR_PROPOSAL_NOT_FOUND = 100
ERR_VOTING_CLOSED = 101
ERR_ALREADY_VOTED = 102
ERR_INSUFFICIENT_STAKE = 103
ERR_INVALID_DEADLINE = 104
ERR_UNAUTHORIZED = 105
ERR_PROPOSAL_ACTIVE = 106
ERR_PROPOSAL_NOT_FINALIZED = 107
ERR_TRANSFER_FAILED = 108
ERR_ALREADY_CLAIMED = 109
ERR_DISTRIBUTION_UNDEFINED = 110
ERR_INVALID_DESCRIPTION = 111
ERR_INVALID_REWARD_POOL = 112
ERR_INVALID_POINTS = 113


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__

class ConfigInt(int):
    """
    Int subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = ENGINE_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        return ast.literal_eval(s.title())
    return v

def parse_int(v):
    """Convert a plain decimal string into int, leaving anything else untouched."""
    if not isinstance(v, str):
        return v
    s = v.strip()
    if s.lstrip("-").isdigit():
        return int(s)
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    elif key in ENGINE_DEFAULTS:
        parsed = parse_int(value_raw)
        if not isinstance(parsed, int):
            # Unparseable override falls back to the shipped default
            parsed = int(default_raw)
        namespace[key] = ConfigInt(parsed, int(default_raw))
    else:
        namespace[key] = ConfigString(value_raw, default_val)
