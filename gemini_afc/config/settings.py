"""
Main Settings Configuration Module
Contains runtime settings for automatic function calling, read from environment
variables (and an optional .env file).
"""

import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def get_environment_variable(key: str, default: str = '') -> str:
    """Get environment variable value"""
    return os.environ.get(key, default)


def get_boolean_env(key: str, default: bool = False) -> bool:
    """Get boolean environment variable"""
    value = os.environ.get(key, '').lower()
    if default:
        return value not in ('false', '0', 'no', 'off')
    else:
        return value in ('true', '1', 'yes', 'on')


def get_int_env(key: str, default: int = 0) -> int:
    """Get integer environment variable"""
    try:
        return int(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


# --- Global Log Control Configuration ---
DEBUG_LOGS_ENABLED = get_boolean_env('DEBUG_LOGS_ENABLED', False)
FUNCTION_CALLING_DEBUG = get_boolean_env('FUNCTION_CALLING_DEBUG', False)

# --- Logger Names ---
LOGGER_NAME = get_environment_variable('AFC_LOGGER_NAME', 'GeminiAFC')

# --- Automatic Function Calling Defaults ---
AFC_ENABLED = get_boolean_env('AFC_ENABLED', True)
AFC_MAX_CALLS = get_int_env('AFC_MAX_CALLS', 10)
AFC_IGNORE_CALL_HISTORY = get_boolean_env('AFC_IGNORE_CALL_HISTORY', False)
AFC_PARALLEL_EXECUTION = get_boolean_env('AFC_PARALLEL_EXECUTION', False)
# 0 means one worker per call (no ceiling)
AFC_MAX_WORKERS = get_int_env('AFC_MAX_WORKERS', 0)
