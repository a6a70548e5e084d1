"""
Configuration Module Entry Point
Exports all configuration items for easy import by other modules.
"""

from .settings import *

# Explicitly export main configuration items (for IDE autocomplete and type checking)
__all__ = [
    # Log Configuration
    'DEBUG_LOGS_ENABLED',
    'FUNCTION_CALLING_DEBUG',
    'LOGGER_NAME',

    # Automatic Function Calling Defaults
    'AFC_ENABLED',
    'AFC_MAX_CALLS',
    'AFC_IGNORE_CALL_HISTORY',
    'AFC_PARALLEL_EXECUTION',
    'AFC_MAX_WORKERS',

    # Utility Functions
    'get_environment_variable',
    'get_boolean_env',
    'get_int_env',
]
