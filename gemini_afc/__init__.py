"""
Gemini Automatic Function Calling

Runs the function calls a Gemini model requests against local handlers and
feeds the results back until the model produces a final answer.
"""

__version__ = "0.1.0"

from .models import ContinuationFailure, ConfigurationError, GeminiAFCError
from .tools import (
    AFCConfig,
    AFCResult,
    CallDescriptor,
    Failure,
    FailureKind,
    Success,
    build_function_response_turn,
    build_responses,
    config,
    create_registry,
    execute,
    execute_all,
    execute_all_parallel,
    extract_function_calls,
    extract_model_turn,
    has_function_calls,
    loop,
    loop_async,
)

__all__ = [
    '__version__',
    'AFCConfig',
    'AFCResult',
    'CallDescriptor',
    'ConfigurationError',
    'ContinuationFailure',
    'Failure',
    'FailureKind',
    'GeminiAFCError',
    'Success',
    'build_function_response_turn',
    'build_responses',
    'config',
    'create_registry',
    'execute',
    'execute_all',
    'execute_all_parallel',
    'extract_function_calls',
    'extract_model_turn',
    'has_function_calls',
    'loop',
    'loop_async',
]
