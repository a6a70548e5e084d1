# Function call extraction and turn building
from .function_calling import (
    CALL_ID_PREFIX,
    CallDescriptor,
    extract_function_calls,
    has_function_calls,
    extract_model_turn,
    extract_model_content_for_api,
    build_function_response_turn,
)

# Execution
from .executor import (
    FailureKind,
    Success,
    Failure,
    ExecutionResult,
    DirectHandler,
    IndirectHandler,
    FunctionRegistry,
    create_registry,
    execute,
    execute_all,
    execute_all_parallel,
    execute_async,
    execute_all_async,
    build_responses,
)

# Automatic function calling loop
from .automatic_function_calling import (
    AFCConfig,
    AFCResult,
    LoopState,
    config,
    should_continue,
    track_history,
    loop,
    loop_async,
)

__all__ = [
    # Extraction
    'CALL_ID_PREFIX',
    'CallDescriptor',
    'extract_function_calls',
    'has_function_calls',
    'extract_model_turn',
    'extract_model_content_for_api',
    'build_function_response_turn',

    # Execution
    'FailureKind',
    'Success',
    'Failure',
    'ExecutionResult',
    'DirectHandler',
    'IndirectHandler',
    'FunctionRegistry',
    'create_registry',
    'execute',
    'execute_all',
    'execute_all_parallel',
    'execute_async',
    'execute_all_async',
    'build_responses',

    # Loop
    'AFCConfig',
    'AFCResult',
    'LoopState',
    'config',
    'should_continue',
    'track_history',
    'loop',
    'loop_async',
]
