"""
Automatic Function Calling (AFC) Loop

Executes the function calls found in a Gemini response and keeps the
conversation going until the model answers without calling a function, or
until the call budget is spent.

How it works:
1. The caller sends the initial request (with tools) and passes the response in
2. If the response contains function calls, they run against the registry
3. The model's turn and a function response turn are appended to the contents
4. The caller-supplied continuation sends the contents and returns the next response
5. Repeat until no function calls remain or ``max_calls`` is reached

Usage:
```python
registry = create_registry(get_weather=lambda args: weather.get(args["location"]))

def continuation(contents, options):
    return client.generate_content(contents, **options)

result = loop(initial_response, contents, registry, config(max_calls=5), continuation)
final_response, call_count, history = result
```

The loop never raises for handler failures (they are reported to the model)
nor for continuation failures (the loop stops and returns a
``ContinuationFailure`` in place of the response).
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from gemini_afc.config.settings import (
    AFC_ENABLED,
    AFC_IGNORE_CALL_HISTORY,
    AFC_MAX_CALLS,
    AFC_MAX_WORKERS,
    AFC_PARALLEL_EXECUTION,
    FUNCTION_CALLING_DEBUG,
    LOGGER_NAME,
    get_boolean_env,
    get_int_env,
)
from gemini_afc.logging_utils.fc_debug import FCModule, get_fc_logger
from gemini_afc.models.exceptions import ConfigurationError, ContinuationFailure
from gemini_afc.tools.executor import (
    ExecutionResult,
    execute_all,
    execute_all_async,
    execute_all_parallel,
    execute_async,
)
from gemini_afc.tools.function_calling import (
    CallDescriptor,
    build_function_response_turn,
    extract_function_calls,
    extract_model_turn,
    has_function_calls,
)

logger = logging.getLogger(LOGGER_NAME)

fc_logger = get_fc_logger()


# =============================================================================
# Configuration Types
# =============================================================================


@dataclass(frozen=True)
class AFCConfig:
    """Configuration for one automatic function calling loop.

    Attributes:
        max_calls: Cap on the total number of executed calls across the loop.
        enabled: Kill-switch. When False the loop returns the response untouched.
        ignore_call_history: Count calls without retaining their descriptors.
        parallel_execution: Run the calls of one response concurrently.
        max_workers: Concurrency ceiling for parallel execution. None runs
            every call of a response at once.
    """

    max_calls: int = 10
    enabled: bool = True
    ignore_call_history: bool = False
    parallel_execution: bool = False
    max_workers: Optional[int] = None

    @classmethod
    def from_settings(cls) -> "AFCConfig":
        """Create configuration from environment settings.

        Raises:
            ConfigurationError: If AFC_MAX_CALLS or AFC_MAX_WORKERS is negative.
        """
        max_calls = get_int_env("AFC_MAX_CALLS", AFC_MAX_CALLS)
        if max_calls < 0:
            raise ConfigurationError(f"AFC_MAX_CALLS must be >= 0, got {max_calls}")

        max_workers = get_int_env("AFC_MAX_WORKERS", AFC_MAX_WORKERS)
        if max_workers < 0:
            raise ConfigurationError(f"AFC_MAX_WORKERS must be >= 0, got {max_workers}")

        return cls(
            max_calls=max_calls,
            enabled=get_boolean_env("AFC_ENABLED", AFC_ENABLED),
            ignore_call_history=get_boolean_env(
                "AFC_IGNORE_CALL_HISTORY", AFC_IGNORE_CALL_HISTORY
            ),
            parallel_execution=get_boolean_env(
                "AFC_PARALLEL_EXECUTION", AFC_PARALLEL_EXECUTION
            ),
            max_workers=max_workers or None,
        )


def config(**opts: Any) -> AFCConfig:
    """Create an AFC configuration.

    Examples:
        config()                                   # defaults, max_calls=10
        config(max_calls=5, parallel_execution=True)
        config(enabled=False)                      # disable AFC
    """
    return AFCConfig(**opts)


class LoopState(str, Enum):
    """States of the loop, used in debug logging."""

    AWAITING_DECISION = "awaiting_decision"
    EXECUTING = "executing"
    CONTINUING = "continuing"
    DONE = "done"


class AFCResult(NamedTuple):
    """Outcome of a loop: final response (or ContinuationFailure), calls executed, call history."""

    response: Any
    call_count: int
    history: List[CallDescriptor]

    @property
    def failed(self) -> bool:
        """True when the loop stopped because the continuation failed."""
        return isinstance(self.response, ContinuationFailure)

    def budget_exhausted(self, afc_config: AFCConfig) -> bool:
        """True when the loop stopped because the call budget was spent.

        A loop that used its last allowed call and then got a reply without
        function calls finished normally, so this is False.
        """
        return (
            not self.failed
            and self.call_count >= afc_config.max_calls
            and has_function_calls(self.response)
        )


Continuation = Callable[[List[Dict[str, Any]], Any], Any]


# =============================================================================
# Loop Decisions
# =============================================================================


def should_continue(response: Any, afc_config: AFCConfig, call_count: int) -> bool:
    """Whether the loop should run another batch of calls.

    True only if AFC is enabled, the call count is under ``max_calls`` and the
    response contains function calls.
    """
    return (
        afc_config.enabled
        and call_count < afc_config.max_calls
        and has_function_calls(response)
    )


def track_history(
    history: Sequence[CallDescriptor], calls: Sequence[CallDescriptor]
) -> List[CallDescriptor]:
    """Return a new history with ``calls`` appended."""
    return list(history) + list(calls)


def _log_transition(req_id: str, source: LoopState, target: LoopState, detail: str = "") -> None:
    if FUNCTION_CALLING_DEBUG:
        suffix = f" ({detail})" if detail else ""
        fc_logger.debug(FCModule.LOOP, f"[{req_id}] {source.value} -> {target.value}{suffix}")


def _advance(
    response: Any,
    calls: List[CallDescriptor],
    results: List[ExecutionResult],
    contents: List[Dict[str, Any]],
    call_count: int,
    history: List[CallDescriptor],
    afc_config: AFCConfig,
) -> Tuple[List[Dict[str, Any]], int, List[CallDescriptor]]:
    """Fold one executed batch into the contents, counter and history."""
    model_turn = extract_model_turn(response)
    function_turn = build_function_response_turn(calls, results)

    updated_contents = contents + [model_turn, function_turn]
    new_count = call_count + len(calls)
    new_history = history if afc_config.ignore_call_history else track_history(history, calls)
    return updated_contents, new_count, new_history


def _finish(
    req_id: str, response: Any, call_count: int, history: List[CallDescriptor], afc_config: AFCConfig
) -> AFCResult:
    if afc_config.enabled and call_count >= afc_config.max_calls and has_function_calls(response):
        logger.info(
            f"[{req_id}] AFC stopped at call budget ({call_count}/{afc_config.max_calls}); "
            f"last response still requests function calls"
        )
    _log_transition(req_id, LoopState.AWAITING_DECISION, LoopState.DONE, f"{call_count} call(s)")
    return AFCResult(response, call_count, history)


def _continuation_failed(
    req_id: str, exc: Exception, call_count: int, history: List[CallDescriptor]
) -> AFCResult:
    failure = ContinuationFailure(exc)
    logger.error(f"[{req_id}] AFC continuation failed after {call_count} call(s): {failure.message}")
    _log_transition(req_id, LoopState.CONTINUING, LoopState.DONE, "continuation failed")
    return AFCResult(failure, call_count, history)


# =============================================================================
# Loop
# =============================================================================


def loop(
    response: Any,
    contents: Optional[Sequence[Dict[str, Any]]],
    registry: Dict[str, Any],
    afc_config: AFCConfig,
    continuation: Continuation,
    options: Any = None,
    call_count: int = 0,
    history: Optional[Sequence[CallDescriptor]] = None,
    req_id: str = "",
) -> AFCResult:
    """Run the automatic function calling loop.

    Args:
        response: The response to the initial request.
        contents: Conversation contents sent with the initial request. Not mutated.
        registry: Function registry (see ``create_registry``).
        afc_config: Loop configuration.
        continuation: ``continuation(contents, options)`` sends the updated
            contents to Gemini and returns the next response. Raise to signal failure.
        options: Generation options, passed to the continuation unchanged.
        call_count: Calls already executed (when resuming a loop).
        history: Call history so far (when resuming a loop).
        req_id: Request ID for logging.

    Returns:
        AFCResult(response, call_count, history). ``response`` is a
        ContinuationFailure if the continuation raised.
    """
    contents = list(contents or [])
    history = list(history or [])

    if not afc_config.enabled:
        _log_transition(req_id, LoopState.AWAITING_DECISION, LoopState.DONE, "AFC disabled")
        return AFCResult(response, call_count, history)

    while should_continue(response, afc_config, call_count):
        calls = extract_function_calls(response)
        _log_transition(
            req_id, LoopState.AWAITING_DECISION, LoopState.EXECUTING, f"{len(calls)} call(s)"
        )

        if afc_config.parallel_execution:
            results = execute_all_parallel(calls, registry, afc_config.max_workers)
        else:
            results = execute_all(calls, registry)

        contents, call_count, history = _advance(
            response, calls, results, contents, call_count, history, afc_config
        )
        _log_transition(req_id, LoopState.EXECUTING, LoopState.CONTINUING)

        try:
            response = continuation(contents, options)
        except Exception as e:
            return _continuation_failed(req_id, e, call_count, history)
        _log_transition(req_id, LoopState.CONTINUING, LoopState.AWAITING_DECISION)

    return _finish(req_id, response, call_count, history, afc_config)


async def loop_async(
    response: Any,
    contents: Optional[Sequence[Dict[str, Any]]],
    registry: Dict[str, Any],
    afc_config: AFCConfig,
    continuation: Callable[..., Any],
    options: Any = None,
    call_count: int = 0,
    history: Optional[Sequence[CallDescriptor]] = None,
    req_id: str = "",
) -> AFCResult:
    """Asyncio variant of ``loop``.

    The continuation may be a coroutine function or a plain function; handlers
    may be coroutine functions or plain functions (run in worker threads).
    Same return contract as ``loop``.
    """
    contents = list(contents or [])
    history = list(history or [])

    if not afc_config.enabled:
        _log_transition(req_id, LoopState.AWAITING_DECISION, LoopState.DONE, "AFC disabled")
        return AFCResult(response, call_count, history)

    while should_continue(response, afc_config, call_count):
        calls = extract_function_calls(response)
        _log_transition(
            req_id, LoopState.AWAITING_DECISION, LoopState.EXECUTING, f"{len(calls)} call(s)"
        )

        if afc_config.parallel_execution:
            results = await execute_all_async(calls, registry, afc_config.max_workers)
        else:
            results = [await execute_async(call, registry) for call in calls]

        contents, call_count, history = _advance(
            response, calls, results, contents, call_count, history, afc_config
        )
        _log_transition(req_id, LoopState.EXECUTING, LoopState.CONTINUING)

        try:
            response = continuation(contents, options)
            if inspect.isawaitable(response):
                response = await response
        except Exception as e:
            return _continuation_failed(req_id, e, call_count, history)
        _log_transition(req_id, LoopState.CONTINUING, LoopState.AWAITING_DECISION)

    return _finish(req_id, response, call_count, history, afc_config)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    # Configuration
    "AFCConfig",
    "config",
    # Loop Types
    "LoopState",
    "AFCResult",
    "Continuation",
    # Decisions
    "should_continue",
    "track_history",
    # Loop
    "loop",
    "loop_async",
]
