"""
Function Executor

Executes extracted function calls against a caller-supplied registry.

This module provides:
- Handler variants: a direct callable over the call's args, or an indirect
  ``(target, selector, fixed_args)`` reference
- Single, sequential, thread-parallel and asyncio execution
- Tagged execution results with per-call error isolation
- FunctionResponse building for the next conversation turn

A handler exception never escapes ``execute``: it is turned into a
``Failure(EXECUTION_ERROR, exc)`` result. A name missing from the registry
becomes ``Failure(UNKNOWN_FUNCTION, name)``.

Handlers run concurrently under ``execute_all_parallel``; when a registry is
shared between concurrent loops the handlers must be thread-safe.
"""

import asyncio
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from gemini_afc.config.settings import DEBUG_LOGS_ENABLED, FUNCTION_CALLING_DEBUG, LOGGER_NAME
from gemini_afc.logging_utils.fc_debug import FCModule, get_fc_logger
from gemini_afc.models.content import FunctionResponse
from gemini_afc.tools.function_calling import CallDescriptor

logger = logging.getLogger(LOGGER_NAME)

fc_logger = get_fc_logger()


# =============================================================================
# Execution Results
# =============================================================================


class FailureKind(str, Enum):
    """Why a call produced no value."""

    UNKNOWN_FUNCTION = "unknown_function"
    EXECUTION_ERROR = "execution_error"


@dataclass(frozen=True)
class Success:
    """A handler returned normally. ``value`` is passed through unconverted."""

    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A call could not produce a value.

    Attributes:
        kind: The failure category.
        detail: The missing function name for UNKNOWN_FUNCTION, the raised
            exception for EXECUTION_ERROR.
    """

    kind: FailureKind
    detail: Any

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        """Text surfaced to the model. Never includes a traceback."""
        if self.kind == FailureKind.UNKNOWN_FUNCTION:
            return f"Unknown function: {self.detail}"
        if isinstance(self.detail, BaseException):
            reason = str(self.detail) or type(self.detail).__name__
        else:
            reason = str(self.detail)
        return f"Execution error: {reason}"


ExecutionResult = Union[Success, Failure]


# =============================================================================
# Handlers & Registry
# =============================================================================


@dataclass(frozen=True)
class DirectHandler:
    """Calls ``func(args)`` with the call's argument mapping."""

    func: Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class IndirectHandler:
    """Calls ``getattr(target, selector)(*fixed_args)``, ignoring the call's args.

    Useful for handlers without meaningful input, e.g. "get current time".
    """

    target: Any
    selector: str
    fixed_args: Tuple[Any, ...] = ()


Handler = Union[DirectHandler, IndirectHandler]
FunctionRegistry = Dict[str, Handler]


def _as_handler(impl: Any) -> Handler:
    """Normalize a registry value to one of the handler variants."""
    if isinstance(impl, (DirectHandler, IndirectHandler)):
        return impl
    if isinstance(impl, tuple) and len(impl) == 3 and isinstance(impl[1], str):
        target, selector, fixed_args = impl
        return IndirectHandler(target, selector, tuple(fixed_args))
    if callable(impl):
        return DirectHandler(impl)
    raise TypeError(
        f"Registry entry must be a callable or a (target, selector, args) tuple, "
        f"got {type(impl).__name__}"
    )


def _bind(handler: Handler, args: Dict[str, Any]) -> Tuple[Callable[..., Any], Tuple[Any, ...]]:
    if isinstance(handler, DirectHandler):
        return handler.func, (dict(args),)
    return getattr(handler.target, handler.selector), handler.fixed_args


def create_registry(
    entries: Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]], None] = None,
    **functions: Any,
) -> FunctionRegistry:
    """Create a function registry with string keys.

    Args:
        entries: A mapping, or an iterable of ``(name, handler)`` pairs.
        **functions: Further handlers given as keyword arguments.

    Returns:
        Dict mapping function names to handler variants.

    Raises:
        TypeError: If a handler is neither callable nor an indirect reference.
    """
    items: List[Tuple[Any, Any]] = []
    if isinstance(entries, Mapping):
        items.extend(entries.items())
    elif entries is not None:
        items.extend(entries)
    items.extend(functions.items())

    return {str(name): _as_handler(impl) for name, impl in items}


# =============================================================================
# Execution
# =============================================================================


def _unknown(call: CallDescriptor) -> Failure:
    logger.warning(f"Model requested unknown function '{call.name}' ({call.id})")
    return Failure(FailureKind.UNKNOWN_FUNCTION, call.name)


def _failed(call: CallDescriptor, exc: Exception) -> Failure:
    logger.warning(
        f"Function '{call.name}' ({call.id}) raised {type(exc).__name__}: {exc}",
        exc_info=DEBUG_LOGS_ENABLED,
    )
    return Failure(FailureKind.EXECUTION_ERROR, exc)


def execute(call: CallDescriptor, registry: Mapping[str, Any]) -> ExecutionResult:
    """Execute a single function call against the registry.

    Args:
        call: The call descriptor.
        registry: Mapping from function names to handlers.

    Returns:
        Success(value), Failure(UNKNOWN_FUNCTION, name), or
        Failure(EXECUTION_ERROR, exception).
    """
    impl = registry.get(call.name)
    if impl is None:
        return _unknown(call)

    try:
        func, call_args = _bind(_as_handler(impl), call.args)
        value = func(*call_args)
        if inspect.iscoroutine(value):
            value.close()
            raise TypeError(
                f"Handler for '{call.name}' is a coroutine function; use the async loop"
            )
    except Exception as e:
        return _failed(call, e)

    if FUNCTION_CALLING_DEBUG:
        fc_logger.debug(FCModule.EXECUTE, f"{call.name} ({call.id}) succeeded")
    return Success(value)


def execute_all(
    calls: Sequence[CallDescriptor], registry: Mapping[str, Any]
) -> List[ExecutionResult]:
    """Execute calls one after another, in order. A failure never stops later calls."""
    return [execute(call, registry) for call in calls]


def execute_all_parallel(
    calls: Sequence[CallDescriptor],
    registry: Mapping[str, Any],
    max_workers: Optional[int] = None,
) -> List[ExecutionResult]:
    """Execute calls concurrently on a thread pool.

    Results keep the order of ``calls`` regardless of completion order, and
    the function returns only once every call has finished.

    Args:
        calls: Call descriptors.
        registry: Function registry.
        max_workers: Concurrency ceiling. None runs every call at once.

    Returns:
        One ExecutionResult per call, in input order.
    """
    calls = list(calls)
    if not calls:
        return []

    workers = max_workers or len(calls)
    if FUNCTION_CALLING_DEBUG:
        fc_logger.debug(
            FCModule.EXECUTE,
            f"Dispatching {len(calls)} call(s) on {min(workers, len(calls))} worker(s)",
        )

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="afc-call") as pool:
        futures = [pool.submit(execute, call, registry) for call in calls]
        return [future.result() for future in futures]


async def execute_async(
    call: CallDescriptor, registry: Mapping[str, Any]
) -> ExecutionResult:
    """Execute a single call from asyncio code.

    Coroutine handlers are awaited; synchronous handlers run in a worker
    thread so they do not block the event loop.
    """
    impl = registry.get(call.name)
    if impl is None:
        return _unknown(call)

    try:
        func, call_args = _bind(_as_handler(impl), call.args)
        if inspect.iscoroutinefunction(func):
            value = await func(*call_args)
        else:
            value = await asyncio.to_thread(func, *call_args)
            if inspect.isawaitable(value):
                value = await value
    except Exception as e:
        return _failed(call, e)

    if FUNCTION_CALLING_DEBUG:
        fc_logger.debug(FCModule.EXECUTE, f"{call.name} ({call.id}) succeeded")
    return Success(value)


async def execute_all_async(
    calls: Sequence[CallDescriptor],
    registry: Mapping[str, Any],
    max_workers: Optional[int] = None,
) -> List[ExecutionResult]:
    """Execute calls concurrently on the event loop, preserving input order."""
    if not max_workers:
        return list(await asyncio.gather(*(execute_async(call, registry) for call in calls)))

    semaphore = asyncio.Semaphore(max_workers)

    async def _bounded(call: CallDescriptor) -> ExecutionResult:
        async with semaphore:
            return await execute_async(call, registry)

    return list(await asyncio.gather(*(_bounded(call) for call in calls)))


# =============================================================================
# Response Building
# =============================================================================


def _build_single_response(call: CallDescriptor, result: ExecutionResult) -> FunctionResponse:
    if isinstance(result, Success):
        payload = {"result": result.value}
    elif isinstance(result, Failure):
        payload = {"error": result.message}
    else:
        raise TypeError(f"Expected Success or Failure, got {type(result).__name__}")
    return FunctionResponse(name=call.name, id=call.id, response=payload)


def build_responses(
    calls: Sequence[CallDescriptor], results: Sequence[ExecutionResult]
) -> List[FunctionResponse]:
    """Pair calls with their results as FunctionResponse objects.

    Args:
        calls: Executed call descriptors.
        results: Results from one of the execute_all variants.

    Returns:
        FunctionResponse list: ``{"result": value}`` on success,
        ``{"error": message}`` on failure.

    Raises:
        ValueError: If ``calls`` and ``results`` differ in length.
    """
    calls = list(calls)
    results = list(results)
    if len(calls) != len(results):
        raise ValueError(
            f"Got {len(calls)} call(s) but {len(results)} result(s); they must pair up"
        )
    return [_build_single_response(call, result) for call, result in zip(calls, results)]


__all__ = [
    # Results
    "FailureKind",
    "Success",
    "Failure",
    "ExecutionResult",
    # Handlers & Registry
    "DirectHandler",
    "IndirectHandler",
    "Handler",
    "FunctionRegistry",
    "create_registry",
    # Execution
    "execute",
    "execute_all",
    "execute_all_parallel",
    "execute_async",
    "execute_all_async",
    # Response Building
    "build_responses",
]
