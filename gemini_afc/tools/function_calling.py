"""
Function Calling Utilities for Automatic Function Calling Support.

This module provides:
- Call descriptor extraction from Gemini responses, whatever their shape
- Call ID assignment for calls the provider did not tag
- Conversation turn building: the model's own turn and the function response turn

Accepted response shapes:
- Typed ``GenerateContentResponse`` models (or any object exposing ``candidates``)
- Raw decoded JSON with camelCase keys (``functionCall``, ``inlineData``)
- Raw dicts with snake_case keys (``function_call``, ``inline_data``)
- Parts wrapped one level deep under a ``part`` key
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import BaseModel

from gemini_afc.config.settings import FUNCTION_CALLING_DEBUG, LOGGER_NAME
from gemini_afc.logging_utils.fc_debug import FCModule, get_fc_logger
from gemini_afc.models.content import Part

logger = logging.getLogger(LOGGER_NAME)

# FC debug logger for extraction and turn building
fc_logger = get_fc_logger()


# =============================================================================
# Call Descriptor
# =============================================================================

# Prefix for IDs synthesized when the provider did not supply one
CALL_ID_PREFIX = "call_"

MODEL_ROLE = "model"
FUNCTION_ROLE = "function"


@dataclass(frozen=True)
class CallDescriptor:
    """A single function call requested by the model.

    Attributes:
        id: Provider-supplied call ID, or ``call_<index>`` when absent.
        name: Name of the registry entry to invoke.
        args: Arguments for the call. Never None.
    """

    id: str
    name: str
    args: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Shape Matching
# =============================================================================


def _field(obj: Any, *names: str) -> Any:
    """Read the first non-None field among ``names`` by key or attribute."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        for name in names:
            value = obj.get(name)
            if value is not None:
                return value
        return None
    for name in names:
        value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _candidates(response: Any) -> List[Any]:
    candidates = _field(response, "candidates")
    if isinstance(candidates, (list, tuple)):
        return list(candidates)
    return []


def _candidate_parts(candidate: Any) -> List[Any]:
    content = _field(candidate, "content")
    parts = _field(content, "parts")
    if isinstance(parts, (list, tuple)):
        return list(parts)
    return []


def _is_call_payload(value: Any) -> bool:
    if isinstance(value, (Mapping, BaseModel)):
        return True
    return value is not None and not isinstance(value, (str, bytes)) and hasattr(value, "name")


def _function_call_payload(part: Any, nested: bool = True) -> Any:
    """Return the function call carried by a part, or None.

    Tried in order: typed ``function_call`` attribute, ``functionCall`` key,
    ``function_call`` key, then the same checks on a ``part`` wrapper.
    Values that are not a mapping, a model or an object with a ``name`` are ignored.
    """
    if part is None:
        return None
    if not isinstance(part, Mapping):
        payload = getattr(part, "function_call", None)
        return payload if _is_call_payload(payload) else None

    payload = _field(part, "functionCall", "function_call")
    if _is_call_payload(payload):
        return payload

    if nested and part.get("part") is not None:
        return _function_call_payload(part["part"], nested=False)
    return None


def _normalize_args(args: Any) -> Dict[str, Any]:
    if args is None:
        return {}
    if isinstance(args, Mapping):
        return dict(args)
    if isinstance(args, str):
        try:
            decoded = json.loads(args) if args.strip() else {}
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable function call args: {args[:200]!r}")
            return {}
        return decoded if isinstance(decoded, dict) else {}
    if isinstance(args, BaseModel):
        return args.model_dump()
    return {}


def _to_descriptor(payload: Any, index: int) -> CallDescriptor:
    call_id = _field(payload, "id")
    name = _field(payload, "name")
    return CallDescriptor(
        id=str(call_id) if call_id else f"{CALL_ID_PREFIX}{index}",
        name=str(name) if name is not None else "",
        args=_normalize_args(_field(payload, "args")),
    )


# =============================================================================
# Extraction
# =============================================================================


def extract_function_calls(response: Any) -> List[CallDescriptor]:
    """Extract every function call from a Gemini response.

    All candidates and all parts are scanned and calls are returned in the
    order the provider sent them. Calls without a provider ID get
    ``call_<index>``, where index counts across all candidates.

    Args:
        response: Typed response, raw decoded JSON, or any object exposing
            ``candidates``.

    Returns:
        List of CallDescriptor. Empty when the response carries no calls or
        has an unrecognized shape.
    """
    payloads = [
        payload
        for candidate in _candidates(response)
        for payload in map(_function_call_payload, _candidate_parts(candidate))
        if payload is not None
    ]
    calls = [_to_descriptor(payload, idx) for idx, payload in enumerate(payloads)]

    if FUNCTION_CALLING_DEBUG and calls:
        fc_logger.debug(
            FCModule.EXTRACT,
            f"Extracted {len(calls)} call(s): {[call.name for call in calls]}",
        )
    return calls


def has_function_calls(response: Any) -> bool:
    """Check whether a response carries at least one function call."""
    return extract_function_calls(response) != []


# =============================================================================
# Turn Building
# =============================================================================


def _camel(key: str) -> str:
    if "_" not in key:
        return key
    head, *rest = key.split("_")
    return head + "".join(word[:1].upper() + word[1:] for word in rest)


# Nested part values whose own keys are wire keys (user data such as
# functionCall.args or functionResponse.response is never rewritten)
_NESTED_WIRE_KEYS = {"inlineData", "fileData", "functionResponse", "videoMetadata"}

_PART_ATTRIBUTES = (
    "text",
    "inline_data",
    "file_data",
    "function_call",
    "function_response",
    "thought",
    "thought_signature",
)


def _value_to_api(value: Any) -> Any:
    if not isinstance(value, BaseModel):
        return value
    if hasattr(value, "to_api"):
        return value.to_api()
    return value.model_dump(by_alias=True, exclude_none=True)


def _raw_part_to_api(part: Mapping) -> Dict[str, Any]:
    if len(part) == 1 and isinstance(part.get("part"), Mapping):
        part = part["part"]

    result: Dict[str, Any] = {}
    for key, value in part.items():
        wire_key = _camel(key)
        value = _value_to_api(value)
        if wire_key in _NESTED_WIRE_KEYS and isinstance(value, Mapping):
            value = {_camel(k): v for k, v in value.items()}
        result[wire_key] = value
    return result


def _part_to_api(part: Any) -> Dict[str, Any]:
    """Convert a part of any supported shape to the API's camelCase format."""
    if isinstance(part, Part):
        return part.to_api()
    if isinstance(part, Mapping):
        return _raw_part_to_api(part)

    # Duck-typed part objects (e.g. SDK types): copy the known fields
    raw = {}
    for attr in _PART_ATTRIBUTES:
        value = getattr(part, attr, None)
        if value is not None:
            raw[attr] = value
    return _raw_part_to_api(raw)


def extract_model_turn(response: Any) -> Dict[str, Any]:
    """Build the model's turn from a response for the conversation history.

    Uses the first candidate and keeps every part (text, function calls,
    function responses, inline data, file data, thought signatures) in the
    API's wire format.

    Args:
        response: Typed response or raw decoded JSON.

    Returns:
        ``{"role": "model", "parts": [...]}``. Parts are empty when the
        response has no candidates or an unrecognized shape.
    """
    candidates = _candidates(response)
    if not candidates:
        return {"role": MODEL_ROLE, "parts": []}

    parts = [_part_to_api(part) for part in _candidate_parts(candidates[0]) if part is not None]
    if FUNCTION_CALLING_DEBUG:
        fc_logger.debug(FCModule.RESPONSE, f"Model turn with {len(parts)} part(s)")
    return {"role": MODEL_ROLE, "parts": parts}


# Kept for callers using the name from the conversation helpers
extract_model_content_for_api = extract_model_turn


def build_function_response_turn(
    calls: Sequence[CallDescriptor], results: Sequence[Any]
) -> Dict[str, Any]:
    """Build the function response turn for executed calls.

    Args:
        calls: Executed call descriptors.
        results: Execution results, same length and order as ``calls``.

    Returns:
        ``{"role": "function", "parts": [{"functionResponse": {...}}, ...]}``
    """
    # Import at call time to avoid circular imports
    from gemini_afc.tools.executor import build_responses

    responses = build_responses(calls, results)
    if FUNCTION_CALLING_DEBUG:
        fc_logger.debug(
            FCModule.RESPONSE,
            f"Function response turn with {len(responses)} part(s)",
        )
    return {
        "role": FUNCTION_ROLE,
        "parts": [{"functionResponse": response.to_api()} for response in responses],
    }


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    # Call Descriptors
    "CALL_ID_PREFIX",
    "CallDescriptor",
    # Extraction
    "extract_function_calls",
    "has_function_calls",
    # Turn Building
    "MODEL_ROLE",
    "FUNCTION_ROLE",
    "extract_model_turn",
    "extract_model_content_for_api",
    "build_function_response_turn",
]
