"""
Gemini Content Models

Typed representation of the parts of the ``generateContent`` wire format that
take part in function calling: candidates, content turns, parts, function
calls and function responses. Field names are snake_case in Python and
camelCase on the wire; both spellings are accepted when parsing.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Base model mapping snake_case fields to the API's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]):
        """Parse an API payload (camelCase or snake_case keys)."""
        if data is None:
            return None
        if isinstance(data, cls):
            return data
        return cls.model_validate(data)

    def to_api(self) -> Dict[str, Any]:
        """Serialize to an API payload with camelCase keys, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Blob(_WireModel):
    """Inline binary data. ``data`` is base64 encoded."""

    data: str
    mime_type: str


class FileData(_WireModel):
    """Reference to an uploaded file."""

    file_uri: str
    mime_type: Optional[str] = None


class FunctionCall(_WireModel):
    """A function call requested by the model."""

    name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[str] = None

    @field_validator("args", mode="before")
    @classmethod
    def _default_args(cls, value: Any) -> Any:
        return {} if value is None else value


class FunctionResponseScheduling(str, Enum):
    """How the model should schedule a function response (Live API)."""

    SCHEDULING_UNSPECIFIED = "SCHEDULING_UNSPECIFIED"
    SILENT = "SILENT"
    WHEN_IDLE = "WHEN_IDLE"
    INTERRUPT = "INTERRUPT"


class FunctionResponse(_WireModel):
    """The result of a function call, sent back to the model."""

    name: str
    response: Dict[str, Any]
    id: Optional[str] = None
    will_continue: Optional[bool] = None
    scheduling: Optional[FunctionResponseScheduling] = None


class Part(_WireModel):
    """A single part of a content turn."""

    text: Optional[str] = None
    inline_data: Optional[Blob] = None
    file_data: Optional[FileData] = None
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None
    thought: Optional[bool] = None
    thought_signature: Optional[str] = None


class Content(_WireModel):
    """A role-tagged conversation turn."""

    role: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)


class Candidate(_WireModel):
    """One candidate completion."""

    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    index: Optional[int] = None


class GenerateContentResponse(_WireModel):
    """Response of ``generateContent`` / a ``streamGenerateContent`` chunk."""

    candidates: List[Candidate] = Field(default_factory=list)
    response_id: Optional[str] = None
    model_version: Optional[str] = None

    @property
    def text(self) -> str:
        """Concatenated text of the first candidate, ignoring thought parts."""
        if not self.candidates or self.candidates[0].content is None:
            return ""
        return "".join(
            part.text
            for part in self.candidates[0].content.parts
            if part.text and not part.thought
        )


__all__ = [
    "Blob",
    "FileData",
    "FunctionCall",
    "FunctionResponseScheduling",
    "FunctionResponse",
    "Part",
    "Content",
    "Candidate",
    "GenerateContentResponse",
]
