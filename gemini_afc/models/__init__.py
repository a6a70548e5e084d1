# Gemini content models
from .content import (
    Blob,
    FileData,
    FunctionCall,
    FunctionResponseScheduling,
    FunctionResponse,
    Part,
    Content,
    Candidate,
    GenerateContentResponse
)

# Exception classes
from .exceptions import GeminiAFCError, ConfigurationError, ContinuationFailure

__all__ = [
    # Content models
    'Blob',
    'FileData',
    'FunctionCall',
    'FunctionResponseScheduling',
    'FunctionResponse',
    'Part',
    'Content',
    'Candidate',
    'GenerateContentResponse',

    # Exceptions
    'GeminiAFCError',
    'ConfigurationError',
    'ContinuationFailure'
]
