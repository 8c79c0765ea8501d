"""Content acquisition for URL-grounded chat."""

from .acquirer import AcquisitionOutcome, ContentAcquirer
from .cache import AcquisitionCache, InMemoryTTLCache, RedisCacheBackend
from .contracts import ExtractedContent, ExtractionMethod, InputDetection
from .factory import create_acquirer, create_cache_backend
from .intent import detect_input_type
from .validator import is_content_valid

__all__ = [
    "AcquisitionCache",
    "AcquisitionOutcome",
    "ContentAcquirer",
    "ExtractedContent",
    "ExtractionMethod",
    "InMemoryTTLCache",
    "InputDetection",
    "RedisCacheBackend",
    "create_acquirer",
    "create_cache_backend",
    "detect_input_type",
    "is_content_valid",
]
