"""Typed errors raised by the matching and pricing engines."""

from enum import Enum
from typing import Any, Dict, Optional


class ProviderMatchingErrorType(Enum):
    INVALID_INPUT = "INVALID_INPUT"
    NO_PROVIDERS_AVAILABLE = "NO_PROVIDERS_AVAILABLE"
    MATCHING_ERROR = "MATCHING_ERROR"


class PricingErrorType(Enum):
    INVALID_INPUT = "INVALID_INPUT"
    CALCULATION_ERROR = "CALCULATION_ERROR"
    UNSUPPORTED_FEATURE = "UNSUPPORTED_FEATURE"


class BookingEngineError(Exception):
    """Base class carrying a ``type`` tag and a structured ``details`` payload."""

    def __init__(self, message: str, error_type: Enum, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.type = error_type
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.message}"


class ProviderMatchingError(BookingEngineError):
    type: ProviderMatchingErrorType


class PricingError(BookingEngineError):
    type: PricingErrorType
