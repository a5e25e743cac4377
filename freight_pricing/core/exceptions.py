"""Typed errors raised by the pricing engine"""
from typing import Any, Dict, Optional


class PricingError(Exception):
    """Base class for pricing engine failures"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "PRICING_ERROR"
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class QuoteValidationError(PricingError, ValueError):
    """Invalid estimate input, rejected before any arithmetic runs."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, "INVALID_INPUT")
        self.field = field
        if field is not None:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)
