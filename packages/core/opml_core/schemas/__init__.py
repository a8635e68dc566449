"""
Pydantic schemas shared across packages.
"""

from .feed import Feed, FeedSummary, ValidationResult, ValidationStatus

__all__ = ["Feed", "FeedSummary", "ValidationResult", "ValidationStatus"]
