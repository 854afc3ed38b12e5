"""
Pydantic models for Tripkeeper.
"""

from core.models.resources import ExpenseInput, MileageInput, ResourceInput, Stop, TripInput
from core.models.trash import PurgeSummary, TrashItem, TrashMetadata

__all__ = [
    "ExpenseInput",
    "MileageInput",
    "PurgeSummary",
    "ResourceInput",
    "Stop",
    "TrashItem",
    "TrashMetadata",
    "TripInput",
]
