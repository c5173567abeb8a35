"""Calculation Schemas — response models for the calculation endpoints.

Invariants:
    - Stored payloads are never modelled: request bodies arrive as raw JSON
      and responses return them verbatim
    - Field aliases keep the camelCase wire names used by the frontend
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SaveResponse(BaseModel):
    """Identifier of a newly stored calculation."""
    id: str


class MutationResponse(BaseModel):
    success: bool = True


class CalculationSummary(BaseModel):
    """One owned calculation as listed to its owner."""
    id: str
    data: Any
    created_at: datetime = Field(serialization_alias="createdAt")
    accessed_at: datetime = Field(serialization_alias="accessedAt")
    access_count: int = Field(ge=0, serialization_alias="accessCount")


class CalculationList(BaseModel):
    calculations: list[CalculationSummary]


class StatsResponse(BaseModel):
    """Aggregate counters (key names are part of the public monitoring contract)."""
    total_calculations: int = Field(ge=0)
    total_accesses: int = Field(ge=0)
