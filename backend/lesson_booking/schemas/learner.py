"""Learner schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..core.constants import MAX_NAME_LENGTH
from .base import StandardizedModel, StrictModel


class LearnerEnsureRequest(StrictModel):
    parent_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(default=None, max_length=MAX_NAME_LENGTH)


class LearnerResponse(StandardizedModel):
    id: str
    parent_id: str
    name: str
    created_at: Optional[datetime] = None
