from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, constr


class BatchRequest(BaseModel):
    video_ids: List[constr(strip_whitespace=True, min_length=1, max_length=64)] = Field(
        ..., min_length=1, max_length=100
    )
    action: constr(strip_whitespace=True, min_length=1, max_length=32) = Field(
        ..., description="delete|update_status"
    )
    status: Optional[str] = Field(None, description="Target status for update_status")


class BatchResult(BaseModel):
    success_count: int = 0
    failed_count: int = 0
    failed_ids: List[str] = []
