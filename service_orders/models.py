from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = Field(default=None, examples=[None])


class ColumnsResponse(BaseModel):
    columns: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
