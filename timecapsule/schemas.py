"""
Pydantic schemas for the time capsule API.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class CapsuleCreatePayload(BaseModel):
    # Fields are accepted as sent; unknown keys (e.g. "user") are dropped.
    model_config = ConfigDict(extra="ignore")

    title: Any = None
    content: Any = None
    media: Any = None
    releaseDate: Any = None


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    fileUrl: str
    detectedLabels: list[str]


class HealthResponse(BaseModel):
    status: Literal["ok"]
