"""Response bodies shared by the routes."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TextMessage(BaseModel):
    """Plain informational message wrapped in JSON."""

    text: str = Field(..., description="Human readable message.")


__all__ = ["TextMessage"]
