"""Pydantic schemas for the summarization endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SummaryRequest(BaseModel):
    """Validated summarization request handed to the provider adapter."""

    text: str = Field(
        ...,
        description="Text to summarize (50 to 30,000 characters by default).",
        examples=["Paste an article, report or transcript here. It must be at least fifty characters long."],
    )


class SummaryResponse(BaseModel):
    """Successful summarization result."""

    summary: str = Field(..., description="Summary text produced by the model.")


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str = Field(..., description="Human-readable error message, safe to show to end users.")
