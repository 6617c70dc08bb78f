"""Pydantic request/response models for the API."""

from .discovery import (
    NextRequest,
    NextResponse,
    SelectionDebugInfo,
    SkipRequest,
    SkipResponse,
)

__all__ = [
    "NextRequest",
    "NextResponse",
    "SelectionDebugInfo",
    "SkipRequest",
    "SkipResponse",
]
