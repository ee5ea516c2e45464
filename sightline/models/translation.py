"""Pydantic models for translation."""
from pydantic import BaseModel
from typing import List


class TranslationItem(BaseModel):
    """A queued text and its position in the caller's list."""
    index: int
    text: str


class TranslateResponse(BaseModel):
    """Response model for the translate endpoint."""
    translated: List[str]
