"""Note schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a note."""

    label: str = Field(..., min_length=1, max_length=255, description="The label of the note")
    content: str | None = Field(None, description="The content of the note")


class NoteUpdate(BaseModel):
    """Partial update; omitted or empty fields keep their current value."""

    label: str | None = Field(None, max_length=255)
    content: str | None = None


class NoteOwner(BaseModel):
    id: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class NoteResponse(BaseModel):
    """Note as returned to its owner."""

    id: str
    label: str
    content: str | None
    owner: NoteOwner
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotePage(BaseModel):
    """One page of notes."""

    data: list[NoteResponse]
    total: int
    page: int
    limit: int
