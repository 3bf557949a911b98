"""
Note Schemas.

Pydantic schemas for note API request/response validation.

Categories arrive as plain strings and are resolved by the service, so an
unknown name is reported as an invalid category rather than a generic
request validation error.
"""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, model_validator

from notekeeper.models.note import NoteCategory, NoteColor

TITLE_MAX_LENGTH = 180
CONTENT_MAX_LENGTH = 30000
LABELS_MAX_COUNT = 50
LABEL_MAX_LENGTH = 10


def _clean_labels(labels: list[str]) -> list[str]:
    cleaned = []
    for label in labels:
        label = label.strip()
        if not 1 <= len(label) <= LABEL_MAX_LENGTH:
            raise ValueError(f"Each label must be 1 to {LABEL_MAX_LENGTH} characters long")
        cleaned.append(label)
    return cleaned


Labels = Annotated[list[str], AfterValidator(_clean_labels)]


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        default="",
        max_length=TITLE_MAX_LENGTH,
        description="Note title",
        examples=["Groceries"],
    )
    content: str = Field(
        default="",
        max_length=CONTENT_MAX_LENGTH,
        description="Note content",
        examples=["Milk, eggs, bread"],
    )
    labels: Labels = Field(
        default_factory=list,
        max_length=LABELS_MAX_COUNT,
        description="Short labels attached to the note",
        examples=[["home"]],
    )
    color: NoteColor = Field(
        default=NoteColor.DEFAULT,
        description="Display color",
    )
    category: str = Field(
        default=NoteCategory.REGULAR.value,
        description="Category the note is created in",
        examples=["regular"],
    )

    @model_validator(mode="after")
    def require_text(self) -> "NoteCreate":
        if not self.title.strip() and not self.content.strip():
            raise ValueError("A note needs a title or content")
        return self


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Only provided fields change."""

    title: str | None = Field(
        default=None,
        max_length=TITLE_MAX_LENGTH,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        max_length=CONTENT_MAX_LENGTH,
        description="Note content",
    )
    labels: Labels | None = Field(
        default=None,
        max_length=LABELS_MAX_COUNT,
        description="Replacement label list",
    )
    color: NoteColor | None = Field(
        default=None,
        description="Display color",
    )
    category: str | None = Field(
        default=None,
        description="Move the note to this category",
    )

    @model_validator(mode="after")
    def reject_blank_note(self) -> "NoteUpdate":
        if (
            self.title is not None
            and self.content is not None
            and not self.title.strip()
            and not self.content.strip()
        ):
            raise ValueError("A note needs a title or content")
        return self


class NoteResponse(BaseModel):
    """Schema for note in API responses. Text fields are plaintext."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    labels: list[str] = Field(description="Note labels")
    category: NoteCategory = Field(description="Current category")
    color: NoteColor = Field(description="Display color")
    rank: int = Field(description="Position within the category, 0 first")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last modification timestamp")


class ReorderRequest(BaseModel):
    """Full ordering of one category, most prominent note first."""

    category: str = Field(
        description="Category being reordered",
        examples=["regular"],
    )
    note_ids: list[str] = Field(
        description="Every note id in the category, in the desired order",
    )


class BinEmptied(BaseModel):
    """Result of emptying the bin."""

    deleted: int = Field(description="Number of notes permanently deleted")
