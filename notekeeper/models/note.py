"""
Note Model.

Database model for notes. A note lives in exactly one category and holds
a rank inside the (user, category) partition it belongs to.
"""

import enum

from sqlalchemy import JSON, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.models.base import Base, TimestampMixin, UUIDMixin


class NoteCategory(str, enum.Enum):
    """Lifecycle state of a note. Exactly one applies at any time."""

    REGULAR = "regular"
    PINNED = "pinned"
    ARCHIVED = "archived"
    DELETED = "deleted"


class NoteColor(str, enum.Enum):
    """Fixed display palette for note cards."""

    DEFAULT = "default"
    CORAL = "coral"
    PEACH = "peach"
    SAND = "sand"
    MINT = "mint"
    SAGE = "sage"
    FOG = "fog"
    STORM = "storm"
    DUSK = "dusk"
    BLOSSOM = "blossom"
    CLAY = "clay"
    CHALK = "chalk"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    Title, content and labels hold ciphertext produced by the service's
    NoteCipher. ``rank`` is the 0-based position within the note's
    (user_id, category) partition, 0 being the most prominent.

    Ranks are not covered by a unique constraint: partition shifts update
    every row of a partition in one statement, and databases check unique
    constraints row by row during such an update.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_partition", "user_id", "category", "rank"),
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    labels: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    category: Mapped[NoteCategory] = mapped_column(
        Enum(
            NoteCategory,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=NoteCategory.REGULAR,
    )
    color: Mapped[NoteColor] = mapped_column(
        Enum(
            NoteColor,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=NoteColor.DEFAULT,
    )
    rank: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, category={self.category.value}, rank={self.rank})>"
