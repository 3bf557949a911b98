"""
Category Transitions.

Every move of a note between categories goes through
CategoryTransitionCoordinator.transition, which keeps both the source and
destination partitions dense. Creation and permanent deletion are the two
edge cases of the same bookkeeping (no source, no destination) and live
here too.

The coordinator never opens or commits a transaction. Callers run it
inside a transaction scope so the shifts and the note write land together.
"""

import enum
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.crypto import NoteCipher
from notekeeper.core.exceptions import PreconditionFailedError
from notekeeper.core.logging import get_logger
from notekeeper.core.utils import utc_now
from notekeeper.models.note import Note, NoteCategory, NoteColor
from notekeeper.repositories.note import NoteRepository
from notekeeper.repositories.partition import OrderedPartitionStore, PartitionKey

logger = get_logger(__name__)


class Toggle(str, enum.Enum):
    """User-facing category switches."""

    PIN = "pin"
    ARCHIVE = "archive"
    DELETE = "delete"

    @property
    def target(self) -> NoteCategory:
        return _TOGGLE_TARGETS[self]


_TOGGLE_TARGETS = {
    Toggle.PIN: NoteCategory.PINNED,
    Toggle.ARCHIVE: NoteCategory.ARCHIVED,
    Toggle.DELETE: NoteCategory.DELETED,
}


def toggle_destination(current: NoteCategory, toggle: Toggle) -> NoteCategory:
    """
    Category a note lands in when ``toggle`` is applied.

    Toggling the category a note is already in sends it back to regular;
    any other toggle sends it to the toggle's category.
    """
    if current == toggle.target:
        return NoteCategory.REGULAR
    return toggle.target


@dataclass
class NoteFields:
    """Plaintext field values for a write. None means "leave unchanged"."""

    title: str | None = None
    content: str | None = None
    labels: list[str] | None = None
    color: NoteColor | None = None


@dataclass
class _Changes:
    values: dict = field(default_factory=dict)
    edited: bool = False


class CategoryTransitionCoordinator:
    """Moves notes between partitions while keeping ranks dense."""

    def __init__(self, session: AsyncSession, cipher: NoteCipher) -> None:
        self.notes = NoteRepository(session)
        self.partitions = OrderedPartitionStore(session)
        self.cipher = cipher

    async def transition(
        self,
        note: Note,
        new_category: NoteCategory,
        fields: NoteFields | None = None,
    ) -> Note:
        """
        Apply field updates and move the note to ``new_category``.

        Staying in the same category only writes fields that actually
        changed; ``updated_at`` moves when title, content or labels did.
        A category change places the note at rank 0 of the destination,
        shifts the destination's residents down and closes the gap left
        in the source.

        Returns:
            The note as written
        """
        changes = self._diff(note, fields or NoteFields())
        old_key = PartitionKey.of(note)
        new_key = PartitionKey(user_id=note.user_id, category=new_category)

        if new_key == old_key:
            if not changes.values:
                return note
            if changes.edited:
                changes.values["updated_at"] = utc_now()
            return await self.notes.write(note, **changes.values)

        vacated_rank = note.rank
        await self.partitions.open_slot_at_top(new_key)
        await self.partitions.close_gap_after(old_key, vacated_rank)
        note = await self.notes.write(
            note,
            category=new_category,
            rank=0,
            updated_at=utc_now(),
            **changes.values,
        )
        logger.debug(
            "Note moved",
            extra={
                "note_id": note.id,
                "from_category": old_key.category.value,
                "to_category": new_category.value,
                "vacated_rank": vacated_rank,
            },
        )
        return note

    async def insert(
        self,
        user_id: str,
        category: NoteCategory,
        fields: NoteFields,
    ) -> Note:
        """Create a note at rank 0 of its partition."""
        await self.partitions.open_slot_at_top(PartitionKey(user_id=user_id, category=category))
        now = utc_now()
        return await self.notes.create(
            user_id=user_id,
            category=category,
            rank=0,
            title=self.cipher.encrypt(fields.title or ""),
            content=self.cipher.encrypt(fields.content or ""),
            labels=[self.cipher.encrypt(label) for label in fields.labels or []],
            color=fields.color or NoteColor.DEFAULT,
            created_at=now,
            updated_at=now,
        )

    async def remove(self, note: Note) -> None:
        """
        Permanently delete a note from the bin.

        Raises:
            PreconditionFailedError: If the note is not in the bin
        """
        if note.category != NoteCategory.DELETED:
            raise PreconditionFailedError(
                "Note must be moved to bin (soft deleted) before permanent deletion"
            )
        key = PartitionKey.of(note)
        vacated_rank = note.rank
        await self.notes.delete(note)
        await self.partitions.close_gap_after(key, vacated_rank)

    def _diff(self, note: Note, fields: NoteFields) -> _Changes:
        changes = _Changes()

        if fields.title is not None and fields.title != self.cipher.decrypt(note.title):
            changes.values["title"] = self.cipher.encrypt(fields.title)
            changes.edited = True

        if fields.content is not None and fields.content != self.cipher.decrypt(note.content):
            changes.values["content"] = self.cipher.encrypt(fields.content)
            changes.edited = True

        if fields.labels is not None:
            current = [self.cipher.decrypt(label) for label in note.labels]
            if fields.labels != current:
                changes.values["labels"] = [self.cipher.encrypt(label) for label in fields.labels]
                changes.edited = True

        # Cosmetic only; written but never counts as an edit
        if fields.color is not None and fields.color != note.color:
            changes.values["color"] = fields.color

        return changes
