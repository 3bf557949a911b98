"""
Reorder Batch Processor.

Applies a client-supplied ordering to a whole partition. The batch must be
a permutation of exactly the notes currently in the partition; anything
else is rejected without writing.
"""

from collections import Counter
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.exceptions import (
    BatchTooLargeError,
    InvalidCategoryError,
    SetMismatchError,
    TransactionConflictError,
    ValidationError,
)
from notekeeper.core.utils import parse_note_id
from notekeeper.models.note import Note, NoteCategory
from notekeeper.repositories.note import NoteRepository
from notekeeper.repositories.partition import OrderedPartitionStore, PartitionKey


class ReorderBatchProcessor:
    """
    Two-phase reorder.

    ``validate`` runs the request-shape checks and needs no database.
    ``apply`` must run inside a transaction scope; it checks the batch
    against the live partition and writes all ranks in one statement.
    """

    def __init__(self, session: AsyncSession, max_batch: int) -> None:
        self.notes = NoteRepository(session)
        self.partitions = OrderedPartitionStore(session)
        self.max_batch = max_batch

    def validate(self, category: NoteCategory, note_ids: Sequence[str]) -> list[str]:
        """
        Check a batch before touching storage.

        Returns:
            The ids in canonical form, in batch order

        Raises:
            InvalidCategoryError: If the bin is being reordered
            BatchTooLargeError: If the batch exceeds the configured ceiling
            InvalidIdentifierError: If an id is malformed
            ValidationError: If an id appears more than once
        """
        if category == NoteCategory.DELETED:
            raise InvalidCategoryError(
                "Notes in the bin cannot be reordered",
                details={"category": category.value},
            )

        if len(note_ids) > self.max_batch:
            raise BatchTooLargeError(
                f"A reorder batch holds at most {self.max_batch} notes",
                details={"max_batch": self.max_batch, "received": len(note_ids)},
            )

        ordered_ids = [parse_note_id(note_id) for note_id in note_ids]

        duplicates = [note_id for note_id, count in Counter(ordered_ids).items() if count > 1]
        if duplicates:
            raise ValidationError(
                "Reorder batch lists a note more than once",
                details={"duplicate_ids": duplicates},
            )

        return ordered_ids

    async def apply(
        self,
        user_id: str,
        category: NoteCategory,
        ordered_ids: list[str],
    ) -> list[Note]:
        """
        Rank the partition's notes by their position in ``ordered_ids``.

        Returns:
            The partition in its new order

        Raises:
            SetMismatchError: If the batch and the partition hold different notes
            TransactionConflictError: If the partition changed while writing
        """
        key = PartitionKey(user_id=user_id, category=category)

        listed = await self.notes.find_in_partition(key, ordered_ids)
        if len(listed) != len(ordered_ids):
            found = {note.id for note in listed}
            raise SetMismatchError(
                missing_ids=[note_id for note_id in ordered_ids if note_id not in found],
            )

        resident_ids = await self.notes.partition_ids(key)
        if len(resident_ids) != len(ordered_ids):
            batch = set(ordered_ids)
            raise SetMismatchError(
                unlisted_ids=[note_id for note_id in resident_ids if note_id not in batch],
            )

        matched = await self.partitions.assign_ranks(key, ordered_ids)
        if matched != len(ordered_ids):
            raise TransactionConflictError()

        return await self.notes.list_partition(key)
