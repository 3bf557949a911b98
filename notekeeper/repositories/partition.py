"""
Ordered Partition Store.

Maintains dense ranks inside a (user, category) partition: for a partition
holding n notes the ranks are exactly 0..n-1. Every primitive is a single
conditional bulk UPDATE on the caller's transaction scope; callers pair
them (open a slot in one partition, close the gap in another) inside one
transaction so no intermediate state is ever committed.

None of the statements set ``updated_at``. Rank bookkeeping is structural
and must not look like an edit to the shifted notes.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import ColumnElement, case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.logging import get_logger
from notekeeper.models.note import Note, NoteCategory

logger = get_logger(__name__)


@dataclass(frozen=True)
class PartitionKey:
    """Identifies the set of notes sharing one (user, category) pair."""

    user_id: str
    category: NoteCategory

    @classmethod
    def of(cls, note: Note) -> "PartitionKey":
        """The partition a note currently sits in."""
        return cls(user_id=note.user_id, category=note.category)


def in_partition(key: PartitionKey) -> tuple[ColumnElement[bool], ...]:
    """WHERE criteria selecting the rows of a partition."""
    return (Note.user_id == key.user_id, Note.category == key.category)


class OrderedPartitionStore:
    """Rank bookkeeping for note partitions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def open_slot_at_top(self, key: PartitionKey) -> int:
        """
        Shift every note in the partition down by one rank.

        Frees rank 0 for a note being inserted or moved into the
        partition within the same transaction.

        Returns:
            Number of notes shifted
        """
        result = await self.session.execute(
            update(Note)
            .where(*in_partition(key))
            .values(rank=Note.rank + 1)
            .execution_options(synchronize_session=False)
        )
        logger.debug(
            "Opened slot at top",
            extra={"category": key.category.value, "shifted": result.rowcount},
        )
        return result.rowcount

    async def close_gap_after(self, key: PartitionKey, vacated_rank: int) -> int:
        """
        Shift every note ranked below ``vacated_rank`` up by one.

        Call after a note left the partition, passing the rank the note
        held before it left.

        Returns:
            Number of notes shifted
        """
        result = await self.session.execute(
            update(Note)
            .where(*in_partition(key), Note.rank > vacated_rank)
            .values(rank=Note.rank - 1)
            .execution_options(synchronize_session=False)
        )
        logger.debug(
            "Closed gap",
            extra={
                "category": key.category.value,
                "vacated_rank": vacated_rank,
                "shifted": result.rowcount,
            },
        )
        return result.rowcount

    async def assign_ranks(self, key: PartitionKey, ordered_ids: Sequence[str]) -> int:
        """
        Set each listed note's rank to its position in ``ordered_ids``.

        One statement; it only matches rows that are still in the
        partition, so a note moved away concurrently is not written.

        Returns:
            Number of rows matched, to be compared against len(ordered_ids)
        """
        if not ordered_ids:
            return 0

        positions = {note_id: index for index, note_id in enumerate(ordered_ids)}
        result = await self.session.execute(
            update(Note)
            .where(*in_partition(key), Note.id.in_(list(ordered_ids)))
            .values(rank=case(positions, value=Note.id, else_=Note.rank))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def ranks(self, key: PartitionKey) -> list[tuple[str, int]]:
        """Current (id, rank) pairs of the partition, most prominent first."""
        result = await self.session.execute(
            select(Note.id, Note.rank)
            .where(*in_partition(key))
            .order_by(Note.rank, Note.id)
        )
        return [(row.id, row.rank) for row in result]
