"""
Note Repository.

Data access layer for notes. Handles note lookups scoped to their owner
and partition-level queries.
"""

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.exceptions import AuthorizationError, NotFoundError
from notekeeper.models.note import Note, NoteCategory
from notekeeper.repositories.base import BaseRepository
from notekeeper.repositories.partition import PartitionKey, in_partition


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard persistence operations from BaseRepository
    and adds owner- and partition-scoped queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, note_id: str, user_id: str) -> Note:
        """
        Load a note and check that ``user_id`` owns it.

        Raises:
            NotFoundError: If no note has this id
            AuthorizationError: If the note belongs to another user
        """
        note = await self.get_by_id_or_none(note_id)
        if note is None:
            raise NotFoundError("Note not found")
        if note.user_id != user_id:
            raise AuthorizationError("Access denied")
        return note

    async def list_partition(self, key: PartitionKey) -> list[Note]:
        """
        Get every note in a partition, most prominent first.

        Args:
            key: Partition to list

        Returns:
            Notes ordered by rank
        """
        result = await self.session.execute(
            select(Note)
            .where(*in_partition(key))
            .order_by(Note.rank, Note.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def find_in_partition(
        self,
        key: PartitionKey,
        note_ids: Sequence[str],
    ) -> list[Note]:
        """Get the notes among ``note_ids`` that currently sit in the partition."""
        if not note_ids:
            return []
        result = await self.session.execute(
            select(Note)
            .where(*in_partition(key), Note.id.in_(list(note_ids)))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def partition_ids(self, key: PartitionKey) -> list[str]:
        """Ids of every note in a partition."""
        result = await self.session.execute(
            select(Note.id).where(*in_partition(key))
        )
        return list(result.scalars().all())

    async def list_searchable(self, user_id: str) -> list[Note]:
        """
        Get all of a user's notes outside the bin.

        Returns:
            Notes ordered by most recently modified first
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.user_id == user_id)
            .where(Note.category != NoteCategory.DELETED)
            .order_by(Note.updated_at.desc(), Note.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_partition(self, key: PartitionKey) -> int:
        """
        Delete every note in a partition.

        Returns:
            Number of notes deleted
        """
        result = await self.session.execute(
            delete(Note)
            .where(*in_partition(key))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
