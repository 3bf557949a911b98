"""
Note Service.

Business logic layer for notes. Every mutation runs in one transaction
scope: the owning note is re-read inside it, the category transition or
reorder is applied, and the scope commits or rolls back as a unit.

Results are returned as decrypted NoteResponse schemas. Stored rows only
ever hold ciphertext.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.crypto import NoteCipher
from notekeeper.core.exceptions import InvalidCategoryError, ValidationError
from notekeeper.core.utils import parse_note_id
from notekeeper.models.note import Note, NoteCategory
from notekeeper.repositories.note import NoteRepository
from notekeeper.repositories.partition import PartitionKey
from notekeeper.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from notekeeper.services.base import BaseService
from notekeeper.services.reorder import ReorderBatchProcessor
from notekeeper.services.transitions import (
    CategoryTransitionCoordinator,
    NoteFields,
    Toggle,
    toggle_destination,
)

DEFAULT_REORDER_MAX_BATCH = 500
DEFAULT_SEARCH_MAX_RESULTS = 100


def parse_category(value: str | NoteCategory) -> NoteCategory:
    """
    Resolve a category name.

    Raises:
        InvalidCategoryError: If the name is not a known category
    """
    try:
        return NoteCategory(value)
    except ValueError:
        raise InvalidCategoryError(
            f"Unknown category: {value}",
            details={
                "category": str(value),
                "allowed": [category.value for category in NoteCategory],
            },
        )


class NoteService(BaseService):
    """
    Service for note business logic.

    Collaborators are passed in explicitly: the cipher used for note text
    and the ceiling on reorder batch size.
    """

    def __init__(
        self,
        session: AsyncSession,
        cipher: NoteCipher,
        reorder_max_batch: int = DEFAULT_REORDER_MAX_BATCH,
        search_max_results: int = DEFAULT_SEARCH_MAX_RESULTS,
    ) -> None:
        super().__init__(session)
        self.cipher = cipher
        self.repo = NoteRepository(session)
        self.coordinator = CategoryTransitionCoordinator(session, cipher)
        self.reorderer = ReorderBatchProcessor(session, reorder_max_batch)
        self.search_max_results = search_max_results

    async def create_note(self, user_id: str, data: NoteCreate) -> NoteResponse:
        """
        Create a note at the top of its category.

        Args:
            user_id: Owner of the new note
            data: Note creation data

        Returns:
            Created note

        Raises:
            InvalidCategoryError: If the category name is unknown
        """
        category = parse_category(data.category)
        self._log_operation("Creating note", category=category.value)

        async with self._atomic("create_note"):
            note = await self.coordinator.insert(
                user_id,
                category,
                NoteFields(
                    title=data.title,
                    content=data.content,
                    labels=data.labels,
                    color=data.color,
                ),
            )

        self._log_debug("Note created", note_id=note.id)
        return self._to_response(note)

    async def get_note(self, user_id: str, note_id: str) -> NoteResponse:
        """
        Get a note by ID.

        Raises:
            InvalidIdentifierError: If the id is malformed
            NotFoundError: If note not found
            AuthorizationError: If the note belongs to another user
        """
        note_id = parse_note_id(note_id)
        async with self._atomic("get_note"):
            note = await self.repo.get_owned(note_id, user_id)
        return self._to_response(note)

    async def list_notes(self, user_id: str, category: str | NoteCategory) -> list[NoteResponse]:
        """
        List one category, most prominent first.

        Raises:
            InvalidCategoryError: If the category name is unknown
        """
        key = PartitionKey(user_id=user_id, category=parse_category(category))
        async with self._atomic("list_notes"):
            notes = await self.repo.list_partition(key)
        return [self._to_response(note) for note in notes]

    async def search_notes(self, user_id: str, query: str) -> list[NoteResponse]:
        """
        Search title, content and labels, case-insensitively.

        Notes in the bin are excluded. Matching happens on decrypted text,
        so candidates are loaded and filtered here rather than in SQL.

        Returns:
            Matching notes, most recently modified first
        """
        needle = query.strip().lower()
        if not needle:
            return []

        self._log_debug("Searching notes", query_length=len(needle))
        async with self._atomic("search_notes"):
            candidates = await self.repo.list_searchable(user_id)

        results = []
        for note in candidates:
            response = self._to_response(note)
            haystacks = [response.title, response.content, *response.labels]
            if any(needle in text.lower() for text in haystacks):
                results.append(response)
                if len(results) >= self.search_max_results:
                    break
        return results

    async def update_note(self, user_id: str, note_id: str, data: NoteUpdate) -> NoteResponse:
        """
        Update fields and, optionally, the category of a note.

        A category change goes through the transition coordinator and
        places the note at the top of its new category.

        Raises:
            InvalidIdentifierError: If the id is malformed
            InvalidCategoryError: If the category name is unknown
            ValidationError: If the update would leave the note without text
            NotFoundError: If note not found
            AuthorizationError: If the note belongs to another user
        """
        note_id = parse_note_id(note_id)
        new_category = parse_category(data.category) if data.category is not None else None
        fields = NoteFields(
            title=data.title,
            content=data.content,
            labels=data.labels,
            color=data.color,
        )

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=sorted(data.model_dump(exclude_unset=True)),
        )

        async with self._atomic("update_note"):
            note = await self.repo.get_owned(note_id, user_id)
            self._check_has_text(note, fields)
            note = await self.coordinator.transition(
                note,
                new_category or note.category,
                fields,
            )

        return self._to_response(note)

    async def toggle_pin(self, user_id: str, note_id: str) -> NoteResponse:
        """Pin a note, or unpin it if it is already pinned."""
        return await self._toggle(user_id, note_id, Toggle.PIN)

    async def toggle_archive(self, user_id: str, note_id: str) -> NoteResponse:
        """Archive a note, or restore it to regular if it is already archived."""
        return await self._toggle(user_id, note_id, Toggle.ARCHIVE)

    async def toggle_delete(self, user_id: str, note_id: str) -> NoteResponse:
        """Move a note to the bin, or restore it to regular from the bin."""
        return await self._toggle(user_id, note_id, Toggle.DELETE)

    async def permanent_delete(self, user_id: str, note_id: str) -> None:
        """
        Permanently delete a note that is in the bin.

        Raises:
            InvalidIdentifierError: If the id is malformed
            NotFoundError: If note not found
            AuthorizationError: If the note belongs to another user
            PreconditionFailedError: If the note is not in the bin
        """
        note_id = parse_note_id(note_id)
        self._log_operation("Permanently deleting note", note_id=note_id)

        async with self._atomic("permanent_delete"):
            note = await self.repo.get_owned(note_id, user_id)
            await self.coordinator.remove(note)

    async def empty_bin(self, user_id: str) -> int:
        """
        Permanently delete every note in the user's bin.

        Returns:
            Number of notes deleted
        """
        key = PartitionKey(user_id=user_id, category=NoteCategory.DELETED)
        async with self._atomic("empty_bin"):
            deleted = await self.repo.delete_partition(key)

        self._log_operation("Bin emptied", deleted=deleted)
        return deleted

    async def reorder(
        self,
        user_id: str,
        category: str | NoteCategory,
        note_ids: list[str],
    ) -> list[NoteResponse]:
        """
        Replace the order of a whole category.

        Returns:
            The category in its new order

        Raises:
            InvalidCategoryError: If the category is unknown or is the bin
            ValidationError: If an id is listed twice
            BatchTooLargeError: If the batch exceeds the configured ceiling
            InvalidIdentifierError: If an id is malformed
            SetMismatchError: If the batch does not match the category's notes
            TransactionConflictError: If the category changed while writing
        """
        resolved = parse_category(category)
        ordered_ids = self.reorderer.validate(resolved, note_ids)

        self._log_operation("Reordering notes", category=resolved.value, count=len(ordered_ids))

        async with self._atomic("reorder"):
            notes = await self.reorderer.apply(user_id, resolved, ordered_ids)

        return [self._to_response(note) for note in notes]

    async def _toggle(self, user_id: str, note_id: str, toggle: Toggle) -> NoteResponse:
        note_id = parse_note_id(note_id)

        async with self._atomic(f"toggle_{toggle.value}"):
            note = await self.repo.get_owned(note_id, user_id)
            source = note.category
            destination = toggle_destination(source, toggle)
            note = await self.coordinator.transition(note, destination)

        self._log_operation(
            "Note toggled",
            note_id=note_id,
            toggle=toggle.value,
            from_category=source.value,
            to_category=destination.value,
        )
        return self._to_response(note)

    def _check_has_text(self, note: Note, fields: NoteFields) -> None:
        if fields.title is None and fields.content is None:
            return
        title = fields.title if fields.title is not None else self.cipher.decrypt(note.title)
        content = fields.content if fields.content is not None else self.cipher.decrypt(note.content)
        if not title.strip() and not content.strip():
            raise ValidationError(
                "A note needs a title or content",
                details={"note_id": note.id},
            )

    def _to_response(self, note: Note) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            title=self.cipher.decrypt(note.title),
            content=self.cipher.decrypt(note.content),
            labels=[self.cipher.decrypt(label) for label in note.labels],
            category=note.category,
            color=note.color,
            rank=note.rank,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
