"""
Notes API Endpoints.

REST API endpoints for note management. Every route acts on behalf of the
authenticated user and only ever touches that user's notes.
"""

from fastapi import APIRouter, Query

from notekeeper.core.dependencies import CurrentUser, Notes, RequestId
from notekeeper.schemas.base import ApiResponse, ResponseMetadata
from notekeeper.schemas.note import (
    BinEmptied,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    ReorderRequest,
)

router = APIRouter()


def _envelope(data, request_id: str) -> ApiResponse:
    return ApiResponse(data=data, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes in a category",
    description="Get every note in one category, ordered by rank (most prominent first).",
)
async def list_notes(
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
    category: str = Query(
        default="regular",
        description="Category to list: regular, pinned, archived or deleted",
    ),
) -> ApiResponse[list[NoteResponse]]:
    """List one category."""
    notes = await service.list_notes(user_id, category)
    return _envelope(notes, request_id)


@router.get(
    "/search",
    response_model=ApiResponse[list[NoteResponse]],
    summary="Search notes",
    description="Search title, content and labels. Notes in the bin are excluded.",
)
async def search_notes(
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
    q: str = Query(
        default="",
        max_length=200,
        description="Search text",
    ),
) -> ApiResponse[list[NoteResponse]]:
    """Search notes, most recently modified first."""
    notes = await service.search_notes(user_id, q)
    return _envelope(notes, request_id)


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note at the top of its category.",
)
async def create_note(
    data: NoteCreate,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await service.create_note(user_id, data)
    return _envelope(note, request_id)


@router.put(
    "/reorder",
    response_model=ApiResponse[list[NoteResponse]],
    summary="Reorder a category",
    description=(
        "Replace the order of a whole category. The batch must list every "
        "note in the category exactly once. The bin cannot be reordered."
    ),
)
async def reorder_notes(
    data: ReorderRequest,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """Reorder one category."""
    notes = await service.reorder(user_id, data.category, data.note_ids)
    return _envelope(notes, request_id)


@router.delete(
    "/bin",
    response_model=ApiResponse[BinEmptied],
    summary="Empty the bin",
    description="Permanently delete every note in the bin.",
)
async def empty_bin(
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[BinEmptied]:
    """Empty the bin."""
    deleted = await service.empty_bin(user_id)
    return _envelope(BinEmptied(deleted=deleted), request_id)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note by ID.",
)
async def get_note(
    note_id: str,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = await service.get_note(user_id, note_id)
    return _envelope(note, request_id)


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description=(
        "Update an existing note. Only provided fields are updated. "
        "Changing the category moves the note to the top of the new category."
    ),
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await service.update_note(user_id, note_id, data)
    return _envelope(note, request_id)


@router.post(
    "/{note_id}/toggle-pin",
    response_model=ApiResponse[NoteResponse],
    summary="Pin or unpin a note",
)
async def toggle_pin(
    note_id: str,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Pin a note, or unpin it."""
    note = await service.toggle_pin(user_id, note_id)
    return _envelope(note, request_id)


@router.post(
    "/{note_id}/toggle-archive",
    response_model=ApiResponse[NoteResponse],
    summary="Archive or unarchive a note",
)
async def toggle_archive(
    note_id: str,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Archive a note, or restore it."""
    note = await service.toggle_archive(user_id, note_id)
    return _envelope(note, request_id)


@router.post(
    "/{note_id}/toggle-delete",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note to or from the bin",
)
async def toggle_delete(
    note_id: str,
    user_id: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Soft-delete a note, or restore it from the bin."""
    note = await service.toggle_delete(user_id, note_id)
    return _envelope(note, request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note permanently",
    description="Permanently delete a note. The note must be in the bin.",
)
async def delete_note(
    note_id: str,
    user_id: CurrentUser,
    service: Notes,
) -> None:
    """Permanently delete a note."""
    await service.permanent_delete(user_id, note_id)
