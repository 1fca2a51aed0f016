import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import CallerId, get_oss_service
from app.core.error_codes import ErrorCode
from app.core.errors import ApiError
from app.core.security import unix_now
from app.db.session import get_db
from app.models import Note
from app.schemas.notes import AddNoteRequest, DeleteNoteRequest, NoteListResponse, NoteOut, NoteResponse
from app.schemas.pets import DeletedResponse
from app.services.oss import OSSService
from app.services.upload_grant import ContentClass

router = APIRouter(prefix="/api", tags=["notes"])
logger = logging.getLogger(__name__)


@router.get("/getNoteList", response_model=NoteListResponse)
def get_note_list(caller_id: CallerId, db: Session = Depends(get_db)) -> NoteListResponse:
    rows = db.execute(
        select(Note).where(Note.owner_id == caller_id).order_by(Note.note_time.desc().nulls_last(), Note.id.desc())
    ).scalars().all()
    logger.info("/getNoteList caller=%s count=%d", caller_id, len(rows))
    return NoteListResponse(data=[NoteOut.model_validate(row) for row in rows])


@router.post("/addNote", response_model=NoteResponse)
def add_note(payload: AddNoteRequest, caller_id: CallerId, db: Session = Depends(get_db)) -> NoteResponse:
    note = Note(
        owner_id=caller_id,
        content=payload.note.content,
        type=payload.note.type,
        images=list(payload.note.images),
        pets=list(payload.note.pets),
        note_time=payload.note.note_time,
        create_time=unix_now(),
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    logger.info("/addNote caller=%s note=%s", caller_id, note.id)
    return NoteResponse(data=NoteOut.model_validate(note))


@router.post("/deleteNote", response_model=DeletedResponse)
def delete_note(
    payload: DeleteNoteRequest,
    caller_id: CallerId,
    db: Session = Depends(get_db),
    oss: OSSService = Depends(get_oss_service),
) -> DeletedResponse:
    if not payload.note_id:
        raise ApiError(status_code=400, code=ErrorCode.INVALID_NOTE_ID, message="Note id is required")

    note = db.execute(
        select(Note).where(Note.id == payload.note_id, Note.owner_id == caller_id)
    ).scalars().first()
    if not note:
        raise ApiError(status_code=404, code=ErrorCode.NOTE_NOT_FOUND, message="Note not found")

    images = list(note.images or [])
    db.delete(note)
    db.commit()

    # Images live under the caller's own note prefix; anything else is left alone.
    prefix = f"{ContentClass.NOTE_IMAGE.directory}/{caller_id}/"
    for image_url in images:
        oss.delete_object(image_url, allowed_prefix=prefix)

    logger.info("/deleteNote caller=%s note=%s images=%d", caller_id, payload.note_id, len(images))
    return DeletedResponse(data=True)
