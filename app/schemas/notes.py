from pydantic import Field

from app.schemas.pets import CamelModel


class NoteIn(CamelModel):
    content: str | None = None
    type: int | None = None
    images: list[str] = Field(default_factory=list)
    pets: list[int | str] = Field(default_factory=list)
    note_time: int | None = None


class NoteOut(NoteIn):
    id: int
    owner_id: str
    create_time: int | None = None


class AddNoteRequest(CamelModel):
    note: NoteIn


class DeleteNoteRequest(CamelModel):
    note_id: int | None = None


class NoteResponse(CamelModel):
    data: NoteOut


class NoteListResponse(CamelModel):
    data: list[NoteOut]
