from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, JSONType

# owner_id of a pet whose owner released it.
RELEASED_OWNER_ID = "0"


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    last_owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    family: Mapped[str | None] = mapped_column(String(120), nullable=True)
    gender: Mapped[int | None] = mapped_column(Integer, nullable=True)
    birth_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    create_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    update_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class Note(Base):
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[int | None] = mapped_column(Integer, nullable=True)
    images: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    pets: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    note_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    create_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
