"""
Futelt Backend — Message ORM Model
====================================

What:  Maps the `messages` table used by the durable store.
Who:   SqlMessageStore (inserts and listing) and Alembic (schema tracking).

Table:
    id    INTEGER PRIMARY KEY, assigned by the database on insert
    text  TEXT NOT NULL, stored exactly as submitted

Rows are only ever inserted. Listing orders by id DESC, served by the
primary key index.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from futelt.database import Base


class Message(Base):
    """A journal message as stored in the database."""

    __tablename__ = "messages"

    # On SQLite this column aliases the rowid: a rolled-back insert leaves
    # no gap because the next insert takes max(id) + 1.
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, text_length={len(self.text or '')})>"
