"""Database schema for moviedb.

Every collection shares a single ``documents`` table. A document is
stored as a JSON body keyed by ``(collection, doc_id)``; the
autoincrement ``seq`` column records insertion order.
"""

from typing import Any

from sqlalchemy import JSON, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Document(Base):
    """A stored entity of one collection.

    Invariant: UNIQUE(collection, doc_id)
    ``doc_id`` is the string form of the entity's ``_id``; the body
    keeps the original ``_id`` value.
    """

    __tablename__ = "documents"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    doc_id: Mapped[str] = mapped_column(String(128), nullable=False)
    body: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (UniqueConstraint("collection", "doc_id", name="uq_document_identity"),)
