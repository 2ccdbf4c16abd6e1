"""Book model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.core.database import Base

if TYPE_CHECKING:
    from library_api.models.author import Author


class Book(Base):
    """Model representing a book."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    cover_text: Mapped[str] = mapped_column(Text, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("authors.id", ondelete="CASCADE"),
        nullable=True,
    )

    # Relationships
    author: Mapped[Author | None] = relationship(
        "Author",
        back_populates="books",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', author_id={self.author_id})>"
