"""Author model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.core.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class Author(Base):
    """Model representing a book author."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Books go with their author; the foreign key cascades in the database.
    # No delete-orphan: a book may outlive losing its author reference.
    books: Mapped[list[Book]] = relationship(
        "Book",
        back_populates="author",
        cascade="all",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.first_name} {self.last_name}')>"
