"""Unit tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from library_api.api.schemas import AuthorPayload, BookPayload


class TestBookSchemas:
    """Tests for Book schemas."""

    def test_book_payload_camel_case(self):
        """Test BookPayload accepts the camelCase wire names."""
        book = BookPayload.model_validate(
            {"title": "Dune", "coverText": "Spice", "comment": "Classic", "idAuthor": 7}
        )
        assert book.title == "Dune"
        assert book.cover_text == "Spice"
        assert book.comment == "Classic"
        assert book.id_author == 7

    def test_book_payload_snake_case(self):
        """Test BookPayload also accepts field names."""
        book = BookPayload(title="Dune", cover_text="Spice")
        assert book.cover_text == "Spice"
        assert book.id_author is None
        assert book.comment is None

    def test_book_payload_empty_title(self):
        """Test BookPayload with empty title fails."""
        with pytest.raises(ValidationError):
            BookPayload(title="", cover_text="Spice")

    def test_book_payload_missing_cover_text(self):
        """Test BookPayload without cover text fails."""
        with pytest.raises(ValidationError) as exc_info:
            BookPayload.model_validate({"title": "Dune"})
        assert exc_info.value.errors()[0]["loc"] == ("coverText",)

    def test_book_payload_title_too_long(self):
        """Test BookPayload with title exceeding max length fails."""
        with pytest.raises(ValidationError):
            BookPayload(title="x" * 256, cover_text="Spice")

    def test_book_payload_cover_text_too_long(self):
        with pytest.raises(ValidationError):
            BookPayload(title="Dune", cover_text="x" * 256)


class TestAuthorSchemas:
    """Tests for Author schemas."""

    def test_author_payload_valid(self):
        author = AuthorPayload.model_validate({"firstName": "Frank", "lastName": "Herbert"})
        assert author.first_name == "Frank"
        assert author.last_name == "Herbert"

    def test_author_payload_blank_first_name(self):
        with pytest.raises(ValidationError):
            AuthorPayload.model_validate({"firstName": "", "lastName": "Herbert"})

    def test_author_payload_missing_last_name(self):
        with pytest.raises(ValidationError):
            AuthorPayload.model_validate({"firstName": "Frank"})
