"""
Domain validators for deck-related business rules.
"""

from typing import Optional

from slidetrack.domain.exceptions import InvalidInputError

MAX_TITLE_LENGTH = 200
MAX_PAGES = 1000


class DeckValidators:
    @staticmethod
    def validate_title(title: Optional[str]) -> str:
        """Validate deck title meets business requirements."""
        if not title or not title.strip():
            raise InvalidInputError("Deck title cannot be empty")

        title = title.strip()
        if len(title) > MAX_TITLE_LENGTH:
            raise InvalidInputError(
                f"Deck title cannot exceed {MAX_TITLE_LENGTH} characters"
            )
        return title

    @staticmethod
    def validate_total_pages(total_pages: Optional[int]) -> int:
        """Page count comes from the PDF pipeline and must be positive."""
        if total_pages is None:
            raise InvalidInputError("total_pages is required")

        if isinstance(total_pages, bool) or not isinstance(total_pages, int):
            raise InvalidInputError("total_pages must be an integer")

        if total_pages < 1:
            raise InvalidInputError("Deck must contain at least one page")

        if total_pages > MAX_PAGES:
            raise InvalidInputError(f"Deck cannot contain more than {MAX_PAGES} pages")

        return total_pages

    @staticmethod
    def validate_file_size(file_size: Optional[int]) -> None:
        if file_size is not None and file_size < 0:
            raise InvalidInputError("file_size cannot be negative")
