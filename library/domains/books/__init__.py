from library.domains.books.entities import Book, validate_book_fields
from library.domains.books.schemas import BookCreate, BookPatch, BookResponse

__all__ = [
    "Book", "validate_book_fields",
    "BookCreate", "BookPatch", "BookResponse"
]
