from library.db.models.user import User
from library.db.models.book import Book
from library.db.models.comment import Comment

__all__ = [
    "User",
    "Book",
    "Comment",
]
