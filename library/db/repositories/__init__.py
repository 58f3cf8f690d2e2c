from library.db.repositories.base import BookStore, CommentStore, UserStore
from library.db.repositories.book_repository import BookRepository
from library.db.repositories.comment_repository import CommentRepository
from library.db.repositories.user_repository import UserRepository
from library.db.repositories.memory import InMemoryBookStore, InMemoryCommentStore, InMemoryUserStore

__all__ = [
    "BookStore",
    "CommentStore",
    "UserStore",
    "BookRepository",
    "CommentRepository",
    "UserRepository",
    "InMemoryBookStore",
    "InMemoryCommentStore",
    "InMemoryUserStore"
]
