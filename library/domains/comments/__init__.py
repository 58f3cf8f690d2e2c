from library.domains.comments.entities import Comment, validate_comment
from library.domains.comments.schemas import CommentResponse, NewComment

__all__ = [
    "Comment", "validate_comment",
    "CommentResponse", "NewComment"
]
