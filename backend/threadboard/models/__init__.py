from threadboard.models.base import RecordState
from threadboard.models.comment import Comment
from threadboard.models.file import ALLOWED_MIME_TYPES, File
from threadboard.models.like import Like
from threadboard.models.post import Post, PostStats
from threadboard.models.user import User

__all__ = [
    "ALLOWED_MIME_TYPES",
    "Comment",
    "File",
    "Like",
    "Post",
    "PostStats",
    "RecordState",
    "User",
]
