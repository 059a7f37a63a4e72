from .service import LikeService

__all__ = ["LikeService"]
