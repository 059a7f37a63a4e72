from .service import PostService

__all__ = ["PostService"]
