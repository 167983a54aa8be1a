from .dto import PostCreateIn, PostListIn, PostOut, PostUpdateIn
from .service import PostService

__all__ = ["PostService", "PostCreateIn", "PostUpdateIn", "PostListIn", "PostOut"]
