from blogapi.models.post import Post
from blogapi.models.user import User

__all__ = ["Post", "User"]
