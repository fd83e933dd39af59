from .post import Post
from .category import Category

__all__ = [
    "Post",
    "Category",
]
