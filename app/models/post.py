"""
Post Model

One blog article per row. Column names follow the camelCase layout the
front end was built against; Python attributes are snake_case.

Usage:
    from app.models.post import Post

    post = Post(
        id="1700000000000",
        title="On Patience",
        excerpt="A short reflection.",
        content="# On Patience\\n...",
        tags='["faith", "notes"]',
        created_at=1700000000000,
        updated_at=1700000000000,
    )
"""

from typing import Optional

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import BigInteger, Integer, Text, Index


class Post(SQLModel, table=True):
    """
    Blog post row.

    Attributes:
        id: Opaque primary key (caller-supplied or epoch-ms derived)
        title: Post title
        excerpt: Short preview text
        content: Full markdown-like body
        cover_image: Optional cover image URL
        audio_url: Optional audio attachment URL
        category_id: Category id, "" when uncategorized (no FK enforced)
        tags: JSON array serialized as text
        is_featured: 0/1 flag
        created_at: Epoch ms of first insert
        updated_at: Epoch ms of last write
        author_name: Denormalized author display name
    """

    __tablename__ = "posts"

    id: str = Field(sa_column=Column("id", Text, primary_key=True))
    title: Optional[str] = Field(default=None, sa_column=Column("title", Text))
    excerpt: Optional[str] = Field(default=None, sa_column=Column("excerpt", Text))
    content: Optional[str] = Field(default=None, sa_column=Column("content", Text))
    cover_image: Optional[str] = Field(default=None, sa_column=Column("coverImage", Text))
    created_at: int = Field(sa_column=Column("createdAt", BigInteger, nullable=False))
    updated_at: int = Field(sa_column=Column("updatedAt", BigInteger, nullable=False))
    category_id: str = Field(default="", sa_column=Column("categoryId", Text, nullable=False, default=""))
    tags: Optional[str] = Field(default="[]", sa_column=Column("tags", Text))
    is_featured: int = Field(default=0, sa_column=Column("isFeatured", Integer, nullable=False, default=0))
    audio_url: Optional[str] = Field(default=None, sa_column=Column("audioUrl", Text))
    author_name: Optional[str] = Field(default=None, sa_column=Column("authorName", Text))

    __table_args__ = (
        # Post list is always newest first
        Index("ix_posts_created_at", "createdAt"),
        # Category delete checks for referencing posts
        Index("ix_posts_category_id", "categoryId"),
    )


__all__ = ["Post"]
