"""
Post Service

Reads, upserts and deletes posts, and shapes rows into the API form:
- tags: JSON text column -> list (never raises on bad data)
- isFeatured: 0/1 -> bool
- author: synthesized from authorName, role is always ADMIN
"""

import json
import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select, desc

from app.core import clock
from app.core.errors import NotFound, StoreError, store_errors
from app.models.post import Post
from app.schemas import Author, PostIn, PostOut

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Admin"
AUTHOR_ROLE = "ADMIN"

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

# Rewritten on every save; createdAt and authorName are set once
OVERWRITTEN_COLUMNS = (
    "title",
    "excerpt",
    "content",
    "coverImage",
    "updatedAt",
    "categoryId",
    "tags",
    "isFeatured",
    "audioUrl",
)


def parse_tags(raw: Optional[str]) -> List[str]:
    """Decode the tags column. Missing or malformed data yields []."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed tags value: %r", raw[:100])
        return []
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value]


def serialize_tags(tags: Optional[List[str]]) -> str:
    return json.dumps(tags or [], ensure_ascii=False, separators=(",", ":"))


def to_post_out(post: Post) -> PostOut:
    return PostOut(
        id=post.id,
        title=post.title,
        excerpt=post.excerpt,
        content=post.content,
        cover_image=post.cover_image,
        audio_url=post.audio_url,
        category_id=post.category_id or "",
        tags=parse_tags(post.tags),
        is_featured=bool(post.is_featured),
        created_at=post.created_at,
        updated_at=post.updated_at,
        author_name=post.author_name,
        author=Author(username=post.author_name or DEFAULT_AUTHOR, role=AUTHOR_ROLE),
    )


def list_posts(session: Session) -> List[PostOut]:
    """All posts, newest first."""
    with store_errors(session, "list_posts"):
        rows = session.exec(select(Post).order_by(desc(Post.created_at))).all()
        return [to_post_out(row) for row in rows]


def get_post(session: Session, post_id: str) -> PostOut:
    with store_errors(session, "get_post", post_id=post_id):
        post = session.get(Post, post_id)
    if post is None:
        raise NotFound("Not found")
    return to_post_out(post)


def save_post(session: Session, payload: PostIn) -> str:
    """
    Insert or wholesale-replace a post keyed by id.

    A single INSERT ... ON CONFLICT statement, so concurrent saves of the
    same id end with the last writer's fields instead of a key violation.
    Updates keep createdAt and authorName from the first insert and refresh
    updatedAt. Returns the post id (derived from the clock when absent).
    """
    now = clock.now_ms()
    post_id = payload.id or str(now)
    author_name = (payload.author.username if payload.author else None) or DEFAULT_AUTHOR

    row = {
        "id": post_id,
        "title": payload.title,
        "excerpt": payload.excerpt,
        "content": payload.content,
        "coverImage": payload.cover_image,
        "createdAt": now,
        "updatedAt": now,
        "categoryId": payload.category_id or "",
        "tags": serialize_tags(payload.tags),
        "isFeatured": 1 if payload.is_featured else 0,
        "audioUrl": payload.audio_url,
        "authorName": author_name,
    }

    dialect = session.get_bind().dialect.name
    insert = UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise StoreError(f"Saving posts is not supported on {dialect}")

    with store_errors(session, "save_post", post_id=post_id):
        stmt = insert(Post.__table__).values(row)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={column: stmt.excluded[column] for column in OVERWRITTEN_COLUMNS},
        )
        session.execute(stmt)
        session.commit()

    logger.info("Saved post %s", post_id)
    return post_id


def delete_post(session: Session, post_id: str) -> None:
    """Delete by id. Unknown ids are a no-op."""
    with store_errors(session, "delete_post", post_id=post_id):
        session.execute(delete(Post).where(Post.id == post_id))
        session.commit()
