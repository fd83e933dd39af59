"""
Category Service

Categories form a tree through parent_id. A category may only be deleted
when no post files under it and no category names it as parent; the check
and the delete run as one conditional statement.
"""

import logging
from typing import List, Optional

from sqlalchemy import text
from sqlmodel import Session, select

from app.core import clock
from app.core.errors import Conflict, ValidationError, store_errors
from app.models.category import Category
from app.models.post import Post
from app.schemas import CategoryOut

logger = logging.getLogger(__name__)

# Deletes only when unreferenced. Column names are quoted because they are
# mixed-case in the schema.
CONDITIONAL_DELETE = text("""
    DELETE FROM categories
    WHERE id = :id
    AND NOT EXISTS (SELECT 1 FROM posts WHERE "categoryId" = :id)
    AND NOT EXISTS (SELECT 1 FROM categories AS child WHERE child."parentId" = :id)
""")

HAS_POSTS_MESSAGE = "Category has posts and cannot be deleted"
HAS_CHILDREN_MESSAGE = "Category has subcategories; delete them first"


def to_category_out(category: Category) -> CategoryOut:
    return CategoryOut(id=category.id, name=category.name, parent_id=category.parent_id)


def list_categories(session: Session) -> List[CategoryOut]:
    with store_errors(session, "list_categories"):
        rows = session.exec(select(Category)).all()
        return [to_category_out(row) for row in rows]


def create_category(session: Session, name: Optional[str], parent_id: Optional[str]) -> CategoryOut:
    """
    Create a category. The name is trimmed and must not be empty; an empty
    or missing parent_id makes it a root category.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Category name cannot be empty")

    category = Category(
        id=str(clock.now_ms()),
        name=trimmed,
        parent_id=parent_id or None,
    )
    result = to_category_out(category)

    with store_errors(session, "create_category", category_id=category.id):
        session.add(category)
        session.commit()

    logger.info("Created category %s (%s)", result.id, result.name)
    return result


def delete_category(session: Session, category_id: str) -> None:
    """
    Delete a category if nothing references it.

    Raises Conflict when a post or a child category still points at it.
    Unknown ids are a no-op.
    """
    with store_errors(session, "delete_category", category_id=category_id):
        deleted = session.execute(CONDITIONAL_DELETE, {"id": category_id}).rowcount
        session.commit()

        if deleted:
            logger.info("Deleted category %s", category_id)
            return

        # Nothing was deleted: explain why, if anything blocked it
        has_posts = session.exec(select(Post.id).where(Post.category_id == category_id).limit(1)).first()
        has_children = session.exec(
            select(Category.id).where(Category.parent_id == category_id).limit(1)
        ).first()

    if has_posts is not None:
        raise Conflict(HAS_POSTS_MESSAGE)
    if has_children is not None:
        raise Conflict(HAS_CHILDREN_MESSAGE)
