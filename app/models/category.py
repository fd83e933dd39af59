from typing import Optional

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Text, Index


class Category(SQLModel, table=True):
    """
    A node in the category tree. parent_id is None for root categories.
    Acyclicity is not enforced by the store.
    """

    __tablename__ = "categories"

    id: str = Field(sa_column=Column("id", Text, primary_key=True))
    name: str = Field(sa_column=Column("name", Text, nullable=False))
    parent_id: Optional[str] = Field(default=None, sa_column=Column("parentId", Text, nullable=True))

    __table_args__ = (Index("ix_categories_parent_id", "parentId"),)


__all__ = ["Category"]
