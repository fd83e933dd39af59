from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (coverImage, isFeatured, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Author(CamelModel):
    username: str
    role: str = "ADMIN"


class AuthorIn(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    username: Optional[str] = None


class PostIn(CamelModel):
    """Full post payload for save. Unknown keys (createdAt, ...) are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    audio_url: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = False
    author: Optional[AuthorIn] = None


class PostOut(CamelModel):
    id: str
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    audio_url: Optional[str] = None
    category_id: str = ""
    tags: List[str] = []
    is_featured: bool = False
    created_at: int
    updated_at: int
    author_name: Optional[str] = None
    author: Author


class SaveResult(BaseModel):
    success: bool
    id: str


class SuccessResult(BaseModel):
    success: bool = True


class UploadResult(BaseModel):
    url: str


class CategoryIn(CamelModel):
    name: Optional[str] = None
    parent_id: Optional[str] = None


class CategoryOut(CamelModel):
    id: str
    name: str
    parent_id: Optional[str] = None
