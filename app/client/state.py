"""
Application state for a blog front end.

Holds the theme flag, the session user and a local copy of posts and
categories. The copy is updated optimistically after local edits and is
only reconciled with the server on the next hydrate(); a category added
locally keeps its temporary ``c<epoch-ms>`` id until then.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from app.client.gateway import BlogGateway
from app.core import clock

AVATAR_URL_TEMPLATE = "https://ui-avatars.com/api/?name={name}&background=random"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


@dataclass
class User:
    id: str
    username: str
    role: UserRole
    avatar_url: str


@dataclass
class BlogState:
    gateway: BlogGateway
    is_dark: bool = False
    user: Optional[User] = None
    posts: List[Dict[str, Any]] = field(default_factory=list)
    categories: List[Dict[str, Any]] = field(default_factory=list)
    loading: bool = True

    async def hydrate(self, prefers_dark: bool = False) -> None:
        """Apply the system theme preference and load posts and categories."""
        self.is_dark = prefers_dark
        try:
            posts, categories = await asyncio.gather(
                self.gateway.list_posts(),
                self.gateway.list_categories(),
            )
            self.posts = posts or []
            self.categories = categories or []
        finally:
            self.loading = False

    def teardown(self) -> None:
        """End the session. Loaded content stays in place."""
        self.logout()

    def toggle_theme(self) -> None:
        self.is_dark = not self.is_dark

    # --- Session ---

    def login(self, username: str, role: UserRole = UserRole.ADMIN) -> User:
        """
        Start a session. No credentials are checked: the role is whatever
        the caller asserts, and the server never sees it.
        """
        self.user = User(
            id=str(clock.now_ms()),
            username=username,
            role=UserRole(role),
            avatar_url=AVATAR_URL_TEMPLATE.format(name=quote(username)),
        )
        return self.user

    def logout(self) -> None:
        self.user = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == UserRole.ADMIN

    # --- Local (optimistic) updates ---

    def apply_saved_post(self, post: Dict[str, Any]) -> None:
        """Replace the post with the same id, or put a new one first."""
        for i, existing in enumerate(self.posts):
            if existing.get("id") == post.get("id"):
                self.posts[i] = post
                return
        self.posts.insert(0, post)

    def update_post(self, post: Dict[str, Any]) -> bool:
        """Replace the post with the same id in place. Unknown ids are ignored."""
        for i, existing in enumerate(self.posts):
            if existing.get("id") == post.get("id"):
                self.posts[i] = post
                return True
        return False

    def add_category_locally(self, name: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
        category = {"id": f"c{clock.now_ms()}", "name": name, "parentId": parent_id}
        self.categories.append(category)
        return category

    def remove_category_locally(self, category_id: str) -> None:
        self.categories = [c for c in self.categories if c.get("id") != category_id]
