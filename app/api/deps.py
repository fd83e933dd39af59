import secrets
from typing import Optional

from fastapi import Header

from app.core.config import settings
from app.core.errors import Unauthorized
from app.services.storage import ObjectStore, get_object_store

__all__ = ["require_auth", "get_store"]


def require_auth(authorization: Optional[str] = Header(default=None)) -> None:
    """
    Shared bearer-secret gate for mutating endpoints.

    The request must carry ``Authorization: Bearer <AUTH_SECRET>``. There is
    no per-user identity behind it.
    """
    expected = f"Bearer {settings.auth_secret}"
    if not authorization or not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise Unauthorized("Unauthorized")


def get_store() -> ObjectStore:
    return get_object_store()
