"""Post endpoints: public reads, bearer-gated writes."""
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.deps import require_auth
from app.db import get_session
from app.schemas import PostIn, PostOut, SaveResult, SuccessResult
from app.services import posts as post_service

router = APIRouter()


@router.get("", response_model=List[PostOut])
def list_posts(session: Session = Depends(get_session)) -> Any:
    """List all posts, newest first."""
    return post_service.list_posts(session)


@router.get("/{post_id}", response_model=PostOut)
def get_post(post_id: str, session: Session = Depends(get_session)) -> Any:
    return post_service.get_post(session, post_id)


@router.post("", response_model=SaveResult, dependencies=[Depends(require_auth)])
def save_post(payload: PostIn, session: Session = Depends(get_session)) -> Any:
    """
    Create or replace a post.

    The payload is the full post; every field is rewritten on update except
    createdAt and the author name recorded at creation.
    """
    post_id = post_service.save_post(session, payload)
    return SaveResult(success=True, id=post_id)


@router.delete("/{post_id}", response_model=SuccessResult, dependencies=[Depends(require_auth)])
def delete_post(post_id: str, session: Session = Depends(get_session)) -> Any:
    """Delete a post. Succeeds for unknown ids too."""
    post_service.delete_post(session, post_id)
    return SuccessResult(success=True)
