"""
Forum routes for categories, threads and posts.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tribute.db.session import get_db
from tribute.models.user import User
from tribute.schemas.forum import (
    CategoryCreate, CategoryUpdate, CategoryResponse,
    ThreadCreate, ThreadUpdate, ThreadResponse,
    PostCreate, PostUpdate, PostResponse
)
from tribute.services import forum_service
from tribute.api.dependencies import get_current_user, require_admin

router = APIRouter(prefix="/forum", tags=["forum"])


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(db: Session = Depends(get_db)):
    """List active categories."""
    return forum_service.list_categories(db)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create a category (admin only)."""
    return forum_service.create_category(category_data, db)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    changes: CategoryUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Rename, reorder or disable a category (admin only)."""
    return forum_service.update_category(category_id, changes, db)


@router.get("/categories/{category_id}/threads", response_model=List[ThreadResponse])
async def list_threads(
    category_id: int,
    db: Session = Depends(get_db)
):
    """List threads in a category, sticky first."""
    return forum_service.list_threads_by_category(category_id, db)


@router.get("/threads/{thread_id}", response_model=ThreadResponse)
async def get_thread(
    thread_id: int,
    db: Session = Depends(get_db)
):
    """Get a thread and count the view."""
    return forum_service.record_thread_view(thread_id, db)


@router.post("/threads", response_model=ThreadResponse, status_code=status.HTTP_201_CREATED)
async def create_thread(
    thread_data: ThreadCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Open a new thread."""
    return forum_service.create_thread(thread_data, current_user, db)


@router.patch("/threads/{thread_id}", response_model=ThreadResponse)
async def update_thread(
    thread_id: int,
    changes: ThreadUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit a thread, or lock/pin it as a moderator."""
    return forum_service.update_thread(thread_id, changes, current_user, db)


@router.get("/threads/{thread_id}/posts", response_model=List[PostResponse])
async def list_posts(
    thread_id: int,
    db: Session = Depends(get_db)
):
    """List visible replies in a thread."""
    return forum_service.list_posts_by_thread(thread_id, db)


@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Reply to a thread."""
    return forum_service.create_post(post_data, current_user, db)


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    db: Session = Depends(get_db)
):
    """Get a single post, including soft-deleted ones."""
    return forum_service.get_post(post_id, db)


@router.patch("/posts/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: int,
    post_update: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit a reply (author or moderator)."""
    return forum_service.edit_post(post_id, post_update.content, current_user, db)


@router.delete("/posts/{post_id}", response_model=PostResponse)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Soft-delete a reply (author or moderator)."""
    return forum_service.delete_post(post_id, current_user, db)
