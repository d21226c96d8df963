"""
Forum service for category, thread and post business logic.

Denormalized counters are bumped with single UPDATE statements
(``post_count = post_count + 1``) inside the same transaction as the
insert that triggers them, so concurrent writers never lose increments.
"""
import logging
from typing import List
from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tribute.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from tribute.core.utils import utcnow
from tribute.models.forum import ForumCategory, ForumThread, ForumPost
from tribute.models.user import User, UserRole
from tribute.schemas.forum import (
    CategoryCreate, CategoryUpdate, ThreadCreate, ThreadUpdate, PostCreate
)

logger = logging.getLogger(__name__)


def _increment(column, by: int = 1):
    return column + by


def _decrement(column):
    """Decrement without going below zero."""
    return case((column > 0, column - 1), else_=0)


def _require_text(value: str, field: str) -> str:
    """Strip ``value`` and reject blanks."""
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{field} is required")
    return value


def _changed_fields(schema, nullable=()) -> dict:
    """
    Fields explicitly sent in a partial update. Nulls are ignored except
    for the ``nullable`` fields, where null clears the stored value.
    """
    return {
        k: v for k, v in schema.model_dump(exclude_unset=True).items()
        if v is not None or k in nullable
    }


def can_moderate(user: User) -> bool:
    """Moderators and admins may act on content they do not own."""
    return user.has_role(UserRole.MODERATOR)


def _check_owner_or_moderator(owner_id: int, actor: User, action: str):
    if actor.id != owner_id and not can_moderate(actor):
        raise ForbiddenError(f"You are not allowed to {action}")


# Categories

def list_categories(db: Session) -> List[ForumCategory]:
    """Active categories ordered by sort_order, then creation order."""
    return db.query(ForumCategory).filter(
        ForumCategory.is_active.is_(True)
    ).order_by(ForumCategory.sort_order.asc(), ForumCategory.id.asc()).all()


def get_category(category_id: int, db: Session) -> ForumCategory:
    category = db.query(ForumCategory).filter(ForumCategory.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def create_category(category_data: CategoryCreate, db: Session) -> ForumCategory:
    """Create a category. Admin checks happen at the API layer."""
    category = ForumCategory(
        name=_require_text(category_data.name, "Category name"),
        description=category_data.description or None,
        sort_order=category_data.sort_order or 0,
        thread_count=0,
        post_count=0,
        is_active=True,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Created category '{category.name}' (id={category.id})")
    return category


def update_category(category_id: int, changes: CategoryUpdate, db: Session) -> ForumCategory:
    """Update category fields. Setting is_active=False hides it from listings."""
    category = get_category(category_id, db)
    data = _changed_fields(changes, nullable=("description",))
    if not data:
        raise InvalidInputError("Nothing to update")

    if "name" in data:
        data["name"] = _require_text(data["name"], "Category name")

    for field, value in data.items():
        setattr(category, field, value)
    db.commit()
    db.refresh(category)

    logger.info(f"Updated category id={category.id}: {sorted(data)}")
    return category


# Threads

def list_threads_by_category(category_id: int, db: Session) -> List[ForumThread]:
    """Sticky threads first, then most recently active."""
    return db.query(ForumThread).filter(
        ForumThread.category_id == category_id
    ).order_by(
        ForumThread.is_sticky.desc(),
        ForumThread.last_post_at.desc(),
        ForumThread.id.desc()
    ).all()


def get_thread(thread_id: int, db: Session) -> ForumThread:
    thread = db.query(ForumThread).filter(ForumThread.id == thread_id).first()
    if not thread:
        raise NotFoundError("Thread not found")
    return thread


def record_thread_view(thread_id: int, db: Session) -> ForumThread:
    """Fetch a thread and count the view."""
    thread = get_thread(thread_id, db)
    db.execute(
        update(ForumThread)
        .where(ForumThread.id == thread.id)
        .values(view_count=_increment(ForumThread.view_count))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(thread)
    return thread


def create_thread(thread_data: ThreadCreate, author: User, db: Session) -> ForumThread:
    """Open a thread in an existing category."""
    title = _require_text(thread_data.title, "Title")
    content = _require_text(thread_data.content, "Content")
    category = get_category(thread_data.category_id, db)

    now = utcnow()
    thread = ForumThread(
        category_id=category.id,
        user_id=author.id,
        title=title,
        content=content,
        is_locked=False,
        is_sticky=False,
        post_count=0,
        view_count=0,
        last_post_at=now,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(thread)
        db.flush()
        db.execute(
            update(ForumCategory)
            .where(ForumCategory.id == category.id)
            .values(thread_count=_increment(ForumCategory.thread_count))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(User)
            .where(User.id == author.id)
            .values(thread_count=_increment(User.thread_count))
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(thread)

    logger.info(f"User id={author.id} opened thread id={thread.id} in category id={category.id}")
    return thread


def update_thread(thread_id: int, changes: ThreadUpdate, actor: User, db: Session) -> ForumThread:
    """
    Edit a thread. The author or a moderator may change title/content;
    only moderators may lock or pin.
    """
    thread = get_thread(thread_id, db)
    data = _changed_fields(changes)
    if not data:
        raise InvalidInputError("Nothing to update")

    if ("is_locked" in data or "is_sticky" in data) and not can_moderate(actor):
        raise ForbiddenError("Only moderators can lock or pin threads")
    if "title" in data or "content" in data:
        _check_owner_or_moderator(thread.user_id, actor, "edit this thread")

    if "title" in data:
        data["title"] = _require_text(data["title"], "Title")
    if "content" in data:
        data["content"] = _require_text(data["content"], "Content")

    for field, value in data.items():
        setattr(thread, field, value)
    db.commit()
    db.refresh(thread)

    logger.info(f"User id={actor.id} updated thread id={thread.id}: {sorted(data)}")
    return thread


# Posts

def list_posts_by_thread(thread_id: int, db: Session) -> List[ForumPost]:
    """Visible replies in chronological order."""
    return db.query(ForumPost).filter(
        ForumPost.thread_id == thread_id,
        ForumPost.is_deleted.is_(False)
    ).order_by(ForumPost.created_at.asc(), ForumPost.id.asc()).all()


def get_post(post_id: int, db: Session) -> ForumPost:
    """Direct lookup. Soft-deleted posts are still returned."""
    post = db.query(ForumPost).filter(ForumPost.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


def create_post(post_data: PostCreate, author: User, db: Session) -> ForumPost:
    """
    Reply to a thread and update the thread, category and author counters
    in one transaction. last_post_at only ever moves forward.
    """
    content = _require_text(post_data.content, "Content")
    thread = get_thread(post_data.thread_id, db)
    if thread.is_locked and not can_moderate(author):
        raise ForbiddenError("Thread is locked")

    now = utcnow()
    post = ForumPost(
        thread_id=thread.id,
        user_id=author.id,
        content=content,
        is_deleted=False,
        edit_count=0,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(post)
        db.flush()
        db.execute(
            update(ForumThread)
            .where(ForumThread.id == thread.id)
            .values(
                post_count=_increment(ForumThread.post_count),
                last_post_at=case(
                    (ForumThread.last_post_at < now, now),
                    else_=ForumThread.last_post_at
                ),
                last_post_user_id=author.id,
                last_post_id=post.id,
            )
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(ForumCategory)
            .where(ForumCategory.id == thread.category_id)
            .values(
                post_count=_increment(ForumCategory.post_count),
                last_post_id=post.id,
            )
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(User)
            .where(User.id == author.id)
            .values(post_count=_increment(User.post_count))
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(post)

    logger.info(f"User id={author.id} replied to thread id={thread.id} (post id={post.id})")
    return post


def edit_post(post_id: int, content: str, editor: User, db: Session) -> ForumPost:
    """Edit a reply's content, tracking who edited it and how often."""
    post = get_post(post_id, db)
    if post.is_deleted:
        raise NotFoundError("Post not found")
    _check_owner_or_moderator(post.user_id, editor, "edit this post")

    post.content = _require_text(content, "Content")
    post.edit_count = _increment(ForumPost.edit_count)
    post.edited_at = utcnow()
    post.edited_by_user_id = editor.id
    db.commit()
    db.refresh(post)
    return post


def delete_post(post_id: int, actor: User, db: Session) -> ForumPost:
    """
    Soft-delete a reply and take it out of the counters.
    Deleting an already deleted post changes nothing.
    """
    post = get_post(post_id, db)
    _check_owner_or_moderator(post.user_id, actor, "delete this post")
    if post.is_deleted:
        return post

    thread = get_thread(post.thread_id, db)
    try:
        post.is_deleted = True
        db.execute(
            update(ForumThread)
            .where(ForumThread.id == thread.id)
            .values(post_count=_decrement(ForumThread.post_count))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(ForumCategory)
            .where(ForumCategory.id == thread.category_id)
            .values(post_count=_decrement(ForumCategory.post_count))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            update(User)
            .where(User.id == post.user_id)
            .values(post_count=_decrement(User.post_count))
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(post)

    logger.info(f"User id={actor.id} deleted post id={post.id}")
    return post
