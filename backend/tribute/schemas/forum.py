"""
Pydantic schemas for forum categories, threads and posts.
"""
from pydantic import Field
from typing import Optional
from tribute.schemas.common import CamelModel, UTCDateTime


class CategoryCreate(CamelModel):
    """Schema for category creation."""
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    sort_order: Optional[int] = None


class CategoryUpdate(CamelModel):
    """Schema for category update. Only provided fields change."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryResponse(CamelModel):
    """Schema for category response."""
    id: int
    name: str
    description: Optional[str] = None
    sort_order: int
    thread_count: int
    post_count: int
    last_post_id: Optional[int] = None
    is_active: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class ThreadCreate(CamelModel):
    """Schema for thread creation."""
    category_id: int
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)


class ThreadUpdate(CamelModel):
    """Schema for thread update. Lock/sticky flags are moderator-only."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    is_locked: Optional[bool] = None
    is_sticky: Optional[bool] = None


class ThreadResponse(CamelModel):
    """Schema for thread response."""
    id: int
    category_id: int
    user_id: int
    title: str
    content: str
    is_locked: bool
    is_sticky: bool
    post_count: int
    view_count: int
    last_post_at: UTCDateTime
    last_post_user_id: Optional[int] = None
    last_post_id: Optional[int] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class PostCreate(CamelModel):
    """Schema for reply creation."""
    thread_id: int
    content: str = Field(min_length=1)


class PostUpdate(CamelModel):
    """Schema for editing a reply."""
    content: str = Field(min_length=1)


class PostResponse(CamelModel):
    """Schema for post response."""
    id: int
    thread_id: int
    user_id: int
    content: str
    is_deleted: bool
    edit_count: int
    edited_at: Optional[UTCDateTime] = None
    edited_by_user_id: Optional[int] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
