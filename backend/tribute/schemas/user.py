"""
Pydantic schemas for User entity.
"""
from pydantic import EmailStr, Field
from typing import Optional
from tribute.models.user import UserRole
from tribute.schemas.common import CamelModel, UTCDateTime


class UserProfileFields(CamelModel):
    """Optional display fields shared by registration and profile update."""
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = None


class UserCreate(UserProfileFields):
    """Schema for registration."""
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=256)


class UserLogin(CamelModel):
    """Schema for user login."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserProfileUpdate(UserProfileFields):
    """Schema for a user editing their own profile."""
    profile_image_url: Optional[str] = Field(default=None, max_length=500)


class UserAccessUpdate(CamelModel):
    """Schema for an admin changing a user's role or ban state."""
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class SafeUser(CamelModel):
    """User projection sent to clients. Never carries the password hash."""
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: UserRole
    is_active: bool
    post_count: int
    thread_count: int
    last_login_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class AuthResponse(CamelModel):
    """Schema for register/login responses."""
    user: SafeUser
    message: str


class CurrentUserResponse(CamelModel):
    """Schema for GET /auth/me."""
    user: SafeUser
