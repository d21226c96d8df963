"""
Database initialization script.

Creates tables, the bootstrap admin (when ADMIN_* settings are present)
and a default set of categories on an empty forum.

Usage: python -m tribute.db.init_db
"""
import logging
from sqlalchemy.orm import Session
from tribute.core.config import settings
from tribute.core.logging_config import setup_logging
from tribute.core.security import get_password_hash
from tribute.db.session import SessionLocal, init_db
from tribute.models import ForumCategory, User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Announcements", "News about the site and the forum"),
    ("General Discussion", "Talk about anything"),
    ("Memories & Tributes", "Share stories, photos and memories"),
    ("Off-Topic", "Everything else"),
]


def ensure_admin(db: Session) -> bool:
    """Create the configured admin account if it does not exist yet."""
    if not (settings.ADMIN_USERNAME and settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return False

    if db.query(User).filter(User.username == settings.ADMIN_USERNAME).first():
        return False

    db.add(User(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        is_active=True,
        post_count=0,
        thread_count=0,
    ))
    db.commit()
    logger.info(f"Created admin account '{settings.ADMIN_USERNAME}'")
    return True


def seed_categories(db: Session) -> int:
    """Add the default categories when none exist. Returns how many were created."""
    if not settings.SEED_DEFAULT_CATEGORIES or db.query(ForumCategory).count() > 0:
        return 0

    for index, (name, description) in enumerate(DEFAULT_CATEGORIES):
        db.add(ForumCategory(name=name, description=description, sort_order=index))
    db.commit()
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories")
    return len(DEFAULT_CATEGORIES)


def bootstrap():
    """Create tables and seed data."""
    init_db()
    db = SessionLocal()
    try:
        ensure_admin(db)
        seed_categories(db)
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    logger.info("Initializing database...")
    bootstrap()
    logger.info("Database initialized successfully!")
