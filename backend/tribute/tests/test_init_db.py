"""
Tests for the database bootstrap helpers.
"""
from tribute.core.config import settings
from tribute.core.security import verify_password
from tribute.db.init_db import DEFAULT_CATEGORIES, ensure_admin, seed_categories
from tribute.models import ForumCategory, User, UserRole


def test_seed_categories_once(db, monkeypatch):
    monkeypatch.setattr(settings, "SEED_DEFAULT_CATEGORIES", True)

    assert seed_categories(db) == len(DEFAULT_CATEGORIES)
    assert seed_categories(db) == 0
    assert db.query(ForumCategory).count() == len(DEFAULT_CATEGORIES)


def test_seed_categories_disabled(db, monkeypatch):
    monkeypatch.setattr(settings, "SEED_DEFAULT_CATEGORIES", False)

    assert seed_categories(db) == 0
    assert db.query(ForumCategory).count() == 0


def test_ensure_admin(db, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "root")
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "root@example.com")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "adminpass1")

    assert ensure_admin(db) is True
    assert ensure_admin(db) is False

    admin = db.query(User).filter(User.username == "root").first()
    assert admin.role == UserRole.ADMIN
    assert verify_password("adminpass1", admin.password_hash)


def test_ensure_admin_without_settings(db, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")

    assert ensure_admin(db) is False
    assert db.query(User).count() == 0
