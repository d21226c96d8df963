"""
Tests for authentication endpoints.
"""
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from tribute.core.config import settings
from tribute.core.utils import utcnow
from tribute.models.session import UserSession
from tribute.models.user import User, UserRole
from tribute.services import session_service


def test_register(client, register):
    """Registration returns the safe user and logs the user in."""
    response = register(client, "neo", "neo@x.com", "password123")

    assert response.status_code == 201
    body = response.json()
    assert body["message"]
    assert body["user"]["username"] == "neo"
    assert body["user"]["email"] == "neo@x.com"
    assert body["user"]["role"] == "member"
    assert body["user"]["isActive"] is True
    assert body["user"]["postCount"] == 0
    assert body["user"]["threadCount"] == 0
    assert "passwordHash" not in body["user"]
    assert "password" not in body["user"]
    assert settings.SESSION_COOKIE_NAME in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["username"] == "neo"


def test_register_with_profile_fields(client, register):
    response = register(client, "trinity", firstName="Tri", lastName="Nity", displayName="T", bio="hi")

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["firstName"] == "Tri"
    assert user["lastName"] == "Nity"
    assert user["displayName"] == "T"
    assert user["bio"] == "hi"


def test_register_duplicate_username(make_client, register):
    register(make_client(), "neo", "neo@x.com")

    response = register(make_client(), "neo", "other@x.com")

    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"


def test_register_duplicate_email(make_client, register):
    register(make_client(), "neo", "neo@x.com")

    response = register(make_client(), "morpheus", "neo@x.com")

    assert response.status_code == 400
    assert response.json()["message"] == "Email already exists"


def test_username_uniqueness_is_case_sensitive(make_client, register):
    register(make_client(), "neo", "neo@x.com")

    response = register(make_client(), "Neo", "neo2@x.com")

    assert response.status_code == 201


def test_register_invalid_input(client, register):
    assert register(client, "ab").status_code == 400
    assert register(client, "x" * 51).status_code == 400
    assert register(client, "neo", email="not-an-email").status_code == 400

    missing = client.post("/api/auth/register", json={"username": "neo", "email": "neo@x.com"})
    assert missing.status_code == 400
    assert "password" in missing.json()["message"]


def test_validation_errors_do_not_echo_password(client, register):
    response = register(client, "neo", password="abc")

    assert response.status_code == 400
    assert "abc" not in response.text


def test_login(make_client, register, db):
    register(make_client(), "neo", password="password123")
    client = make_client()

    response = client.post("/api/auth/login", json={"username": "neo", "password": "password123"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "neo"
    assert body["user"]["lastLoginAt"] is not None
    assert "passwordHash" not in body["user"]
    assert client.get("/api/auth/me").status_code == 200


def test_login_failures_are_indistinguishable(client, register):
    register(client, "alice", password="password123")

    wrong_password = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    unknown_user = client.post("/api/auth/login", json={"username": "ghost", "password": "anything"})

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_login_disabled_account(make_client, register, db):
    register(make_client(), "neo", password="password123")
    user = db.query(User).filter(User.username == "neo").first()
    user.is_active = False
    db.commit()

    response = make_client().post("/api/auth/login", json={"username": "neo", "password": "password123"})

    assert response.status_code == 403


def test_logout(client, register, db):
    register(client, "neo")

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["message"]
    assert client.get("/api/auth/me").status_code == 401
    db.expire_all()
    assert db.query(UserSession).count() == 0


def test_logout_without_session_is_not_an_error(client):
    assert client.post("/api/auth/logout").status_code == 200


def test_me_without_session(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"]


def test_tampered_cookie_is_ignored(make_client, register):
    register(make_client(), "neo")
    client = make_client()
    client.cookies.set(settings.SESSION_COOKIE_NAME, "forged-value")

    assert client.get("/api/auth/me").status_code == 401


def test_role_change_applies_to_existing_session(member_client, set_role):
    """Authorization reads the stored role, not the session snapshot."""
    denied = member_client.post("/api/forum/categories", json={"name": "News"})
    assert denied.status_code == 403

    set_role("neo", UserRole.ADMIN)

    allowed = member_client.post("/api/forum/categories", json={"name": "News"})
    assert allowed.status_code == 201
    assert member_client.get("/api/auth/me").json()["user"]["role"] == "admin"


def test_disabled_user_session_is_rejected(member_client, db):
    user = db.query(User).filter(User.username == "neo").first()
    user.is_active = False
    db.commit()

    assert member_client.get("/api/auth/me").status_code == 401
    assert member_client.post(
        "/api/forum/threads", json={"categoryId": 1, "title": "t", "content": "c"}
    ).status_code == 401


def test_username_with_surrounding_whitespace_is_rejected(client, register):
    response = register(client, " neo ", email="neo@x.com")

    assert response.status_code == 400
    assert "whitespace" in response.json()["message"]


def test_logout_failure_still_clears_cookie(client, register, monkeypatch):
    register(client, "neo")

    def fail(sid, db):
        raise SQLAlchemyError("database unavailable")

    monkeypatch.setattr(session_service, "destroy_session", fail)
    response = client.post("/api/auth/logout")

    assert response.status_code == 500
    assert response.json() == {"message": "Logout failed"}
    cookie_header = response.headers.get("set-cookie", "")
    assert settings.SESSION_COOKIE_NAME in cookie_header
    assert "Max-Age=0" in cookie_header


def test_expired_session_is_rejected_and_removed(client, register, db):
    register(client, "neo")
    db.query(UserSession).update({UserSession.expire: utcnow() - timedelta(minutes=1)})
    db.commit()

    assert client.get("/api/auth/me").status_code == 401
    db.expire_all()
    assert db.query(UserSession).count() == 0


def test_login_purges_expired_sessions(make_client, register, db):
    register(make_client(), "neo")
    stale_sid = db.query(UserSession).first().sid
    db.query(UserSession).update({UserSession.expire: utcnow() - timedelta(days=1)})
    db.commit()

    response = make_client().post("/api/auth/login", json={"username": "neo", "password": "password123"})

    assert response.status_code == 200
    db.expire_all()
    sids = [s.sid for s in db.query(UserSession).all()]
    assert stale_sid not in sids
    assert len(sids) == 1
