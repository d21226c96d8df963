"""
Server-side session model.
"""
from sqlalchemy import Column, String, DateTime, Integer, Text
from tribute.db.base import Base
import json


class UserSession(Base):
    """Session row keyed by an opaque id; the cookie only carries a signed copy of ``sid``."""
    __tablename__ = "sessions"

    sid = Column(String(64), primary_key=True)
    sess = Column(Text, nullable=False)  # JSON payload: {"userId": ..., "user": SafeUser}
    expire = Column(DateTime, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)  # mirrors sess["userId"] for bulk logout

    @property
    def payload(self) -> dict:
        return json.loads(self.sess) if self.sess else {}

    @payload.setter
    def payload(self, value: dict):
        self.sess = json.dumps(value, default=str)
