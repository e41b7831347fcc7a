"""User model for email/password and Google-linked accounts."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from notetaking.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    User identity record.

    A row with ``is_email_verified`` false is a pending signup: it holds a
    one-time code and no password, and cannot log in. ``otp`` and
    ``otp_expiry`` are set together and cleared together.
    """

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=True)

    # Google subject id, set when the account is created or linked via Google
    google_id = Column(String(255), unique=True, nullable=True)
    avatar = Column(String(2048), nullable=True)

    is_email_verified = Column(Boolean, nullable=False, default=False)

    # Pending-verification window
    otp = Column(String(16), nullable=True)
    otp_expiry = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    notes = relationship("Note", back_populates="owner", cascade="all, delete-orphan")

    @property
    def is_pending(self) -> bool:
        return not self.is_email_verified

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, verified={self.is_email_verified})>"
