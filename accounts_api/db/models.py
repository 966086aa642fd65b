"""SQLAlchemy models for accounts and the orders that reference them."""
from __future__ import annotations

import enum
import uuid
from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    String,
    Text,
    func,
)

from accounts_api.core.tokens import ResetToken

from .session import Base


class Role(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


def _new_id() -> str:
    return uuid.uuid4().hex


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(32), primary_key=True, default=_new_id)
    display_name = Column(String(255), nullable=True)
    phone = Column(String(32), unique=True, nullable=True)
    email = Column(String(255), nullable=True, index=True)
    address = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    role = Column(String(32), default=Role.CUSTOMER.value, nullable=False)
    password_hash = Column(Text, nullable=True)
    reset_token = Column(String(64), nullable=True, index=True)
    reset_expires_at = Column(DateTime(timezone=True), nullable=True)
    reset_completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def reset(self) -> Optional[ResetToken]:
        """Pending reset token, if any."""
        if not self.reset_token or self.reset_expires_at is None:
            return None
        return ResetToken(token=self.reset_token, expires_at=self.reset_expires_at)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_id)
    # Plain reference; account deletion removes orders explicitly by id.
    account_id = Column(String(32), nullable=False, index=True)
    status = Column(String(32), default="new", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
