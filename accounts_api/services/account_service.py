"""
Account and credential lifecycle use cases.

Registration (guest and full), login, password set/reset/update, profile
update and account deletion. Every failure is raised as one of the
``accounts_api.core.errors`` exceptions and reaches the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from accounts_api.core.config import Settings, get_settings
from accounts_api.core.errors import BadRequest, Forbidden, InternalError, InvalidValue, NotFound
from accounts_api.core.mailer import MailDeliveryError, MailStatus, send_reset_email
from accounts_api.core.security import CredentialHasher
from accounts_api.core.tokens import issue_reset_token
from accounts_api.core.utils import clean
from accounts_api.db.models import Account
from accounts_api.repositories.sql_repository import SQLRepository
from accounts_api.services.session_service import issue_session

logger = logging.getLogger(__name__)

NO_PASSWORD_MESSAGE = "You don't have a password yet. Please set a new one"
MODIFICATION_FORBIDDEN = "Modification not permitted"


@dataclass
class RegisterResult:
    account: Account
    session_token: str


@dataclass
class LoginResult:
    account: Account
    session_token: Optional[str]
    message: str


@dataclass
class ResetRequestResult:
    status: str
    message: str


@dataclass
class StatusResult:
    status: bool
    message: str


@dataclass
class AccountResult:
    account: Account
    message: str


@dataclass
class DeleteResult:
    orders_deleted: int
    accounts_deleted: int


@dataclass
class AccountService:
    """Orchestrates the account store, the credential hasher, reset tokens and the mailer."""

    settings: Optional[Settings] = None
    repository: Optional[SQLRepository] = None
    mailer: Optional[Callable[..., MailStatus]] = None
    hasher: Optional[CredentialHasher] = field(default=None, repr=False)

    def __post_init__(self):
        self.settings = self.settings or get_settings()
        self.repository = self.repository or SQLRepository()
        self.mailer = self.mailer or partial(send_reset_email, settings=self.settings)
        self.hasher = self.hasher or CredentialHasher.from_settings(self.settings)

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _require_account(self, account_id: str) -> Account:
        account = self.repository.get_account(account_id)
        if not account:
            raise NotFound("Can't find user")
        return account

    def _issue_session(self, account: Account) -> str:
        return issue_session(account.id, self.settings)

    # -------------------------------------- registration --------------------------------------
    def register_guest(self, phone: str, display_name: str | None = None, address: str | None = None) -> Account:
        """Return the account owning ``phone``, creating a password-less one if none exists."""
        phone = clean(phone)
        if not phone:
            raise BadRequest("Phone is required")
        existing = self.repository.get_account_by_phone(phone)
        if existing:
            return existing
        try:
            account = self.repository.create_account(
                phone=phone,
                display_name=clean(display_name),
                address=clean(address),
            )
        except IntegrityError as exc:
            # Another request claimed the phone between lookup and insert.
            existing = self.repository.get_account_by_phone(phone)
            if existing:
                return existing
            raise InternalError("Server error! Try again") from exc
        except SQLAlchemyError as exc:
            logger.error("Guest registration failed: %s", exc)
            raise InternalError("Server error! Try again") from exc
        logger.info("Registered guest account %s", account.id)
        return account

    def register_full(self, phone: str | None, display_name: str | None, password: str) -> RegisterResult:
        phone = clean(phone)
        if not password:
            raise BadRequest("Password is required")
        taken = f"User with phone {phone} already exists. Please log in"
        if phone and self.repository.get_account_by_phone(phone):
            raise BadRequest(taken)
        password_hash = self.hasher.hash(password)
        try:
            account = self.repository.create_account(
                phone=phone,
                display_name=clean(display_name),
                password_hash=password_hash,
            )
        except IntegrityError as exc:
            raise BadRequest(taken) from exc
        except SQLAlchemyError as exc:
            logger.error("Registration failed: %s", exc)
            raise InternalError("Server error! Try again") from exc
        logger.info("Registered account %s", account.id)
        return RegisterResult(account=account, session_token=self._issue_session(account))

    # -------------------------------------- login --------------------------------------
    def login(self, phone: str, password: str) -> LoginResult:
        account = self.repository.get_account_by_phone(clean(phone) or "")
        if not account:
            raise NotFound("Can't find user")
        if not account.has_password:
            return LoginResult(account=account, session_token=None, message=NO_PASSWORD_MESSAGE)
        if not self.hasher.verify(password, account.password_hash):
            raise BadRequest("Incorrect login or password")
        if self.hasher.needs_rehash(account.password_hash):
            upgraded = self.repository.update_account_where(
                Account.id == account.id,
                Account.password_hash == account.password_hash,
                password_hash=self.hasher.hash(password),
            )
            account = upgraded or account
        return LoginResult(
            account=account,
            session_token=self._issue_session(account),
            message=f"User {account.display_name or account.phone} successfully logged in",
        )

    def login_by_token(self, account_id: str) -> Account:
        return self._require_account(account_id)

    # -------------------------------------- passwords --------------------------------------
    def set_password(self, account_id: str, password: str) -> AccountResult:
        """Set the first password of an account that has none."""
        if not password:
            raise BadRequest("No data!")
        account = self._require_account(account_id)
        if account.has_password:
            raise Forbidden("You already have a password. Please log in")
        updated = self.repository.update_account_where(
            Account.id == account.id,
            Account.password_hash.is_(None),
            password_hash=self.hasher.hash(password),
        )
        if not updated:
            raise Forbidden(MODIFICATION_FORBIDDEN)
        return AccountResult(account=updated, message="Password successfully set")

    def confirm_password(self, account_id: str, password: str) -> StatusResult:
        account = self._require_account(account_id)
        if not self.hasher.verify(password, account.password_hash):
            raise BadRequest("Wrong password!")
        return StatusResult(status=True, message="Password confirmed")

    def update_password(self, account_id: str, password: str) -> StatusResult:
        if not password:
            raise BadRequest("No data!")
        account = self._require_account(account_id)
        if self.hasher.verify(password, account.password_hash):
            raise BadRequest("The same password!")
        updated = self.repository.update_account_where(
            Account.id == account.id,
            password_hash=self.hasher.hash(password),
        )
        if not updated:
            raise Forbidden(MODIFICATION_FORBIDDEN)
        return StatusResult(status=True, message=f"User {updated.display_name or updated.id} successfully updated")

    # -------------------------------------- password reset --------------------------------------
    def request_reset(self, email: str) -> ResetRequestResult:
        email = clean(email)
        account = self.repository.get_account_by_email(email or "")
        if not account:
            raise NotFound("Can't find user with this email")
        now = self._now()
        pending = account.reset
        if pending and not pending.is_expired(now):
            logger.info("Replacing pending password reset for account %s", account.id)
        reset = issue_reset_token(self.settings.password_reset_ttl, now=now)
        updated = self.repository.update_account_where(
            Account.id == account.id,
            reset_token=reset.token,
            reset_expires_at=reset.expires_at,
        )
        if not updated:
            raise Forbidden(MODIFICATION_FORBIDDEN)
        logger.info("Issued password reset for account %s", account.id)
        try:
            status = self.mailer(reset.token, email)
        except MailDeliveryError as exc:
            raise InvalidValue(exc.message or "Can't send mail") from exc
        return ResetRequestResult(
            status=status.response,
            message=f"Email successfully sent to {', '.join(status.accepted)}",
        )

    def consume_reset(self, token: str, password: str) -> StatusResult:
        """
        Commit ``password`` for the account holding ``token``.

        Wrong and expired tokens fail with the same Forbidden error. The token
        is cleared in the same conditional update that stores the new hash, so
        it can be used once.
        """
        token = clean(token)
        if not token:
            raise Forbidden(MODIFICATION_FORBIDDEN)
        if not password:
            raise BadRequest("No data!")
        password_hash = self.hasher.hash(password)
        now = self._now()
        updated = self.repository.update_account_where(
            Account.reset_token == token,
            Account.reset_expires_at > now,
            password_hash=password_hash,
            reset_token=None,
            reset_expires_at=None,
            reset_completed_at=now,
        )
        if not updated:
            raise Forbidden(MODIFICATION_FORBIDDEN)
        logger.info("Password reset completed for account %s", updated.id)
        return StatusResult(status=True, message="New password successfully set")

    # -------------------------------------- profile --------------------------------------
    def update_profile(self, account_id: str, profile: dict | None) -> AccountResult:
        """Replace display name, email and address; missing keys are stored as null."""
        if not profile:
            raise BadRequest("No data!")
        updated = self.repository.update_account_where(
            Account.id == account_id,
            display_name=clean(profile.get("display_name")),
            email=clean(profile.get("email")),
            address=clean(profile.get("address")),
        )
        if not updated:
            raise Forbidden(MODIFICATION_FORBIDDEN)
        return AccountResult(account=updated, message=f"User {updated.display_name or updated.id} successfully updated")

    # -------------------------------------- deletion --------------------------------------
    def delete_account(self, account_id: str) -> DeleteResult:
        """
        Delete the account's orders, then the account.

        The two deletes are not atomic; a failure in between leaves the account
        in place with its orders already gone.
        """
        account = self._require_account(account_id)
        orders_deleted = self.repository.delete_orders_for_account(account.id)
        accounts_deleted = self.repository.delete_account(account.id)
        logger.info("Deleted account %s and %d orders", account.id, orders_deleted)
        return DeleteResult(orders_deleted=orders_deleted, accounts_deleted=accounts_deleted)
