"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update, delete

from accounts_api.db.models import Account, Order
from accounts_api.db.session import get_session


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- accounts --------------------------
    def get_account(self, account_id: str) -> Optional[Account]:
        if not account_id:
            return None
        with get_session() as session:
            return session.get(Account, account_id)

    def get_account_by_phone(self, phone: str) -> Optional[Account]:
        if not phone:
            return None
        with get_session() as session:
            stmt = select(Account).where(Account.phone == phone)
            return session.execute(stmt).scalar_one_or_none()

    def get_account_by_email(self, email: str) -> Optional[Account]:
        if not email:
            return None
        with get_session() as session:
            stmt = select(Account).where(Account.email == email).order_by(Account.created_at).limit(1)
            return session.execute(stmt).scalars().first()

    def create_account(self, **fields) -> Account:
        entity = Account(**fields)
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_account_where(self, *criteria, **values) -> Optional[Account]:
        """
        Atomically apply ``values`` to one account matching ``criteria``.

        The matching row is locked and the criteria are repeated in the UPDATE,
        so of two racing callers only one sees a row change. Returns the
        post-update record, or None when nothing matched.
        """
        with get_session() as session:
            stmt = select(Account.id).where(*criteria).limit(1).with_for_update()
            account_id = session.execute(stmt).scalar_one_or_none()
            if account_id is None:
                session.rollback()
                return None
            result = session.execute(
                update(Account)
                .where(Account.id == account_id, *criteria)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                session.rollback()
                return None
            session.commit()
            return session.get(Account, account_id)

    def delete_account(self, account_id: str) -> int:
        with get_session() as session:
            result = session.execute(delete(Account).where(Account.id == account_id))
            session.commit()
            return result.rowcount or 0

    # -------------------------- orders --------------------------
    def create_order(self, account_id: str, status: str = "new") -> Order:
        entity = Order(account_id=account_id, status=status)
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def list_orders_for_account(self, account_id: str) -> list[Order]:
        with get_session() as session:
            stmt = select(Order).where(Order.account_id == account_id).order_by(Order.created_at)
            return session.execute(stmt).scalars().all()

    def delete_orders_for_account(self, account_id: str) -> int:
        with get_session() as session:
            result = session.execute(delete(Order).where(Order.account_id == account_id))
            session.commit()
            return result.rowcount or 0
