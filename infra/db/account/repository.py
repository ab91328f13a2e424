from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.interfaces import AccountRepository
from core.models import Account
from infra.db.account.mapper import account_from_orm, account_to_orm
from infra.db.models import AccountORM


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SqlAlchemyAccountRepository(AccountRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, account: Account) -> None:
        self.session.add(account_to_orm(account))
        self.session.flush()

    def update(self, account: Account) -> None:
        account.updated_at = _now()
        self.session.execute(
            update(AccountORM)
            .where(AccountORM.id == account.id)
            .values(
                name=account.name,
                account_type=account.account_type,
                current_balance=float(account.current_balance),
                is_reserve=bool(account.is_reserve),
                updated_at=account.updated_at,
            )
        )

    def delete(self, account_id: str) -> None:
        self.session.query(AccountORM).filter_by(id=account_id).delete()

    def get(self, account_id: str) -> Optional[Account]:
        obj = self.session.get(AccountORM, account_id, populate_existing=True)
        return account_from_orm(obj) if obj else None

    def list_all(self) -> List[Account]:
        stmt = select(AccountORM).order_by(AccountORM.name)
        rows = self.session.execute(stmt.execution_options(populate_existing=True)).scalars().all()
        return [account_from_orm(row) for row in rows]

    def adjust_balance(self, account_id: str, delta: float) -> None:
        self.session.execute(
            update(AccountORM)
            .where(AccountORM.id == account_id)
            .values(
                current_balance=AccountORM.current_balance + float(delta),
                updated_at=_now(),
            )
        )

    def set_balance(self, account_id: str, balance: float) -> None:
        self.session.execute(
            update(AccountORM)
            .where(AccountORM.id == account_id)
            .values(current_balance=float(balance), updated_at=_now())
        )


__all__ = ["SqlAlchemyAccountRepository"]
