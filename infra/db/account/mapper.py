from __future__ import annotations

from core.models import Account, AccountType
from infra.db.models import AccountORM


def account_to_orm(account: Account) -> AccountORM:
    return AccountORM(
        id=account.id,
        name=account.name,
        account_type=account.account_type,
        current_balance=float(account.current_balance),
        is_reserve=bool(account.is_reserve),
        updated_at=account.updated_at,
    )


def account_from_orm(obj: AccountORM) -> Account:
    return Account(
        id=obj.id,
        name=obj.name,
        account_type=AccountType(obj.account_type) if obj.account_type else AccountType.CHECKING,
        current_balance=float(obj.current_balance or 0.0),
        is_reserve=bool(obj.is_reserve),
        updated_at=obj.updated_at,
    )


__all__ = ["account_to_orm", "account_from_orm"]
