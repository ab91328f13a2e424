from infra.db.account.mapper import account_from_orm, account_to_orm
from infra.db.account.repository import SqlAlchemyAccountRepository

__all__ = [
    "account_to_orm",
    "account_from_orm",
    "SqlAlchemyAccountRepository",
]
