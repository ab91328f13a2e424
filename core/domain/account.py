from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.enums import AccountType
from core.domain.identifiers import generate_id


@dataclass
class Account:
    id: str
    name: str
    account_type: AccountType = AccountType.CHECKING
    current_balance: float = 0.0
    is_reserve: bool = False
    updated_at: Optional[datetime] = None

    @property
    def is_spendable(self) -> bool:
        return not self.is_reserve

    @staticmethod
    def create(
        name: str,
        account_type: AccountType = AccountType.CHECKING,
        current_balance: float = 0.0,
        is_reserve: bool = False,
    ) -> "Account":
        return Account(
            id=generate_id(),
            name=name,
            account_type=account_type,
            current_balance=float(current_balance),
            is_reserve=is_reserve,
            updated_at=datetime.now(timezone.utc),
        )


__all__ = ["Account"]
