from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import AccountRepository, CommitmentRepository, LedgerRepository
from core.models import Account, AccountType
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        session: Session,
        account_repo: AccountRepository,
        commitment_repo: CommitmentRepository,
        ledger_repo: LedgerRepository,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._account_repo: AccountRepository = account_repo
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._ledger_repo: LedgerRepository = ledger_repo
        self._audit_service: AuditService | None = audit_service

    @staticmethod
    def _coerce_type(value) -> AccountType:
        if isinstance(value, AccountType):
            return value
        try:
            return AccountType(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(
                "Account type must be checking, savings, cash or credit.",
                code="INVALID_ACCOUNT_TYPE",
            ) from exc

    def _require_account(self, account_id: str) -> Account:
        account = self._account_repo.get(account_id)
        if account is None:
            raise NotFoundError("Account not found.", code="ACCOUNT_NOT_FOUND")
        return account

    def create_account(
        self,
        name: str,
        account_type: AccountType | str = AccountType.CHECKING,
        current_balance: float = 0.0,
        is_reserve: bool = False,
    ) -> Account:
        if not name or not name.strip():
            raise ValidationError("Account name cannot be empty.", code="ACCOUNT_NAME_EMPTY")
        account = Account.create(
            name=name.strip(),
            account_type=self._coerce_type(account_type),
            current_balance=float(current_balance or 0.0),
            is_reserve=bool(is_reserve),
        )
        try:
            self._account_repo.add(account)
            record_audit(
                self,
                action="account.create",
                entity_type="account",
                entity_id=account.id,
                details={"name": account.name, "balance": account.current_balance},
            )
            self._session.commit()
            logger.info(f"Created account {account.id} - {account.name}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error creating account: {exc}")
            raise
        domain_events.accounts_changed.emit(account.id)
        return account

    def update_account(
        self,
        account_id: str,
        name: str | None = None,
        account_type: AccountType | str | None = None,
        is_reserve: bool | None = None,
    ) -> Account:
        account = self._require_account(account_id)
        if name is not None:
            if not name.strip():
                raise ValidationError("Account name cannot be empty.", code="ACCOUNT_NAME_EMPTY")
            account.name = name.strip()
        if account_type is not None:
            account.account_type = self._coerce_type(account_type)
        if is_reserve is not None:
            account.is_reserve = bool(is_reserve)
        try:
            self._account_repo.update(account)
            record_audit(
                self,
                action="account.update",
                entity_type="account",
                entity_id=account.id,
                details={"name": account.name, "is_reserve": account.is_reserve},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        domain_events.accounts_changed.emit(account.id)
        return account

    def reconcile(self, account_id: str, actual_balance: float) -> Account:
        """Overwrite the tracked balance with what the bank actually shows."""
        account = self._require_account(account_id)
        if actual_balance is None:
            raise ValidationError("Actual balance is required.", code="BALANCE_REQUIRED")
        previous = account.current_balance
        try:
            self._account_repo.set_balance(account.id, float(actual_balance))
            record_audit(
                self,
                action="account.reconcile",
                entity_type="account",
                entity_id=account.id,
                details={
                    "previous_balance": previous,
                    "actual_balance": float(actual_balance),
                    "difference": round(float(actual_balance) - previous, 2),
                },
            )
            self._session.commit()
            logger.info(f"Reconciled account {account.id}: {previous:.2f} -> {float(actual_balance):.2f}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error reconciling account {account_id}: {exc}")
            raise
        domain_events.accounts_changed.emit(account.id)
        return self._require_account(account.id)

    def delete_account(self, account_id: str) -> None:
        account = self._require_account(account_id)
        try:
            self._commitment_repo.detach_account(account_id)
            self._ledger_repo.detach_account(account_id)
            self._account_repo.delete(account_id)
            record_audit(
                self,
                action="account.delete",
                entity_type="account",
                entity_id=account_id,
                details={"name": account.name, "balance": account.current_balance},
            )
            self._session.commit()
            logger.info(f"Deleted account {account_id} - {account.name}")
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error deleting account {account_id}: {exc}")
            raise
        domain_events.accounts_changed.emit(account_id)

    def get_account(self, account_id: str) -> Account | None:
        return self._account_repo.get(account_id)

    def list_accounts(self) -> List[Account]:
        return self._account_repo.list_all()

    def spendable_balance(self) -> float:
        return sum(a.current_balance for a in self._account_repo.list_all() if a.is_spendable)


__all__ = ["AccountService"]
