# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    String,
    Date,
    DateTime,
    Float,
    Boolean,
    ForeignKey,
    Enum as SAEnum,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.models import (
    AccountType,
    CommitmentDirection,
    CommitmentPriority,
    InstanceStatus,
    LedgerEntryType,
)


class AccountORM(Base):
    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType), default=AccountType.CHECKING, nullable=False
    )
    current_balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_reserve: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class CommitmentORM(Base):
    __tablename__ = "commitments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    direction: Mapped[CommitmentDirection] = mapped_column(SAEnum(CommitmentDirection), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    recurrence_rule: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)  # weekly, every_6_days, ...
    priority: Mapped[CommitmentPriority] = mapped_column(
        SAEnum(CommitmentPriority), default=CommitmentPriority.NORMAL, nullable=False
    )
    autopay: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    account_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    actual_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    paid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

Index("idx_commitments_active_due", CommitmentORM.active, CommitmentORM.due_date)


class CommitmentInstanceORM(Base):
    __tablename__ = "commitment_instances"
    __table_args__ = (
        UniqueConstraint("commitment_id", "due_date", name="ux_instance_commitment_due"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    commitment_id: Mapped[str] = mapped_column(
        String, ForeignKey("commitments.id", ondelete="CASCADE"), nullable=False
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    planned_amount: Mapped[float] = mapped_column(Float, nullable=False)
    allocated_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[InstanceStatus] = mapped_column(
        SAEnum(InstanceStatus), default=InstanceStatus.OPEN, nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_instances_status_due", CommitmentInstanceORM.status, CommitmentInstanceORM.due_date)


class LedgerEntryORM(Base):
    __tablename__ = "ledger_entries"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    entry_type: Mapped[LedgerEntryType] = mapped_column(SAEnum(LedgerEntryType), nullable=False)
    account_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    commitment_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("commitments.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("idx_ledger_date", LedgerEntryORM.entry_date, LedgerEntryORM.created_at)
Index("idx_ledger_account", LedgerEntryORM.account_id)


class LedgerLineItemORM(Base):
    __tablename__ = "ledger_line_items"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    ledger_entry_id: Mapped[str] = mapped_column(
        String, ForeignKey("ledger_entries.id", ondelete="CASCADE"), nullable=False
    )
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    commitment_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("commitments.id", ondelete="SET NULL"), nullable=True
    )
    instance_due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

Index("idx_line_items_ledger", LedgerLineItemORM.ledger_entry_id)


class AllocationORM(Base):
    __tablename__ = "commitment_allocations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    ledger_entry_id: Mapped[str] = mapped_column(
        String, ForeignKey("ledger_entries.id", ondelete="CASCADE"), nullable=False
    )
    instance_id: Mapped[str] = mapped_column(
        String, ForeignKey("commitment_instances.id", ondelete="CASCADE"), nullable=False
    )
    commitment_id: Mapped[str] = mapped_column(
        String, ForeignKey("commitments.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String, nullable=True)

Index("idx_allocations_ledger", AllocationORM.ledger_entry_id)
Index("idx_allocations_instance", AllocationORM.instance_id)


class CommitmentHistoryORM(Base):
    __tablename__ = "commitment_history"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    commitment_id: Mapped[str] = mapped_column(
        String, ForeignKey("commitments.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    actual_amount: Mapped[float] = mapped_column(Float, nullable=False)
    paid_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)

Index("idx_history_commitment", CommitmentHistoryORM.commitment_id)


class AuditLogORM(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    commitment_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    details_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

Index("idx_audit_logs_occurred_at", AuditLogORM.occurred_at)
Index("idx_audit_logs_entity", AuditLogORM.entity_type, AuditLogORM.entity_id)
