from __future__ import annotations

from datetime import date, timedelta
from typing import List

from sqlalchemy.orm import Session

from core.interfaces import CommitmentRepository, InstanceRepository
from core.models import AlertSeverity, CommitmentDirection, CommitmentPriority
from core.services.alerts.models import Alert
from core.services.common.base import ServiceBase
from core.services.projection.models import ProjectionDay
from core.services.projection.simulator import ProjectionService

ALERT_HORIZON_DAYS = 14
DUE_SOON_DAYS = 2
BUFFER_THRESHOLD = 500.0
INFO_LOOKAHEAD_DAYS = 4


class AlertService(ServiceBase):
    def __init__(
        self,
        session: Session,
        projection_service: ProjectionService,
        commitment_repo: CommitmentRepository,
        instance_repo: InstanceRepository,
    ):
        super().__init__(session)
        self._projection: ProjectionService = projection_service
        self._commitment_repo: CommitmentRepository = commitment_repo
        self._instance_repo: InstanceRepository = instance_repo

    def generate_alerts(self, as_of: date | None = None) -> List[Alert]:
        today = self._today(as_of)
        projection = self._projection.project(ALERT_HORIZON_DAYS, as_of=today)

        alerts: List[Alert] = []
        alerts.extend(self._negative_balance(projection))
        alerts.extend(self._bill_alerts(today))
        alerts.extend(self._buffer_warning(projection))
        alerts.extend(self._upcoming_summary(projection))
        return alerts

    def _negative_balance(self, projection: List[ProjectionDay]) -> List[Alert]:
        for day in projection:
            if day.balance < 0:
                return [
                    Alert(
                        severity=AlertSeverity.CRITICAL,
                        message=(
                            f"Projected balance goes negative ({day.balance:.2f}) "
                            f"on {day.day.isoformat()}"
                        ),
                        action="Move money from savings or defer a flexible bill",
                    )
                ]
        return []

    def _bill_alerts(self, today: date) -> List[Alert]:
        alerts: List[Alert] = []
        due_soon_end = today + timedelta(days=DUE_SOON_DAYS)
        for commitment in self._commitment_repo.list_active():
            if commitment.direction != CommitmentDirection.BILL or commitment.paid:
                continue
            instance = self._instance_repo.get_by_key(commitment.id, commitment.due_date)
            if instance is not None and instance.is_funded:
                continue
            remaining = instance.remaining_amount if instance is not None else commitment.amount

            if commitment.due_date < today:
                if commitment.priority == CommitmentPriority.CRITICAL:
                    alerts.append(
                        Alert(
                            severity=AlertSeverity.CRITICAL,
                            message=(
                                f"Overdue critical bill: {commitment.name} "
                                f"({remaining:.2f} remaining)"
                            ),
                            action=f"Pay {commitment.name} immediately",
                            commitment_id=commitment.id,
                        )
                    )
            elif commitment.due_date <= due_soon_end and not commitment.autopay:
                alerts.append(
                    Alert(
                        severity=AlertSeverity.CRITICAL,
                        message=(
                            f"{commitment.name} ({remaining:.2f} remaining) due within "
                            f"{DUE_SOON_DAYS * 24} hours"
                        ),
                        action=f"Schedule payment for {commitment.name}",
                        commitment_id=commitment.id,
                    )
                )
        return alerts

    def _buffer_warning(self, projection: List[ProjectionDay]) -> List[Alert]:
        for day in projection:
            if 0 <= day.balance < BUFFER_THRESHOLD:
                return [
                    Alert(
                        severity=AlertSeverity.WARNING,
                        message=(
                            f"Balance drops below {BUFFER_THRESHOLD:.0f} buffer on "
                            f"{day.day.isoformat()} ({day.balance:.2f})"
                        ),
                        action="Review upcoming flexible expenses to defer",
                    )
                ]
        return []

    def _upcoming_summary(self, projection: List[ProjectionDay]) -> List[Alert]:
        alerts: List[Alert] = []
        for day in projection[:INFO_LOOKAHEAD_DAYS]:
            if not day.occurrences:
                continue
            summary = ", ".join(f"{o.label} ({o.amount:.2f})" for o in day.occurrences)
            alerts.append(
                Alert(
                    severity=AlertSeverity.INFO,
                    message=f"{day.day.isoformat()}: {summary}",
                    action="Review upcoming transactions",
                )
            )
        return alerts


__all__ = [
    "AlertService",
    "ALERT_HORIZON_DAYS",
    "DUE_SOON_DAYS",
    "BUFFER_THRESHOLD",
    "INFO_LOOKAHEAD_DAYS",
]
