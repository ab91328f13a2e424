from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session


class ServiceBase:
    def __init__(self, session: Session):
        self._session = session

    @staticmethod
    def _today(as_of: date | None = None) -> date:
        return as_of or date.today()
