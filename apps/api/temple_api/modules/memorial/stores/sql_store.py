from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from temple_api.core.errors import PersistenceError
from temple_api.core.ids import new_ulid, now_iso

from ..models import MemorialInstance
from .base import InstanceRecord


def _to_record(row: MemorialInstance) -> InstanceRecord:
    return InstanceRecord(
        id=row.id,
        deceased_id=row.deceased_id,
        year=row.year,
        due_date=row.due_date,
        memorial_rule_id=row.memorial_rule_id,
        completed_at=row.completed_at,
    )


class SqlInstanceStore:
    """
    Session-backed store. Writes are flushed per row so constraint violations
    surface inside the loop; commit/rollback belongs to the caller.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, deceased_id: str, year: int) -> Optional[InstanceRecord]:
        try:
            row = self.session.exec(
                select(MemorialInstance).where(
                    MemorialInstance.deceased_id == deceased_id,
                    MemorialInstance.year == year,
                )
            ).first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"memorial instance lookup failed: {e}") from e
        return _to_record(row) if row is not None else None

    def create(self, *, deceased_id: str, year: int, due_date: date, memorial_rule_id: str) -> InstanceRecord:
        now = now_iso()
        row = MemorialInstance(
            id=new_ulid(),
            deceased_id=deceased_id,
            memorial_rule_id=memorial_rule_id,
            year=year,
            due_date=due_date,
            event_id=None,
            completed_at=None,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(row)
            self.session.flush()
        except IntegrityError as e:
            # concurrent insert on (deceased_id, year): caller may retry
            raise PersistenceError(
                "memorial instance insert conflicted",
                retryable=True,
                details={"deceased_id": deceased_id, "year": year},
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"memorial instance insert failed: {e}") from e
        return _to_record(row)

    def update(self, instance_id: str, *, due_date: date, memorial_rule_id: str) -> InstanceRecord:
        try:
            row = self.session.get(MemorialInstance, instance_id)
            if row is None:
                raise PersistenceError("memorial instance not found", details={"id": instance_id})
            row.due_date = due_date
            row.memorial_rule_id = memorial_rule_id
            row.updated_at = now_iso()
            self.session.add(row)
            self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"memorial instance update failed: {e}") from e
        return _to_record(row)
