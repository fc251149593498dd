"""
SQL-backed repositories.

Same contract as the memory backend (juriscrm.store). Each primitive runs in
its own session and commits on success, so composite operations built on top
of several primitives are not atomic.
"""

from contextlib import AbstractContextManager
from dataclasses import asdict
from typing import Any, Callable, List, Mapping, Optional, Type

from sqlalchemy.orm import Session

from ..models import User, Professional, Jurisdiction, Hearing, Payment, Task
from ..store import Clock, Repository, Storage, T
from .models import UserRow, ProfessionalRow, JurisdictionRow, HearingRow, PaymentRow, TaskRow
from .session import get_db_session

SessionFactory = Callable[[], AbstractContextManager]


class SqlRepository(Repository[T]):
    """Repository over one SQLAlchemy table; rows are returned as dataclass records."""

    def __init__(
        self,
        entity_cls: Type[T],
        row_cls: Type,
        session_factory: SessionFactory = get_db_session,
        clock: Optional[Clock] = None,
    ):
        super().__init__(entity_cls, clock)
        self.row_cls = row_cls
        self._session = session_factory

    def _to_entity(self, row) -> T:
        values = {name: getattr(row, name) for name in self._field_names}
        if isinstance(values.get("jurisdictions"), list):
            values["jurisdictions"] = list(values["jurisdictions"])
        return self.entity_cls(**values)

    def _query(self, db: Session):
        return db.query(self.row_cls).order_by(self.row_cls.id)

    def get(self, entity_id: int) -> Optional[T]:
        with self._session() as db:
            row = db.get(self.row_cls, entity_id)
            return self._to_entity(row) if row is not None else None

    def list(self) -> List[T]:
        with self._session() as db:
            return [self._to_entity(row) for row in self._query(db).all()]

    def filter_by(self, **criteria: Any) -> List[T]:
        self._check_fields(criteria)
        with self._session() as db:
            return [self._to_entity(row) for row in self._query(db).filter_by(**criteria).all()]

    def create(self, values: Mapping[str, Any]) -> T:
        data = self._creation_values(values)
        # Build the record first so dataclass defaults apply the same way as in memory.
        draft = asdict(self.entity_cls(id=0, **data))
        draft.pop("id")
        with self._session() as db:
            row = self.row_cls(**draft)
            db.add(row)
            db.flush()
            return self._to_entity(row)

    def update(self, entity_id: int, changes: Mapping[str, Any]) -> Optional[T]:
        mutable = self._mutable_changes(changes)
        with self._session() as db:
            row = db.get(self.row_cls, entity_id)
            if row is None:
                return None
            for key, value in mutable.items():
                setattr(row, key, list(value) if isinstance(value, (list, tuple, set)) else value)
            db.flush()
            return self._to_entity(row)

    def delete(self, entity_id: int) -> bool:
        with self._session() as db:
            row = db.get(self.row_cls, entity_id)
            if row is None:
                return False
            db.delete(row)
            return True


class SqlStorage(Storage):
    """Durable storage on the configured DATABASE_URL."""

    def __init__(self, session_factory: SessionFactory = get_db_session, clock: Optional[Clock] = None):
        def repo(entity_cls, row_cls):
            return SqlRepository(entity_cls, row_cls, session_factory, clock)

        super().__init__(
            users=repo(User, UserRow),
            professionals=repo(Professional, ProfessionalRow),
            jurisdictions=repo(Jurisdiction, JurisdictionRow),
            hearings=repo(Hearing, HearingRow),
            payments=repo(Payment, PaymentRow),
            tasks=repo(Task, TaskRow),
            clock=clock,
        )
