"""
Entity Store
============

Keyed record storage, one repository per entity type.

Every repository hands out integer ids starting at 1, monotonic per entity
type and never reused (not even after a delete). Lookups never raise on a
missing id: `get` and `update` return None and `delete` returns False.

Two backends share this contract:
- MemoryRepository / MemoryStorage (this module) - volatile dicts
- SqlRepository / SqlStorage (juriscrm.db.repository) - SQLAlchemy tables

The `Storage` facade adds the named lookups the API needs on top of the
repository primitives. Cross-entity side effects live in juriscrm.rules.
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import fields
from datetime import date, datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from .models import (
    User, Professional, Jurisdiction, Hearing, Payment, Task,
    HearingStatus, IMMUTABLE_FIELDS,
)

T = TypeVar("T")

Clock = Callable[[], datetime]


# =============================================================================
# Repository contract
# =============================================================================

class Repository(ABC, Generic[T]):
    """CRUD + predicate queries for a single entity type."""

    def __init__(self, entity_cls: Type[T], clock: Optional[Clock] = None):
        self.entity_cls = entity_cls
        self.clock = clock or datetime.now
        self._field_names = frozenset(f.name for f in fields(entity_cls))

    @property
    def name(self) -> str:
        return self.entity_cls.__name__

    @abstractmethod
    def get(self, entity_id: int) -> Optional[T]:
        """Return the record or None."""

    @abstractmethod
    def list(self) -> List[T]:
        """Return every record. Order is not part of the contract."""

    @abstractmethod
    def create(self, values: Mapping[str, Any]) -> T:
        """Store a new record, assigning its id and defaults."""

    @abstractmethod
    def update(self, entity_id: int, changes: Mapping[str, Any]) -> Optional[T]:
        """Overwrite only the supplied fields. None if the id does not exist."""

    @abstractmethod
    def delete(self, entity_id: int) -> bool:
        """Remove a record. Returns whether it existed. Never cascades."""

    def list_where(self, predicate: Callable[[T], bool]) -> List[T]:
        return [entity for entity in self.list() if predicate(entity)]

    def filter_by(self, **criteria: Any) -> List[T]:
        """Equality lookup on one or more fields."""
        self._check_fields(criteria)
        return self.list_where(
            lambda entity: all(getattr(entity, key) == value for key, value in criteria.items())
        )

    def first_where(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for entity in self.list():
            if predicate(entity):
                return entity
        return None

    def _check_fields(self, values: Mapping[str, Any]) -> None:
        unknown = set(values) - self._field_names
        if unknown:
            raise TypeError(f"{self.name} has no field(s): {', '.join(sorted(unknown))}")

    def _creation_values(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate input for create and stamp created_at where the entity has one."""
        data = {key: value for key, value in values.items() if key != "id"}
        self._check_fields(data)
        if "created_at" in self._field_names:
            data["created_at"] = self.clock()
        return data

    def _mutable_changes(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        self._check_fields(changes)
        return {key: value for key, value in changes.items() if key not in IMMUTABLE_FIELDS}


# =============================================================================
# In-memory backend
# =============================================================================

class MemoryRepository(Repository[T]):
    """
    Dict-backed repository with its own id counter.

    Records are copied on the way in and out so callers cannot mutate stored
    state behind the repository's back.
    """

    def __init__(self, entity_cls: Type[T], clock: Optional[Clock] = None):
        super().__init__(entity_cls, clock)
        self._records: Dict[int, T] = {}
        self._next_id = 1

    def get(self, entity_id: int) -> Optional[T]:
        record = self._records.get(entity_id)
        return copy.deepcopy(record) if record is not None else None

    def list(self) -> List[T]:
        return [copy.deepcopy(record) for record in self._records.values()]

    def create(self, values: Mapping[str, Any]) -> T:
        data = self._creation_values(values)
        entity_id = self._next_id
        record = self.entity_cls(id=entity_id, **copy.deepcopy(data))
        self._next_id += 1
        self._records[entity_id] = record
        return copy.deepcopy(record)

    def update(self, entity_id: int, changes: Mapping[str, Any]) -> Optional[T]:
        current = self._records.get(entity_id)
        if current is None:
            return None

        mutable = self._mutable_changes(changes)
        updated = copy.deepcopy(current)
        for f in fields(updated):
            if f.name in mutable:
                setattr(updated, f.name, copy.deepcopy(mutable[f.name]))

        self._records[entity_id] = updated
        return copy.deepcopy(updated)

    def delete(self, entity_id: int) -> bool:
        return self._records.pop(entity_id, None) is not None


# =============================================================================
# Storage facade
# =============================================================================

class Storage:
    """
    One repository per entity type plus the named lookups used by the API.

    Construct once per process and pass it to whoever needs it.
    """

    def __init__(
        self,
        users: Repository[User],
        professionals: Repository[Professional],
        jurisdictions: Repository[Jurisdiction],
        hearings: Repository[Hearing],
        payments: Repository[Payment],
        tasks: Repository[Task],
        clock: Optional[Clock] = None,
    ):
        self.users = users
        self.professionals = professionals
        self.jurisdictions = jurisdictions
        self.hearings = hearings
        self.payments = payments
        self.tasks = tasks
        self.clock = clock or datetime.now

    def today(self) -> date:
        return self.clock().date()

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.users.first_where(lambda u: u.username == username)

    # -------------------------------------------------------------------------
    # Professionals
    # -------------------------------------------------------------------------

    def professionals_by_jurisdiction(self, state: str) -> List[Professional]:
        """Professionals allowed to practice in the given state code."""
        return self.professionals.list_where(lambda p: state in p.jurisdictions)

    def professionals_by_type(self, professional_type: str) -> List[Professional]:
        return self.professionals.filter_by(type=professional_type)

    # -------------------------------------------------------------------------
    # Hearings
    # -------------------------------------------------------------------------

    def hearings_by_date(self, day: date) -> List[Hearing]:
        return self.hearings.filter_by(date=day)

    def hearings_by_professional(self, professional_id: int) -> List[Hearing]:
        return self.hearings.filter_by(professional_id=professional_id)

    def hearings_by_jurisdiction(self, jurisdiction_id: int) -> List[Hearing]:
        return self.hearings.filter_by(jurisdiction_id=jurisdiction_id)

    def hearings_by_status(self, status: str) -> List[Hearing]:
        return self.hearings.filter_by(status=status)

    def upcoming_hearings(self) -> List[Hearing]:
        """Hearings from today onwards, soonest first."""
        today = self.today()
        upcoming = self.hearings.list_where(lambda h: h.date >= today)
        return sorted(upcoming, key=lambda h: (h.date, h.time))

    def pending_assignment_hearings(self) -> List[Hearing]:
        return self.hearings_by_status(HearingStatus.PENDING.value)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def payments_by_professional(self, professional_id: int) -> List[Payment]:
        return self.payments.filter_by(professional_id=professional_id)

    def payments_by_status(self, status: str) -> List[Payment]:
        return self.payments.filter_by(status=status)

    def payments_by_hearing(self, hearing_id: int) -> List[Payment]:
        return self.payments.filter_by(hearing_id=hearing_id)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def tasks_by_status(self, status: str) -> List[Task]:
        return self.tasks.filter_by(status=status)

    def tasks_by_type(self, task_type: str) -> List[Task]:
        return self.tasks.filter_by(type=task_type)


class MemoryStorage(Storage):
    """Volatile storage: everything is lost when the process exits."""

    def __init__(self, clock: Optional[Clock] = None):
        clock = clock or datetime.now
        super().__init__(
            users=MemoryRepository(User, clock),
            professionals=MemoryRepository(Professional, clock),
            jurisdictions=MemoryRepository(Jurisdiction, clock),
            hearings=MemoryRepository(Hearing, clock),
            payments=MemoryRepository(Payment, clock),
            tasks=MemoryRepository(Task, clock),
            clock=clock,
        )
