"""
Domain Rules Engine
===================

Cross-entity logic layered on top of the entity store:

1. Eligibility - which professionals may take a hearing
   (active + practices in the hearing's state + specialization == area)
2. Lifecycle side effects - minutes upload, payment creation/update and
   professional assignment keep Hearing, Payment and Task records in sync
3. Hearing status state machine:

       pending  -> assigned | completed | cancelled
       assigned -> pending | completed | cancelled
       completed, cancelled: terminal
4. Dashboard statistics computed on demand from the store

Missing records are reported as None, never raised. Rule violations raise
HearingDeskError subclasses. Composite operations are best-effort and not
atomic: the hearing side of a payment is skipped when the hearing is gone.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from dateutil.relativedelta import relativedelta

from .errors import IneligibleProfessionalError, InvalidTransitionError
from .models import (
    Hearing, HearingStatus, Jurisdiction, Payment, PaymentStatus, Professional, Task, TaskType,
)
from .store import Storage
from .task_derivation import complete_pending_task, derive_tasks, resolve_stale_tasks

logger = logging.getLogger(__name__)


# =============================================================================
# Hearing state machine
# =============================================================================

ALLOWED_TRANSITIONS: Dict[str, frozenset] = {
    HearingStatus.PENDING.value: frozenset({
        HearingStatus.ASSIGNED.value,
        HearingStatus.COMPLETED.value,
        HearingStatus.CANCELLED.value,
    }),
    HearingStatus.ASSIGNED.value: frozenset({
        HearingStatus.PENDING.value,  # professional removed
        HearingStatus.COMPLETED.value,
        HearingStatus.CANCELLED.value,
    }),
    HearingStatus.COMPLETED.value: frozenset(),
    HearingStatus.CANCELLED.value: frozenset(),
}


def can_transition(current: str, requested: str) -> bool:
    """Staying in the same state is always allowed."""
    if current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def validate_transition(current: str, requested: str) -> None:
    if not can_transition(current, requested):
        raise InvalidTransitionError(current, requested)


# =============================================================================
# Eligibility
# =============================================================================

def is_eligible(professional: Professional, area: str, jurisdiction: Optional[Jurisdiction]) -> bool:
    """Exact, case-sensitive match on state code and specialization."""
    return (
        professional.active
        and jurisdiction is not None
        and jurisdiction.state in professional.jurisdictions
        and professional.specialization == area
    )


# =============================================================================
# Statistics
# =============================================================================

@dataclass
class HearingStats:
    today_count: int
    pending_assignment: int
    pending_minutes: int
    pending_payments: int


@dataclass
class FinancialSummary:
    period: str
    total: float
    pending: float
    paid: float


def period_start(period: str, now: datetime) -> Optional[datetime]:
    """Start of the trailing window for a period; None means unfiltered."""
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now - relativedelta(months=1)
    if period == "year":
        return now - relativedelta(years=1)
    return None


# =============================================================================
# Rules engine
# =============================================================================

class RulesEngine:
    """
    Composite operations over a Storage.

    Holds no state of its own besides the storage handle and rule switches.
    """

    def __init__(
        self,
        storage: Storage,
        enforce_transitions: bool = True,
        enforce_eligibility: bool = True,
        minutes_due_days: int = 2,
        payment_due_days: int = 15,
    ):
        self.storage = storage
        self.enforce_transitions = enforce_transitions
        self.enforce_eligibility = enforce_eligibility
        self.minutes_due_days = minutes_due_days
        self.payment_due_days = payment_due_days

    # -------------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------------

    def eligible_for(self, jurisdiction_id: int, area: str) -> List[Professional]:
        """Professionals that could take a hearing in this jurisdiction and area."""
        jurisdiction = self.storage.jurisdictions.get(jurisdiction_id)
        if jurisdiction is None:
            return []
        return self.storage.professionals.list_where(
            lambda p: is_eligible(p, area, jurisdiction)
        )

    def eligible_professionals(self, hearing_id: int) -> Optional[List[Professional]]:
        hearing = self.storage.hearings.get(hearing_id)
        if hearing is None:
            return None
        return self.eligible_for(hearing.jurisdiction_id, hearing.area)

    # -------------------------------------------------------------------------
    # Hearing lifecycle
    # -------------------------------------------------------------------------

    def check_transition(self, hearing: Hearing, requested: str) -> None:
        """Raise InvalidTransitionError when enforcing and the move is illegal."""
        if self.enforce_transitions:
            validate_transition(hearing.status, requested)

    def update_hearing(self, hearing_id: int, changes: Mapping[str, Any]) -> Optional[Hearing]:
        """Partial update; a supplied status must be a legal transition."""
        hearing = self.storage.hearings.get(hearing_id)
        if hearing is None:
            return None
        if "status" in changes:
            self.check_transition(hearing, changes["status"])
        return self.storage.hearings.update(hearing_id, changes)

    def change_status(self, hearing_id: int, status: str) -> Optional[Hearing]:
        return self.update_hearing(hearing_id, {"status": status})

    def assign_professional(self, hearing_id: int, professional_id: int) -> Optional[Hearing]:
        """
        Assign a professional to a hearing.

        A pending hearing moves to assigned; an already assigned one keeps its
        status (reassignment). Closes the hearing's assign_professional task.
        """
        hearing = self.storage.hearings.get(hearing_id)
        professional = self.storage.professionals.get(professional_id)
        if hearing is None or professional is None:
            return None

        if self.enforce_eligibility:
            jurisdiction = self.storage.jurisdictions.get(hearing.jurisdiction_id)
            if not is_eligible(professional, hearing.area, jurisdiction):
                raise IneligibleProfessionalError(professional_id, hearing_id)

        status = hearing.status
        if status == HearingStatus.PENDING.value:
            status = HearingStatus.ASSIGNED.value
        if self.enforce_transitions and status != HearingStatus.ASSIGNED.value:
            # completed and cancelled hearings cannot be staffed
            raise InvalidTransitionError(hearing.status, HearingStatus.ASSIGNED.value)

        updated = self.storage.hearings.update(hearing_id, {
            "professional_id": professional_id,
            "status": status,
        })
        complete_pending_task(self.storage, TaskType.ASSIGN_PROFESSIONAL.value, hearing_id)
        logger.info(f"Assigned professional {professional_id} to hearing {hearing_id}")
        return updated

    def record_minutes_upload(self, hearing_id: int, file_ref: Optional[str]) -> Optional[Hearing]:
        """
        Attach uploaded minutes to a hearing and mark it completed.

        Returns None when no file reference was given or the hearing does not
        exist. Closes the first pending upload_minutes task for the hearing.
        """
        if not file_ref:
            return None
        hearing = self.storage.hearings.get(hearing_id)
        if hearing is None:
            return None
        self.check_transition(hearing, HearingStatus.COMPLETED.value)

        updated = self.storage.hearings.update(hearing_id, {
            "minutes_uploaded": True,
            "minutes_url": file_ref,
            "status": HearingStatus.COMPLETED.value,
        })
        complete_pending_task(self.storage, TaskType.UPLOAD_MINUTES.value, hearing_id)
        logger.info(f"Minutes recorded for hearing {hearing_id}")
        return updated

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def record_payment(
        self,
        hearing_id: int,
        professional_id: int,
        amount: float,
        status: str = PaymentStatus.PENDING.value,
        notes: Optional[str] = None,
        payment_date: Optional[date] = None,
    ) -> Payment:
        """
        Store a payment and mirror it onto its hearing.

        The payment is stored even if the hearing does not exist; the hearing
        sync is skipped in that case. Closes the first pending payment task
        whose related_id is the hearing.
        """
        payment = self.storage.payments.create({
            "hearing_id": hearing_id,
            "professional_id": professional_id,
            "amount": amount,
            "status": status,
            "notes": notes,
            "payment_date": payment_date,
        })

        synced = self.storage.hearings.update(hearing_id, {
            "payment_status": payment.status,
            "payment_amount": payment.amount,
        })
        if synced is None:
            logger.warning(f"Payment {payment.id} references missing hearing {hearing_id}; hearing not updated")

        complete_pending_task(self.storage, TaskType.PAYMENT.value, hearing_id)
        logger.info(f"Recorded payment {payment.id} ({payment.status}) for hearing {hearing_id}")
        return payment

    def update_payment(self, payment_id: int, changes: Mapping[str, Any]) -> Optional[Payment]:
        """Partial update; a status change is copied to the owning hearing (amount is not)."""
        existing = self.storage.payments.get(payment_id)
        if existing is None:
            return None

        updated = self.storage.payments.update(payment_id, changes)
        new_status = changes.get("status")
        if new_status and new_status != existing.status:
            # Goes to the hearing the payment had before this update, even if hearing_id changed too
            self.storage.hearings.update(existing.hearing_id, {"payment_status": new_status})
        return updated

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def derive_tasks(self) -> List[Task]:
        """Close stale hearing reminders, then raise the missing ones."""
        resolve_stale_tasks(self.storage)
        return derive_tasks(self.storage, self.minutes_due_days, self.payment_due_days)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def hearing_stats(self) -> HearingStats:
        today = self.storage.today()
        hearings = self.storage.hearings.list()
        completed = [h for h in hearings if h.status == HearingStatus.COMPLETED.value]
        return HearingStats(
            today_count=sum(1 for h in hearings if h.date == today),
            pending_assignment=sum(1 for h in hearings if h.status == HearingStatus.PENDING.value),
            pending_minutes=sum(1 for h in completed if not h.minutes_uploaded),
            pending_payments=sum(1 for h in completed if h.payment_status == PaymentStatus.PENDING.value),
        )

    def financial_summary(self, period: str = "month") -> FinancialSummary:
        """
        Payment totals for a trailing window.

        week = 7 days, month = 1 calendar month, year = 1 calendar year,
        anything else = all payments.
        """
        payments = self.storage.payments.list()
        start = period_start(period, self.storage.clock())
        if start is not None:
            payments = [p for p in payments if p.created_at >= start]

        return FinancialSummary(
            period=period,
            total=sum(p.amount for p in payments),
            pending=sum(p.amount for p in payments if p.status == PaymentStatus.PENDING.value),
            paid=sum(p.amount for p in payments if p.status == PaymentStatus.PAID.value),
        )
