"""
Tests for the Rules Engine
==========================

Eligibility, hearing lifecycle side effects, status transitions and
dashboard statistics.
"""

import pytest
from datetime import date, datetime, timedelta
from pathlib import Path

# Add parent to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from juriscrm.errors import IneligibleProfessionalError, InvalidTransitionError
from juriscrm.rules import RulesEngine, can_transition, is_eligible, period_start
from juriscrm.store import MemoryStorage


class FakeClock:
    """Settable clock for the store"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


NOW = datetime(2024, 6, 10, 12, 0, 0)


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def storage(clock):
    return MemoryStorage(clock=clock)


@pytest.fixture
def rules(storage):
    return RulesEngine(storage)


@pytest.fixture
def sp(storage):
    return storage.jurisdictions.create({
        "name": "Foro Central Civil", "state": "SP", "city": "São Paulo", "address": "Praça João Mendes",
    })


@pytest.fixture
def civil_lawyer(storage):
    return storage.professionals.create({
        "name": "Dr. Carlos Mendes", "email": "carlos@example.com", "phone": "11987654321",
        "type": "lawyer", "specialization": "Civil", "jurisdictions": ["SP"],
    })


def _hearing(storage, jurisdiction_id, **overrides):
    values = {
        "process_number": "2024.0001",
        "jurisdiction_id": jurisdiction_id,
        "date": date(2024, 6, 10),
        "time": "14:30",
        "type": "Instruction",
        "area": "Civil",
    }
    values.update(overrides)
    return storage.hearings.create(values)


# =============================================================================
# Eligibility
# =============================================================================

class TestEligibility:
    """Tests for professional eligibility"""

    def test_matching_professional_is_eligible(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        eligible = rules.eligible_professionals(hearing.id)
        assert [p.id for p in eligible] == [civil_lawyer.id]

    def test_other_professionals_filtered_out(self, rules, storage, sp, civil_lawyer):
        storage.professionals.create({
            "name": "Inactive", "email": "i@example.com", "phone": "11900000000",
            "type": "lawyer", "specialization": "Civil", "jurisdictions": ["SP"], "active": False,
        })
        storage.professionals.create({
            "name": "Wrong state", "email": "w@example.com", "phone": "21900000000",
            "type": "lawyer", "specialization": "Civil", "jurisdictions": ["RJ"],
        })
        storage.professionals.create({
            "name": "Wrong area", "email": "a@example.com", "phone": "11911111111",
            "type": "lawyer", "specialization": "Criminal", "jurisdictions": ["SP"],
        })
        hearing = _hearing(storage, sp.id)

        assert [p.id for p in rules.eligible_professionals(hearing.id)] == [civil_lawyer.id]

    def test_specialization_match_is_case_sensitive(self, civil_lawyer, sp):
        assert is_eligible(civil_lawyer, "Civil", sp) is True
        assert is_eligible(civil_lawyer, "civil", sp) is False

    def test_missing_jurisdiction_means_nobody(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        storage.jurisdictions.delete(sp.id)
        assert rules.eligible_professionals(hearing.id) == []

    def test_missing_hearing_returns_none(self, rules):
        assert rules.eligible_professionals(404) is None

    def test_eligible_for_draft_hearing(self, rules, sp, civil_lawyer):
        assert [p.id for p in rules.eligible_for(sp.id, "Civil")] == [civil_lawyer.id]
        assert rules.eligible_for(sp.id, "Labor") == []


# =============================================================================
# Transitions
# =============================================================================

class TestTransitions:
    """Tests for the hearing status state machine"""

    @pytest.mark.parametrize("current,requested", [
        ("pending", "assigned"),
        ("pending", "completed"),
        ("pending", "cancelled"),
        ("assigned", "completed"),
        ("assigned", "cancelled"),
        ("assigned", "pending"),
        ("completed", "completed"),
    ])
    def test_allowed(self, current, requested):
        assert can_transition(current, requested) is True

    @pytest.mark.parametrize("current,requested", [
        ("completed", "pending"),
        ("completed", "assigned"),
        ("cancelled", "pending"),
        ("cancelled", "completed"),
    ])
    def test_rejected(self, current, requested):
        assert can_transition(current, requested) is False

    def test_update_hearing_rejects_illegal_status(self, rules, storage, sp):
        hearing = _hearing(storage, sp.id, status="completed")
        with pytest.raises(InvalidTransitionError) as exc_info:
            rules.change_status(hearing.id, "pending")

        assert exc_info.value.current == "completed"
        assert exc_info.value.requested == "pending"
        assert storage.hearings.get(hearing.id).status == "completed"

    def test_enforcement_can_be_disabled(self, storage, sp):
        lenient = RulesEngine(storage, enforce_transitions=False)
        hearing = _hearing(storage, sp.id, status="completed")
        assert lenient.change_status(hearing.id, "pending").status == "pending"

    def test_update_without_status_skips_check(self, rules, storage, sp):
        hearing = _hearing(storage, sp.id, status="cancelled")
        assert rules.update_hearing(hearing.id, {"notes": "adiada"}).notes == "adiada"

    def test_update_missing_hearing(self, rules):
        assert rules.update_hearing(9, {"status": "cancelled"}) is None


# =============================================================================
# Assignment
# =============================================================================

class TestAssignment:
    """Tests for assigning professionals"""

    def test_assign_moves_pending_to_assigned(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        task = storage.tasks.create({
            "title": "Designar Advogado", "description": "x",
            "type": "assign_professional", "related_id": hearing.id,
        })

        assigned = rules.assign_professional(hearing.id, civil_lawyer.id)

        assert assigned.status == "assigned"
        assert assigned.professional_id == civil_lawyer.id
        assert storage.tasks.get(task.id).status == "completed"

    def test_ineligible_professional_rejected(self, rules, storage, sp):
        outsider = storage.professionals.create({
            "name": "Dr. Fora", "email": "f@example.com", "phone": "21900000000",
            "type": "lawyer", "specialization": "Civil", "jurisdictions": ["RJ"],
        })
        hearing = _hearing(storage, sp.id)

        with pytest.raises(IneligibleProfessionalError):
            rules.assign_professional(hearing.id, outsider.id)
        assert storage.hearings.get(hearing.id).professional_id is None

    def test_cannot_staff_completed_hearing(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id, status="completed")
        with pytest.raises(InvalidTransitionError):
            rules.assign_professional(hearing.id, civil_lawyer.id)

    def test_missing_records_return_none(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        assert rules.assign_professional(hearing.id, 999) is None
        assert rules.assign_professional(999, civil_lawyer.id) is None


# =============================================================================
# Minutes upload
# =============================================================================

class TestMinutesUpload:
    """Tests for recording uploaded minutes"""

    def test_marks_hearing_completed(self, rules, storage, sp):
        hearing = _hearing(storage, sp.id, status="assigned", professional_id=1)
        updated = rules.record_minutes_upload(hearing.id, "/uploads/minutes-1.pdf")

        assert updated.minutes_uploaded is True
        assert updated.minutes_url == "/uploads/minutes-1.pdf"
        assert updated.status == "completed"

    def test_completes_only_first_matching_task(self, rules, storage, sp):
        hearing = _hearing(storage, sp.id, status="assigned")
        first = storage.tasks.create({
            "title": "Ata", "description": "1", "type": "upload_minutes", "related_id": hearing.id,
        })
        second = storage.tasks.create({
            "title": "Ata", "description": "2", "type": "upload_minutes", "related_id": hearing.id,
        })

        rules.record_minutes_upload(hearing.id, "/uploads/a.pdf")

        assert storage.tasks.get(first.id).status == "completed"
        assert storage.tasks.get(second.id).status == "pending"

    def test_without_file_does_nothing(self, rules, storage, sp):
        hearing = _hearing(storage, sp.id)
        assert rules.record_minutes_upload(hearing.id, None) is None
        assert storage.hearings.get(hearing.id).minutes_uploaded is False

    def test_missing_hearing(self, rules):
        assert rules.record_minutes_upload(77, "/uploads/a.pdf") is None

    def test_cancelled_hearing_rejected(self, rules, storage, sp):
        hearing = _hearing(storage, sp.id, status="cancelled")
        with pytest.raises(InvalidTransitionError):
            rules.record_minutes_upload(hearing.id, "/uploads/a.pdf")


# =============================================================================
# Payments
# =============================================================================

class TestPayments:
    """Tests for payment side effects"""

    def test_paid_payment_mirrored_on_hearing(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        assert hearing.payment_status == "pending"

        rules.record_payment(hearing.id, civil_lawyer.id, 300, "paid")

        stored = storage.hearings.get(hearing.id)
        assert stored.payment_status == "paid"
        assert stored.payment_amount == 300

    def test_later_payment_overwrites_hearing_amount(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        rules.record_payment(hearing.id, civil_lawyer.id, 300, "paid")
        rules.record_payment(hearing.id, civil_lawyer.id, 500, "pending")

        stored = storage.hearings.get(hearing.id)
        assert stored.payment_amount == 500
        assert stored.payment_status == "pending"

    def test_payment_task_completed(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        task = storage.tasks.create({
            "title": "Pagamento", "description": "x", "type": "payment", "related_id": hearing.id,
        })
        rules.record_payment(hearing.id, civil_lawyer.id, 300)
        assert storage.tasks.get(task.id).status == "completed"

    def test_missing_hearing_still_stores_payment(self, rules, storage, civil_lawyer):
        payment = rules.record_payment(123, civil_lawyer.id, 200, "paid")
        assert storage.payments.get(payment.id).amount == 200
        assert storage.hearings.get(123) is None

    def test_status_update_propagates(self, rules, storage, sp, civil_lawyer):
        hearing = _hearing(storage, sp.id)
        payment = rules.record_payment(hearing.id, civil_lawyer.id, 300, "processing")

        rules.update_payment(payment.id, {"status": "paid", "amount": 350})

        stored = storage.hearings.get(hearing.id)
        assert stored.payment_status == "paid"
        assert stored.payment_amount == 300
        assert storage.payments.get(payment.id).amount == 350

    def test_moving_payment_syncs_previous_hearing(self, rules, storage, sp, civil_lawyer):
        first = _hearing(storage, sp.id)
        second = _hearing(storage, sp.id, process_number="2024.0002")
        payment = rules.record_payment(first.id, civil_lawyer.id, 300)

        rules.update_payment(payment.id, {"hearing_id": second.id, "status": "paid"})

        assert storage.payments.get(payment.id).hearing_id == second.id
        assert storage.hearings.get(first.id).payment_status == "paid"
        assert storage.hearings.get(second.id).payment_status == "pending"

    def test_update_missing_payment(self, rules):
        assert rules.update_payment(5, {"status": "paid"}) is None


# =============================================================================
# Statistics
# =============================================================================

class TestStatistics:
    """Tests for dashboard counters and financial totals"""

    def test_hearing_stats(self, rules, storage, sp):
        _hearing(storage, sp.id)
        _hearing(storage, sp.id, date=date(2024, 6, 11), status="assigned", professional_id=1)
        _hearing(storage, sp.id, date=date(2024, 6, 1), status="completed")
        _hearing(storage, sp.id, date=date(2024, 6, 2), status="completed",
                 minutes_uploaded=True, payment_status="paid")

        stats = rules.hearing_stats()
        assert stats.today_count == 1
        assert stats.pending_assignment == 1
        assert stats.pending_minutes == 1
        assert stats.pending_payments == 1

    def test_financial_week_window(self, rules, storage, clock):
        clock.now = NOW - timedelta(days=10)
        storage.payments.create({"hearing_id": 1, "professional_id": 1, "amount": 100.0, "status": "paid"})
        clock.now = NOW - timedelta(days=2)
        storage.payments.create({"hearing_id": 1, "professional_id": 1, "amount": 40.0, "status": "pending"})
        clock.now = NOW

        summary = rules.financial_summary("week")
        assert summary.period == "week"
        assert summary.total == 40.0
        assert summary.pending == 40.0
        assert summary.paid == 0

    def test_financial_month_and_year(self, rules, storage, clock):
        clock.now = NOW - timedelta(days=45)
        storage.payments.create({"hearing_id": 1, "professional_id": 1, "amount": 100.0, "status": "paid"})
        clock.now = NOW - timedelta(days=400)
        storage.payments.create({"hearing_id": 1, "professional_id": 1, "amount": 1000.0, "status": "paid"})
        clock.now = NOW - timedelta(days=3)
        storage.payments.create({"hearing_id": 1, "professional_id": 1, "amount": 25.0, "status": "processing"})
        clock.now = NOW

        month = rules.financial_summary("month")
        assert month.total == 25.0
        assert month.pending == 0
        assert month.paid == 0

        year = rules.financial_summary("year")
        assert year.total == 125.0
        assert year.paid == 100.0

        everything = rules.financial_summary("all")
        assert everything.total == 1125.0

    def test_period_start(self):
        assert period_start("week", NOW) == NOW - timedelta(days=7)
        assert period_start("month", NOW) == datetime(2024, 5, 10, 12, 0, 0)
        assert period_start("year", NOW) == datetime(2023, 6, 10, 12, 0, 0)
        assert period_start("decade", NOW) is None
