"""
Task derivation helpers.

Tasks are reminders for a pending action on a hearing. They are raised by
`derive_tasks` (one pending task per type and hearing at most) and closed by
`complete_pending_task` when the rules engine observes the action.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from .models import Hearing, HearingStatus, PaymentStatus, Task, TaskStatus, TaskType
from .store import Storage

logger = logging.getLogger(__name__)

# Bundled pt-BR strings: (title, description template)
TASK_TEXT: Dict[str, Tuple[str, str]] = {
    TaskType.ASSIGN_PROFESSIONAL.value: (
        "Designar Advogado",
        "Proc. {process_number} - Audiência em {date}",
    ),
    TaskType.UPLOAD_MINUTES.value: (
        "Upload de Ata Pendente",
        "Proc. {process_number} - Audiência realizada em {date}",
    ),
    TaskType.PAYMENT.value: (
        "Pagamento Pendente",
        "Proc. {process_number} - Audiência concluída em {date}",
    ),
}

# Task types whose related_id is always a hearing id.
HEARING_TASK_TYPES = (TaskType.ASSIGN_PROFESSIONAL.value, TaskType.UPLOAD_MINUTES.value)


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def find_pending_task(storage: Storage, task_type: str, related_id: int) -> Optional[Task]:
    """First pending task (lowest id) of the given type for the related record."""
    return storage.tasks.first_where(
        lambda t: t.type == task_type
        and t.related_id == related_id
        and t.status == TaskStatus.PENDING.value
    )


def complete_pending_task(storage: Storage, task_type: str, related_id: int) -> Optional[Task]:
    """
    Mark the first matching pending task as completed.

    Only one task is closed even if several match; returns it, or None.
    """
    task = find_pending_task(storage, task_type, related_id)
    if task is None:
        return None
    logger.info(f"Completing {task_type} task {task.id} for record {related_id}")
    return storage.tasks.update(task.id, {"status": TaskStatus.COMPLETED.value})


def needed_task_types(hearing: Hearing) -> List[str]:
    """Task types a hearing currently calls for."""
    needed = []
    if hearing.status == HearingStatus.PENDING.value and hearing.professional_id is None:
        needed.append(TaskType.ASSIGN_PROFESSIONAL.value)
    if hearing.status == HearingStatus.COMPLETED.value:
        if not hearing.minutes_uploaded:
            needed.append(TaskType.UPLOAD_MINUTES.value)
        if hearing.payment_status == PaymentStatus.PENDING.value:
            needed.append(TaskType.PAYMENT.value)
    return needed


def _due_date(hearing: Hearing, task_type: str, minutes_due_days: int, payment_due_days: int) -> date:
    if task_type == TaskType.UPLOAD_MINUTES.value:
        return hearing.date + timedelta(days=minutes_due_days)
    if task_type == TaskType.PAYMENT.value:
        return hearing.date + timedelta(days=payment_due_days)
    return hearing.date


def derive_tasks(
    storage: Storage,
    minutes_due_days: int = 2,
    payment_due_days: int = 15,
) -> List[Task]:
    """
    Create the missing reminders for every hearing.

    Idempotent: a hearing never gets a second pending task of the same type.
    Returns only the tasks created by this call.
    """
    created: List[Task] = []
    for hearing in storage.hearings.list():
        for task_type in needed_task_types(hearing):
            if find_pending_task(storage, task_type, hearing.id) is not None:
                continue
            title, template = TASK_TEXT[task_type]
            task = storage.tasks.create({
                "title": title,
                "description": template.format(
                    process_number=hearing.process_number,
                    date=format_date(hearing.date),
                ),
                "type": task_type,
                "related_id": hearing.id,
                "due_date": _due_date(hearing, task_type, minutes_due_days, payment_due_days),
            })
            created.append(task)

    if created:
        logger.info(f"Derived {len(created)} new task(s)")
    return created


def action_observed(task_type: str, hearing: Hearing) -> bool:
    """Whether the action a hearing reminder asks for has already happened."""
    if task_type == TaskType.ASSIGN_PROFESSIONAL.value:
        return hearing.professional_id is not None
    if task_type == TaskType.UPLOAD_MINUTES.value:
        return hearing.minutes_uploaded
    return False


def resolve_stale_tasks(storage: Storage) -> List[Task]:
    """
    Complete pending hearing tasks whose action was done outside the rules
    engine, e.g. a professional or minutes set through a plain update.

    A reminder stays pending until its action is observed, even when the
    hearing was cancelled or moved to another status. Payment tasks are left
    alone because their related_id may point at a professional instead of a
    hearing. Tasks for deleted hearings stay pending.
    """
    resolved: List[Task] = []
    for task in storage.tasks_by_status(TaskStatus.PENDING.value):
        if task.type not in HEARING_TASK_TYPES or task.related_id is None:
            continue
        hearing = storage.hearings.get(task.related_id)
        if hearing is None or not action_observed(task.type, hearing):
            continue
        updated = storage.tasks.update(task.id, {"status": TaskStatus.COMPLETED.value})
        if updated is not None:
            resolved.append(updated)
    return resolved


def pending_tasks(storage: Storage) -> List[Task]:
    """Pending tasks, earliest due date first; undated tasks last."""
    tasks = storage.tasks_by_status(TaskStatus.PENDING.value)
    return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or date.max, t.id))
