"""
Entity Records
==============

Plain dataclass records for the six entity types kept by the store:
- Users (usuários)
- Professionals (advogados e oficiais de justiça)
- Jurisdictions (comarcas)
- Hearings (audiências)
- Payments (pagamentos)
- Tasks (pendências)

Status and type fields hold the raw wire strings; the enums below list the
values the service itself produces.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


# =============================================================================
# ENUMS
# =============================================================================

class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class ProfessionalType(str, Enum):
    """Kind of professional that can be assigned to a hearing"""
    LAWYER = "lawyer"                  # advogado
    COURT_OFFICIAL = "court_official"  # oficial de justiça


class HearingType(str, Enum):
    CONCILIATION = "Conciliation"
    INSTRUCTION = "Instruction"
    JUDGMENT = "Judgment"
    ADMINISTRATIVE = "Administrative"


class HearingStatus(str, Enum):
    """Hearing lifecycle status"""
    PENDING = "pending"      # no professional assigned yet
    ASSIGNED = "assigned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class TaskType(str, Enum):
    """Task types raised by the service. Tasks may also carry free-form types."""
    UPLOAD_MINUTES = "upload_minutes"
    ASSIGN_PROFESSIONAL = "assign_professional"
    PAYMENT = "payment"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class User:
    """Dashboard user. Stored only; no authentication is performed."""
    id: int
    username: str
    password: str
    name: str
    email: str
    role: str = UserRole.USER.value


@dataclass
class Professional:
    """Lawyer or court official available for hearings"""
    id: int
    name: str
    email: str
    phone: str
    type: str
    specialization: str  # area of law, e.g. "Civil"
    jurisdictions: List[str] = field(default_factory=list)  # state codes
    user_id: Optional[int] = None
    active: bool = True


@dataclass
class Jurisdiction:
    """Court location / comarca"""
    id: int
    name: str
    state: str
    city: str
    address: str


@dataclass
class Hearing:
    """Scheduled hearing / audiência"""
    id: int
    process_number: str
    jurisdiction_id: int
    date: date
    time: str  # "HH:MM", local wall clock
    type: str
    area: str
    professional_id: Optional[int] = None
    status: str = HearingStatus.PENDING.value
    notes: Optional[str] = None
    minutes_uploaded: bool = False
    minutes_url: Optional[str] = None
    payment_status: str = PaymentStatus.PENDING.value
    payment_amount: Optional[float] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Payment:
    """Disbursement to a professional for one hearing"""
    id: int
    hearing_id: int
    professional_id: int
    amount: float
    status: str = PaymentStatus.PENDING.value
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Task:
    """Administrative reminder / pendência"""
    id: int
    title: str
    description: str
    type: str
    status: str = TaskStatus.PENDING.value
    related_id: Optional[int] = None  # hearing id (or professional id for some payment tasks)
    due_date: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.now)


# Fields the store never overwrites once a record exists.
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
