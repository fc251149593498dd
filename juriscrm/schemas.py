"""
Pydantic Schemas for the Hearing Desk API
=========================================

Request/response models for the REST layer. Attribute names are snake_case
in Python and camelCase on the wire (processNumber, jurisdictionId, ...),
matching the dashboard client. Enum values are part of the wire contract.

Update models carry every field as optional; `changes()` returns only the
fields the client actually sent, ready for a partial store update.
"""

from datetime import date as Date, datetime
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .models import (
    HearingStatus,
    PaymentStatus,
    ProfessionalType,
    TaskStatus,
    UserRole,
)


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "use_enum_values": True,
    }


class UpdateModel(CamelModel):
    """Base for partial updates."""

    # Fields that may be explicitly cleared with null; nulls on other fields are ignored.
    nullable_fields: ClassVar[frozenset] = frozenset()

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        return {
            key: value for key, value in data.items()
            if value is not None or key in self.nullable_fields
        }


TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# =============================================================================
# Users
# =============================================================================

class UserCreate(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str
    email: str
    role: UserRole = UserRole.USER


class UserOut(CamelModel):
    """User without the password"""
    id: int
    username: str
    name: str
    email: str
    role: str


# =============================================================================
# Professionals
# =============================================================================

class ProfessionalCreate(CamelModel):
    name: str = Field(..., min_length=3, description="Full name")
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(..., min_length=10, description="Phone with area code")
    type: ProfessionalType
    specialization: str = Field(..., min_length=1, description="Area of law, e.g. Civil")
    jurisdictions: List[str] = Field(default_factory=list, description="State codes, e.g. ['SP', 'RJ']")
    user_id: Optional[int] = None
    active: bool = True


class ProfessionalUpdate(UpdateModel):
    nullable_fields: ClassVar[frozenset] = frozenset({"user_id"})

    name: Optional[str] = Field(None, min_length=3)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = Field(None, min_length=10)
    type: Optional[ProfessionalType] = None
    specialization: Optional[str] = Field(None, min_length=1)
    jurisdictions: Optional[List[str]] = None
    user_id: Optional[int] = None
    active: Optional[bool] = None


class ProfessionalOut(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    type: str
    specialization: str
    jurisdictions: List[str]
    user_id: Optional[int] = None
    active: bool


# =============================================================================
# Jurisdictions
# =============================================================================

class JurisdictionCreate(CamelModel):
    name: str = Field(..., min_length=3)
    state: str = Field(..., min_length=2, description="State code, e.g. SP")
    city: str = Field(..., min_length=2)
    address: str


class JurisdictionUpdate(UpdateModel):
    name: Optional[str] = Field(None, min_length=3)
    state: Optional[str] = Field(None, min_length=2)
    city: Optional[str] = Field(None, min_length=2)
    address: Optional[str] = None


class JurisdictionOut(CamelModel):
    id: int
    name: str
    state: str
    city: str
    address: str


# =============================================================================
# Hearings
# =============================================================================

class HearingCreate(CamelModel):
    process_number: str = Field(..., min_length=1, description="Case number, not unique")
    jurisdiction_id: int
    date: Date
    time: str = Field(..., pattern=TIME_PATTERN, description="HH:MM local time")
    type: str = Field(..., min_length=1, description="Conciliation, Instruction, Judgment, ...")
    area: str = Field(..., min_length=1, description="Area of law, e.g. Civil")
    professional_id: Optional[int] = None
    status: HearingStatus = HearingStatus.PENDING
    notes: Optional[str] = None


class HearingUpdate(UpdateModel):
    nullable_fields: ClassVar[frozenset] = frozenset({"professional_id", "notes"})

    process_number: Optional[str] = Field(None, min_length=1)
    jurisdiction_id: Optional[int] = None
    date: Optional[Date] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    type: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = Field(None, min_length=1)
    professional_id: Optional[int] = None
    status: Optional[HearingStatus] = None
    notes: Optional[str] = None


class HearingOut(CamelModel):
    id: int
    process_number: str
    jurisdiction_id: int
    date: Date
    time: str
    type: str
    area: str
    professional_id: Optional[int] = None
    status: str
    notes: Optional[str] = None
    minutes_uploaded: bool
    minutes_url: Optional[str] = None
    payment_status: str
    payment_amount: Optional[float] = None
    created_at: datetime


class AssignProfessionalRequest(CamelModel):
    professional_id: int


# =============================================================================
# Payments
# =============================================================================

class PaymentCreate(CamelModel):
    hearing_id: int
    professional_id: int
    amount: float = Field(..., gt=0, description="Amount in BRL")
    status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[Date] = None
    notes: Optional[str] = None


class PaymentUpdate(UpdateModel):
    nullable_fields: ClassVar[frozenset] = frozenset({"payment_date", "notes"})

    hearing_id: Optional[int] = None
    professional_id: Optional[int] = None
    amount: Optional[float] = Field(None, gt=0)
    status: Optional[PaymentStatus] = None
    payment_date: Optional[Date] = None
    notes: Optional[str] = None


class PaymentOut(CamelModel):
    id: int
    hearing_id: int
    professional_id: int
    amount: float
    status: str
    payment_date: Optional[Date] = None
    notes: Optional[str] = None
    created_at: datetime


# =============================================================================
# Tasks
# =============================================================================

class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str
    status: TaskStatus = TaskStatus.PENDING
    type: str = Field(..., min_length=1, description="upload_minutes, assign_professional, payment or custom")
    related_id: Optional[int] = None
    due_date: Optional[Date] = None


class TaskUpdate(UpdateModel):
    nullable_fields: ClassVar[frozenset] = frozenset({"related_id", "due_date"})

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    type: Optional[str] = Field(None, min_length=1)
    related_id: Optional[int] = None
    due_date: Optional[Date] = None


class TaskOut(CamelModel):
    id: int
    title: str
    description: str
    status: str
    type: str
    related_id: Optional[int] = None
    due_date: Optional[Date] = None
    created_at: datetime


# =============================================================================
# Statistics
# =============================================================================

class HearingStatsOut(CamelModel):
    today_count: int
    pending_assignment: int
    pending_minutes: int
    pending_payments: int


class FinancialSummaryOut(CamelModel):
    period: str
    total: float
    pending: float
    paid: float


# =============================================================================
# System
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    version: str
    storage_backend: str
    timestamp: datetime


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Error envelope for /api requests"""
    error: ErrorDetail
