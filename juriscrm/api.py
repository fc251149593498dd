"""
Hearing Desk API
================

FastAPI endpoints for the case-management dashboard.

Endpoints (all JSON, camelCase):
- /api/professionals   - CRUD, by jurisdiction/type, eligibility lookup
- /api/jurisdictions   - CRUD
- /api/hearings        - CRUD, by date/professional/jurisdiction/status,
                         upcoming, pending assignment, assignment, minutes upload
- /api/payments        - CRUD (creation/update sync the owning hearing)
- /api/tasks           - CRUD, by status/type, pending queue, derivation
- /api/users           - create/read (no authentication)
- /api/stats/hearings  - dashboard counters
- /api/stats/financial - payment totals for week|month|year|all
- GET /health          - Health check

Run with:
    python -m juriscrm.run
    # or
    uvicorn juriscrm.api:app --host 0.0.0.0 --port 8000
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type

from fastapi import FastAPI, HTTPException, Depends, File, Query, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .config import Settings, get_settings
from .errors import HearingDeskError, IneligibleProfessionalError, InvalidTransitionError
from .models import HearingStatus
from .rules import RulesEngine
from .schemas import (
    UserCreate, UserOut,
    ProfessionalCreate, ProfessionalUpdate, ProfessionalOut,
    JurisdictionCreate, JurisdictionUpdate, JurisdictionOut,
    HearingCreate, HearingUpdate, HearingOut, AssignProfessionalRequest,
    PaymentCreate, PaymentUpdate, PaymentOut,
    TaskCreate, TaskUpdate, TaskOut,
    HearingStatsOut, FinancialSummaryOut,
    HealthResponse, ErrorResponse,
)
from .seed import seed_demo_data
from .store import MemoryStorage, Storage
from .task_derivation import pending_tasks
from .uploads import LocalMinutesStorage, UploadTooLargeError, get_minutes_storage, URL_PREFIX

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


# =============================================================================
# Storage wiring
# =============================================================================

def build_storage(settings: Settings) -> Storage:
    """Create the single storage instance for this process."""
    if settings.storage_backend == "sql":
        from .db import SqlStorage, init_db
        init_db()
        storage: Storage = SqlStorage()
    else:
        storage = MemoryStorage()

    if settings.seed_demo_data:
        seed_demo_data(storage)
    return storage


def get_storage(request: Request) -> Storage:
    """FastAPI dependency: the process-wide storage."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = build_storage(get_settings())
        request.app.state.storage = storage
    return storage


def get_rules(storage: Storage = Depends(get_storage)) -> RulesEngine:
    current = get_settings()
    return RulesEngine(
        storage,
        enforce_transitions=current.enforce_transitions,
        enforce_eligibility=current.enforce_eligibility,
        minutes_due_days=current.minutes_due_days,
        payment_due_days=current.payment_due_days,
    )


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="JurisCRM Hearing Desk",
    description="Hearing scheduling, professional assignment, payments and pending tasks",
    version=settings.service_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

CORS_ALLOW_ORIGINS = settings.cors_origins()
logger.info(f"CORS allow origins: {CORS_ALLOW_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Uploaded minutes are served back from the same process
app.mount(URL_PREFIX, StaticFiles(directory=settings.uploads_dir, check_dir=False), name="uploads")


def _out(schema: Type[BaseModel], entity: Any) -> BaseModel:
    return schema.model_validate(entity)


def _out_list(schema: Type[BaseModel], entities: List[Any]) -> List[BaseModel]:
    return [schema.model_validate(e) for e in entities]


def _not_found(entity_name: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{entity_name} not found")


ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Not found"},
    422: {"model": ErrorResponse, "description": "Invalid input"},
}


# =============================================================================
# Startup
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize storage on startup"""
    current = get_settings()
    logger.info(f"Starting JurisCRM Hearing Desk v{current.service_version}")
    logger.info(f"Storage backend: {current.storage_backend}")
    for warning in current.validate_storage_config():
        logger.warning(warning)
    if getattr(app.state, "storage", None) is None:
        app.state.storage = build_storage(current)


# =============================================================================
# Health
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["Health"])
@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    current = get_settings()
    return HealthResponse(
        status="healthy",
        version=current.service_version,
        storage_backend=current.storage_backend,
        timestamp=datetime.now(),
    )


# =============================================================================
# Users
# =============================================================================

@app.post("/api/users", response_model=UserOut, status_code=201, tags=["Users"], responses=ERROR_RESPONSES)
def create_user(payload: UserCreate, storage: Storage = Depends(get_storage)):
    if storage.get_user_by_username(payload.username) is not None:
        raise HTTPException(status_code=409, detail="Username already taken")
    return _out(UserOut, storage.users.create(payload.model_dump()))


@app.get("/api/users/{user_id}", response_model=UserOut, tags=["Users"], responses=ERROR_RESPONSES)
def get_user(user_id: int, storage: Storage = Depends(get_storage)):
    user = storage.users.get(user_id)
    if user is None:
        raise _not_found("User")
    return _out(UserOut, user)


# =============================================================================
# Professionals
# =============================================================================

@app.get("/api/professionals", response_model=List[ProfessionalOut], tags=["Professionals"])
def list_professionals(storage: Storage = Depends(get_storage)):
    return _out_list(ProfessionalOut, storage.professionals.list())


@app.get("/api/professionals/jurisdiction/{state}", response_model=List[ProfessionalOut], tags=["Professionals"])
def professionals_by_jurisdiction(state: str, storage: Storage = Depends(get_storage)):
    return _out_list(ProfessionalOut, storage.professionals_by_jurisdiction(state))


@app.get("/api/professionals/type/{professional_type}", response_model=List[ProfessionalOut], tags=["Professionals"])
def professionals_by_type(professional_type: str, storage: Storage = Depends(get_storage)):
    return _out_list(ProfessionalOut, storage.professionals_by_type(professional_type))


@app.get("/api/professionals/eligible", response_model=List[ProfessionalOut], tags=["Professionals"])
def eligible_professionals_for(
    jurisdiction_id: int = Query(..., alias="jurisdictionId"),
    area: str = Query(...),
    rules: RulesEngine = Depends(get_rules),
):
    """Candidates for a hearing that is still being drafted."""
    return _out_list(ProfessionalOut, rules.eligible_for(jurisdiction_id, area))


@app.get("/api/professionals/{professional_id}", response_model=ProfessionalOut, tags=["Professionals"], responses=ERROR_RESPONSES)
def get_professional(professional_id: int, storage: Storage = Depends(get_storage)):
    professional = storage.professionals.get(professional_id)
    if professional is None:
        raise _not_found("Professional")
    return _out(ProfessionalOut, professional)


@app.post("/api/professionals", response_model=ProfessionalOut, status_code=201, tags=["Professionals"], responses=ERROR_RESPONSES)
def create_professional(payload: ProfessionalCreate, storage: Storage = Depends(get_storage)):
    return _out(ProfessionalOut, storage.professionals.create(payload.model_dump()))


@app.put("/api/professionals/{professional_id}", response_model=ProfessionalOut, tags=["Professionals"], responses=ERROR_RESPONSES)
def update_professional(professional_id: int, payload: ProfessionalUpdate, storage: Storage = Depends(get_storage)):
    professional = storage.professionals.update(professional_id, payload.changes())
    if professional is None:
        raise _not_found("Professional")
    return _out(ProfessionalOut, professional)


@app.delete("/api/professionals/{professional_id}", status_code=204, tags=["Professionals"], responses=ERROR_RESPONSES)
def delete_professional(professional_id: int, storage: Storage = Depends(get_storage)):
    if not storage.professionals.delete(professional_id):
        raise _not_found("Professional")
    return Response(status_code=204)


# =============================================================================
# Jurisdictions
# =============================================================================

def _check_jurisdiction_name(storage: Storage, name: str, own_id: Optional[int] = None) -> None:
    clash = storage.jurisdictions.first_where(lambda j: j.name == name and j.id != own_id)
    if clash is not None:
        raise HTTPException(status_code=409, detail="Jurisdiction name already exists")


@app.get("/api/jurisdictions", response_model=List[JurisdictionOut], tags=["Jurisdictions"])
def list_jurisdictions(storage: Storage = Depends(get_storage)):
    return _out_list(JurisdictionOut, storage.jurisdictions.list())


@app.get("/api/jurisdictions/{jurisdiction_id}", response_model=JurisdictionOut, tags=["Jurisdictions"], responses=ERROR_RESPONSES)
def get_jurisdiction(jurisdiction_id: int, storage: Storage = Depends(get_storage)):
    jurisdiction = storage.jurisdictions.get(jurisdiction_id)
    if jurisdiction is None:
        raise _not_found("Jurisdiction")
    return _out(JurisdictionOut, jurisdiction)


@app.post("/api/jurisdictions", response_model=JurisdictionOut, status_code=201, tags=["Jurisdictions"], responses=ERROR_RESPONSES)
def create_jurisdiction(payload: JurisdictionCreate, storage: Storage = Depends(get_storage)):
    _check_jurisdiction_name(storage, payload.name)
    return _out(JurisdictionOut, storage.jurisdictions.create(payload.model_dump()))


@app.put("/api/jurisdictions/{jurisdiction_id}", response_model=JurisdictionOut, tags=["Jurisdictions"], responses=ERROR_RESPONSES)
def update_jurisdiction(jurisdiction_id: int, payload: JurisdictionUpdate, storage: Storage = Depends(get_storage)):
    changes = payload.changes()
    if "name" in changes:
        _check_jurisdiction_name(storage, changes["name"], own_id=jurisdiction_id)
    jurisdiction = storage.jurisdictions.update(jurisdiction_id, changes)
    if jurisdiction is None:
        raise _not_found("Jurisdiction")
    return _out(JurisdictionOut, jurisdiction)


@app.delete("/api/jurisdictions/{jurisdiction_id}", status_code=204, tags=["Jurisdictions"], responses=ERROR_RESPONSES)
def delete_jurisdiction(jurisdiction_id: int, storage: Storage = Depends(get_storage)):
    if not storage.jurisdictions.delete(jurisdiction_id):
        raise _not_found("Jurisdiction")
    return Response(status_code=204)


# =============================================================================
# Hearings
# =============================================================================

@app.get("/api/hearings", response_model=List[HearingOut], tags=["Hearings"])
def list_hearings(storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.hearings.list())


@app.get("/api/hearings/upcoming", response_model=List[HearingOut], tags=["Hearings"])
def upcoming_hearings(storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.upcoming_hearings())


@app.get("/api/hearings/pending-assignment", response_model=List[HearingOut], tags=["Hearings"])
def pending_assignment_hearings(storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.pending_assignment_hearings())


@app.get("/api/hearings/date/{day}", response_model=List[HearingOut], tags=["Hearings"])
def hearings_by_date(day: date, storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.hearings_by_date(day))


@app.get("/api/hearings/professional/{professional_id}", response_model=List[HearingOut], tags=["Hearings"])
def hearings_by_professional(professional_id: int, storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.hearings_by_professional(professional_id))


@app.get("/api/hearings/jurisdiction/{jurisdiction_id}", response_model=List[HearingOut], tags=["Hearings"])
def hearings_by_jurisdiction(jurisdiction_id: int, storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.hearings_by_jurisdiction(jurisdiction_id))


@app.get("/api/hearings/status/{status}", response_model=List[HearingOut], tags=["Hearings"])
def hearings_by_status(status: str, storage: Storage = Depends(get_storage)):
    return _out_list(HearingOut, storage.hearings_by_status(status))


@app.get("/api/hearings/{hearing_id}", response_model=HearingOut, tags=["Hearings"], responses=ERROR_RESPONSES)
def get_hearing(hearing_id: int, storage: Storage = Depends(get_storage)):
    hearing = storage.hearings.get(hearing_id)
    if hearing is None:
        raise _not_found("Hearing")
    return _out(HearingOut, hearing)


@app.get("/api/hearings/{hearing_id}/eligible-professionals", response_model=List[ProfessionalOut], tags=["Hearings"], responses=ERROR_RESPONSES)
def hearing_eligible_professionals(hearing_id: int, rules: RulesEngine = Depends(get_rules)):
    professionals = rules.eligible_professionals(hearing_id)
    if professionals is None:
        raise _not_found("Hearing")
    return _out_list(ProfessionalOut, professionals)


@app.post("/api/hearings", response_model=HearingOut, status_code=201, tags=["Hearings"], responses=ERROR_RESPONSES)
def create_hearing(payload: HearingCreate, storage: Storage = Depends(get_storage)):
    hearing = storage.hearings.create(payload.model_dump())
    logger.info(f"Created hearing {hearing.id} ({hearing.process_number})")
    return _out(HearingOut, hearing)


@app.put("/api/hearings/{hearing_id}", response_model=HearingOut, tags=["Hearings"], responses=ERROR_RESPONSES)
def update_hearing(hearing_id: int, payload: HearingUpdate, rules: RulesEngine = Depends(get_rules)):
    hearing = rules.update_hearing(hearing_id, payload.changes())
    if hearing is None:
        raise _not_found("Hearing")
    return _out(HearingOut, hearing)


@app.post("/api/hearings/{hearing_id}/assign", response_model=HearingOut, tags=["Hearings"], responses=ERROR_RESPONSES)
def assign_professional(hearing_id: int, payload: AssignProfessionalRequest, rules: RulesEngine = Depends(get_rules)):
    hearing = rules.assign_professional(hearing_id, payload.professional_id)
    if hearing is None:
        raise _not_found("Hearing or professional")
    return _out(HearingOut, hearing)


@app.delete("/api/hearings/{hearing_id}", status_code=204, tags=["Hearings"], responses=ERROR_RESPONSES)
def delete_hearing(hearing_id: int, storage: Storage = Depends(get_storage)):
    if not storage.hearings.delete(hearing_id):
        raise _not_found("Hearing")
    return Response(status_code=204)


@app.post("/api/hearings/{hearing_id}/minutes", response_model=HearingOut, tags=["Hearings"], responses=ERROR_RESPONSES)
async def upload_minutes(
    hearing_id: int,
    minutes: Optional[UploadFile] = File(default=None),
    rules: RulesEngine = Depends(get_rules),
    files: LocalMinutesStorage = Depends(get_minutes_storage),
):
    """Upload the hearing minutes; marks the hearing completed."""
    if minutes is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    hearing = rules.storage.hearings.get(hearing_id)
    if hearing is None:
        raise _not_found("Hearing")
    # Reject before anything is written to the uploads dir
    rules.check_transition(hearing, HearingStatus.COMPLETED.value)

    data = await minutes.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        file_ref = files.put(files.generate_key(minutes.filename), data)
    except UploadTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))

    hearing = rules.record_minutes_upload(hearing_id, file_ref)
    if hearing is None:
        raise _not_found("Hearing")
    return _out(HearingOut, hearing)


# =============================================================================
# Payments
# =============================================================================

@app.get("/api/payments", response_model=List[PaymentOut], tags=["Payments"])
def list_payments(storage: Storage = Depends(get_storage)):
    return _out_list(PaymentOut, storage.payments.list())


@app.get("/api/payments/professional/{professional_id}", response_model=List[PaymentOut], tags=["Payments"])
def payments_by_professional(professional_id: int, storage: Storage = Depends(get_storage)):
    return _out_list(PaymentOut, storage.payments_by_professional(professional_id))


@app.get("/api/payments/status/{status}", response_model=List[PaymentOut], tags=["Payments"])
def payments_by_status(status: str, storage: Storage = Depends(get_storage)):
    return _out_list(PaymentOut, storage.payments_by_status(status))


@app.get("/api/payments/{payment_id}", response_model=PaymentOut, tags=["Payments"], responses=ERROR_RESPONSES)
def get_payment(payment_id: int, storage: Storage = Depends(get_storage)):
    payment = storage.payments.get(payment_id)
    if payment is None:
        raise _not_found("Payment")
    return _out(PaymentOut, payment)


@app.post("/api/payments", response_model=PaymentOut, status_code=201, tags=["Payments"], responses=ERROR_RESPONSES)
def create_payment(payload: PaymentCreate, rules: RulesEngine = Depends(get_rules)):
    payment = rules.record_payment(
        hearing_id=payload.hearing_id,
        professional_id=payload.professional_id,
        amount=payload.amount,
        status=payload.status,
        notes=payload.notes,
        payment_date=payload.payment_date,
    )
    return _out(PaymentOut, payment)


@app.put("/api/payments/{payment_id}", response_model=PaymentOut, tags=["Payments"], responses=ERROR_RESPONSES)
def update_payment(payment_id: int, payload: PaymentUpdate, rules: RulesEngine = Depends(get_rules)):
    payment = rules.update_payment(payment_id, payload.changes())
    if payment is None:
        raise _not_found("Payment")
    return _out(PaymentOut, payment)


@app.delete("/api/payments/{payment_id}", status_code=204, tags=["Payments"], responses=ERROR_RESPONSES)
def delete_payment(payment_id: int, storage: Storage = Depends(get_storage)):
    if not storage.payments.delete(payment_id):
        raise _not_found("Payment")
    return Response(status_code=204)


# =============================================================================
# Tasks
# =============================================================================

@app.get("/api/tasks", response_model=List[TaskOut], tags=["Tasks"])
def list_tasks(storage: Storage = Depends(get_storage)):
    return _out_list(TaskOut, storage.tasks.list())


@app.get("/api/tasks/pending", response_model=List[TaskOut], tags=["Tasks"])
def list_pending_tasks(storage: Storage = Depends(get_storage)):
    """Pending tasks, earliest due date first"""
    return _out_list(TaskOut, pending_tasks(storage))


@app.get("/api/tasks/status/{status}", response_model=List[TaskOut], tags=["Tasks"])
def tasks_by_status(status: str, storage: Storage = Depends(get_storage)):
    return _out_list(TaskOut, storage.tasks_by_status(status))


@app.get("/api/tasks/type/{task_type}", response_model=List[TaskOut], tags=["Tasks"])
def tasks_by_type(task_type: str, storage: Storage = Depends(get_storage)):
    return _out_list(TaskOut, storage.tasks_by_type(task_type))


@app.post("/api/tasks/derive", response_model=List[TaskOut], tags=["Tasks"])
def derive_tasks(rules: RulesEngine = Depends(get_rules)):
    """Raise missing reminders for every hearing; returns the new tasks."""
    return _out_list(TaskOut, rules.derive_tasks())


@app.get("/api/tasks/{task_id}", response_model=TaskOut, tags=["Tasks"], responses=ERROR_RESPONSES)
def get_task(task_id: int, storage: Storage = Depends(get_storage)):
    task = storage.tasks.get(task_id)
    if task is None:
        raise _not_found("Task")
    return _out(TaskOut, task)


@app.post("/api/tasks", response_model=TaskOut, status_code=201, tags=["Tasks"], responses=ERROR_RESPONSES)
def create_task(payload: TaskCreate, storage: Storage = Depends(get_storage)):
    return _out(TaskOut, storage.tasks.create(payload.model_dump()))


@app.put("/api/tasks/{task_id}", response_model=TaskOut, tags=["Tasks"], responses=ERROR_RESPONSES)
def update_task(task_id: int, payload: TaskUpdate, storage: Storage = Depends(get_storage)):
    task = storage.tasks.update(task_id, payload.changes())
    if task is None:
        raise _not_found("Task")
    return _out(TaskOut, task)


@app.delete("/api/tasks/{task_id}", status_code=204, tags=["Tasks"], responses=ERROR_RESPONSES)
def delete_task(task_id: int, storage: Storage = Depends(get_storage)):
    if not storage.tasks.delete(task_id):
        raise _not_found("Task")
    return Response(status_code=204)


# =============================================================================
# Statistics
# =============================================================================

@app.get("/api/stats/hearings", response_model=HearingStatsOut, tags=["Statistics"])
def hearing_stats(rules: RulesEngine = Depends(get_rules)):
    return _out(HearingStatsOut, rules.hearing_stats())


@app.get("/api/stats/financial", response_model=FinancialSummaryOut, tags=["Statistics"])
def financial_summary(period: str = Query("month"), rules: RulesEngine = Depends(get_rules)):
    """Payment totals for week | month | year; any other value covers all payments."""
    return _out(FinancialSummaryOut, rules.financial_summary(period))


# =============================================================================
# Error Handlers
# =============================================================================

def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api")


def _sanitize_error_detail(detail: Any) -> Any:
    if detail is None:
        return None
    if isinstance(detail, str):
        compact = " ".join(detail.split())
        return compact[:300]
    return detail


def _error_code_for_status(status_code: int) -> str:
    return {
        400: "bad_request",
        404: "not_found",
        409: "conflict",
        413: "payload_too_large",
        422: "validation_error",
        500: "internal_error",
    }.get(status_code, "error")


def _build_error_payload(code: str, message: str, details: Any = None) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
        }
    }


@app.exception_handler(HTTPException)
async def api_http_exception_handler(request: Request, exc: HTTPException):
    """Structured errors for /api endpoints."""
    if not _is_api_request(request):
        return await http_exception_handler(request, exc)

    detail = _sanitize_error_detail(exc.detail)
    message = detail if isinstance(detail, str) and detail else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_error_payload(_error_code_for_status(exc.status_code), message),
    )


@app.exception_handler(HearingDeskError)
async def domain_rule_exception_handler(request: Request, exc: HearingDeskError):
    """Lifecycle and eligibility violations are conflicts with the current state."""
    details: Dict[str, Any] = {}
    if isinstance(exc, InvalidTransitionError):
        details = {"current": exc.current, "requested": exc.requested}
    elif isinstance(exc, IneligibleProfessionalError):
        details = {"professionalId": exc.professional_id, "hearingId": exc.hearing_id}
    logger.info(f"Rejected on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=409,
        content=_build_error_payload("conflict", str(exc), details or None),
    )


@app.exception_handler(RequestValidationError)
async def api_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return structured validation errors without leaking inputs."""
    if not _is_api_request(request):
        return await request_validation_exception_handler(request, exc)

    sanitized_errors = [
        {"loc": err.get("loc"), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=_build_error_payload("validation_error", "Invalid input", {"errors": sanitized_errors}),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler - always return valid JSON"""
    logger.error("Unhandled exception on %s: %s", request.url.path, exc.__class__.__name__, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=_build_error_payload("internal_error", "Internal server error", {"exception": exc.__class__.__name__}),
    )

