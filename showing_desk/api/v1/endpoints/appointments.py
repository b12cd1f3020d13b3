"""Viewing appointment endpoints.

- GET  /api/v1/appointments/                       → Filtered, paginated list
- GET  /api/v1/appointments/stats                  → Counts per status
- GET  /api/v1/appointments/calendar               → Confirmed appointments grouped by day
- GET  /api/v1/appointments/calendar/{day}         → Confirmed appointments on one day
- GET  /api/v1/appointments/export                 → CSV of the filtered list
- GET  /api/v1/appointments/{id}                   → Detail with history
- POST /api/v1/appointments/                       → Intake a new request
- POST /api/v1/appointments/{id}/confirm|reject|reschedule|complete
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from showing_desk.core.config import settings
from showing_desk.core.deps import get_store
from showing_desk.core.exceptions import (
    AppointmentError,
    DuplicateAppointment,
    InvalidArgument,
    InvalidTransition,
    MissingArgument,
    NotFound,
)
from showing_desk.models.appointment import Appointment, AppointmentStatus
from showing_desk.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentPage,
    AppointmentStatsOut,
    RejectRequest,
    RescheduleRequest,
    TransitionRequest,
)
from showing_desk.services.appointment_store import AppointmentStore
from showing_desk.services.calendar import for_date, group_by_date
from showing_desk.services.export import to_csv
from showing_desk.services.query import paginate, query, status_counts
from showing_desk.services.transitions import TransitionOperation

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(exc: AppointmentError) -> HTTPException:
    """Translate a workflow error into the matching HTTP response."""
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (MissingArgument, InvalidArgument)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, (InvalidTransition, DuplicateAppointment)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _filtered(
    store: AppointmentStore,
    property_name: Optional[str],
    appointment_status: Optional[AppointmentStatus],
    date_from: Optional[date],
    date_to: Optional[date],
) -> list[Appointment]:
    date_range = (date_from, date_to) if (date_from or date_to) else None
    return query(
        store.all(),
        property_name_contains=property_name,
        status=appointment_status,
        date_range=date_range,
    )


# ============================================================================
# LISTING
# ============================================================================

@router.get("/", response_model=AppointmentPage)
async def list_appointments(
    property_name: Optional[str] = Query(None, description="Substring of the property name"),
    appointment_status: Optional[AppointmentStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    store: AppointmentStore = Depends(get_store),
):
    """List appointments, optionally filtered by property name, status and viewing date."""
    matches = _filtered(store, property_name, appointment_status, date_from, date_to)
    items, total = paginate(matches, page, page_size)
    return AppointmentPage(
        items=[AppointmentOut.from_appointment(a) for a in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/stats", response_model=AppointmentStatsOut)
async def appointment_stats(store: AppointmentStore = Depends(get_store)):
    """Get appointment counts for the dashboard header."""
    return AppointmentStatsOut(**status_counts(store.all()))


@router.get("/calendar", response_model=dict[str, list[AppointmentOut]])
async def appointment_calendar(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    store: AppointmentStore = Depends(get_store),
):
    """Confirmed appointments keyed by YYYY-MM-DD. Days without any are omitted."""
    appointments = _filtered(store, None, None, date_from, date_to)
    return {
        day: [AppointmentOut.from_appointment(a) for a in day_appointments]
        for day, day_appointments in group_by_date(appointments).items()
    }


@router.get("/calendar/{day}", response_model=list[AppointmentOut])
async def appointments_on_day(day: date, store: AppointmentStore = Depends(get_store)):
    """Confirmed appointments on a single day, earliest first."""
    return [AppointmentOut.from_appointment(a) for a in for_date(store.all(), day)]


@router.get("/export")
async def export_appointments(
    property_name: Optional[str] = Query(None),
    appointment_status: Optional[AppointmentStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    store: AppointmentStore = Depends(get_store),
):
    """Download the filtered appointment list as CSV."""
    matches = _filtered(store, property_name, appointment_status, date_from, date_to)
    filename = f"appointments-{datetime.now():%Y%m%d%H%M}.csv"
    logger.info("Exporting %d appointments", len(matches))
    return Response(
        content=to_csv(matches),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment(appointment_id: str, store: AppointmentStore = Depends(get_store)):
    """Get one appointment with its full history."""
    try:
        appointment = store.get(appointment_id)
    except NotFound as e:
        raise _http_error(e)
    return AppointmentOut.from_appointment(appointment)


# ============================================================================
# INTAKE & TRANSITIONS
# ============================================================================

@router.post("/", response_model=AppointmentOut, status_code=201)
async def create_appointment(payload: AppointmentCreate, store: AppointmentStore = Depends(get_store)):
    """Register a new viewing request in pending status."""
    try:
        appointment = store.create(
            requester=payload.requester,
            property_ref=payload.property_ref,
            scheduled_at=payload.scheduled_at,
            operator=payload.operator,
            remark=payload.remark,
        )
    except AppointmentError as e:
        raise _http_error(e)
    return AppointmentOut.from_appointment(appointment)


def _run_transition(
    store: AppointmentStore,
    appointment_id: str,
    operation: TransitionOperation,
    payload: TransitionRequest,
    new_time: Optional[datetime] = None,
) -> AppointmentOut:
    try:
        appointment = store.apply(
            appointment_id,
            operation,
            operator=payload.operator or settings.DEFAULT_OPERATOR,
            remark=payload.remark,
            new_time=new_time,
        )
    except AppointmentError as e:
        raise _http_error(e)
    return AppointmentOut.from_appointment(appointment)


@router.post("/{appointment_id}/confirm", response_model=AppointmentOut)
async def confirm_appointment(
    appointment_id: str,
    payload: TransitionRequest = TransitionRequest(),
    store: AppointmentStore = Depends(get_store),
):
    """Accept a pending viewing request."""
    return _run_transition(store, appointment_id, TransitionOperation.CONFIRM, payload)


@router.post("/{appointment_id}/reject", response_model=AppointmentOut)
async def reject_appointment(
    appointment_id: str,
    payload: RejectRequest = RejectRequest(),
    store: AppointmentStore = Depends(get_store),
):
    """Decline a pending viewing request, optionally giving a reason."""
    try:
        appointment = store.reject(
            appointment_id,
            operator=payload.operator or settings.DEFAULT_OPERATOR,
            remark=payload.remark,
            reason=payload.reason,
        )
    except AppointmentError as e:
        raise _http_error(e)
    return AppointmentOut.from_appointment(appointment)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentOut)
async def reschedule_appointment(
    appointment_id: str,
    payload: RescheduleRequest,
    store: AppointmentStore = Depends(get_store),
):
    """Move a confirmed viewing to a new time."""
    return _run_transition(
        store, appointment_id, TransitionOperation.RESCHEDULE, payload, new_time=payload.new_time
    )


@router.post("/{appointment_id}/complete", response_model=AppointmentOut)
async def complete_appointment(
    appointment_id: str,
    payload: TransitionRequest = TransitionRequest(),
    store: AppointmentStore = Depends(get_store),
):
    """Mark a confirmed viewing as done."""
    return _run_transition(store, appointment_id, TransitionOperation.COMPLETE, payload)
