import logging
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from clinic_scheduling.api.deps import (
    get_availability_calculator,
    get_booking_store,
    get_bulk_generator,
    get_closed_date_store,
    get_conflict_detector,
    get_slot_limit_provider,
)
from clinic_scheduling.api.schemas.scheduling import (
    BulkCreateRequest,
    BulkCreateResponse,
    BulkPreviewResponse,
    ConflictsResponse,
)
from clinic_scheduling.core.exceptions import ValidationError
from clinic_scheduling.models.appointment import BookingSource
from clinic_scheduling.models.scheduling import AvailabilityResult, BulkSchedulingInput, ConflictInfo, GeneratedSlot
from clinic_scheduling.services.availability_service import AvailabilityCalculator
from clinic_scheduling.services.bulk_scheduling_service import BulkScheduleGenerator, calculate_schedule_span
from clinic_scheduling.services.conflict_service import ConflictDetector
from clinic_scheduling.services.date_utils import (
    day_of_week,
    format_date_key,
    is_before_today,
    parse_date_key,
    parse_date_list,
    parse_time_list,
    time_to_minutes,
)
from clinic_scheduling.services.slot_limit_service import SlotLimitProvider
from clinic_scheduling.services.stores import BookingStore, ClosedDateStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("/check-conflicts", response_model=ConflictsResponse)
async def check_conflicts(
    dates: str | None = Query(None, description="Comma-separated YYYY-MM-DD"),
    times: str | None = Query(None, description="Comma-separated HH:mm"),
    detector: ConflictDetector = Depends(get_conflict_detector),
) -> ConflictsResponse:
    if not dates or not times:
        raise ValidationError("MISSING_PARAMETERS", "Both dates and times are required")
    conflicts = await detector.find_conflicts(parse_date_list(dates), parse_time_list(times))
    return ConflictsResponse(conflicts=conflicts)


@router.get("/availability", response_model=AvailabilityResult)
async def availability(
    date_param: str = Query(..., alias="date"),
    audience: Literal["staff", "portal"] = Query("staff"),
    calculator: AvailabilityCalculator = Depends(get_availability_calculator),
) -> AvailabilityResult:
    """Every business-hours slot of the day with its remaining capacity."""
    d = parse_date_key(date_param)
    if is_before_today(d):
        raise ValidationError("DATE_IN_PAST", f"{date_param} is in the past")
    return await calculator.get_availability(d, audience=audience)


@router.post("/bulk/preview", response_model=BulkPreviewResponse)
async def preview_bulk_schedule(
    body: BulkSchedulingInput,
    generator: BulkScheduleGenerator = Depends(get_bulk_generator),
    closed_dates: ClosedDateStore = Depends(get_closed_date_store),
) -> BulkPreviewResponse:
    """Project recurring slots forward; nothing is persisted."""
    closed = await closed_dates.list_from(body.start_date)
    if closed:
        body = body.model_copy(
            update={"exclude_dates": body.exclude_dates | {format_date_key(d) for d in closed}}
        )
    slots = await generator.generate(body)
    return BulkPreviewResponse(slots=slots, span=calculate_schedule_span(slots))


@router.post("/bulk", response_model=BulkCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_bulk_appointments(
    body: BulkCreateRequest,
    booking_store: BookingStore = Depends(get_booking_store),
    limit_provider: SlotLimitProvider = Depends(get_slot_limit_provider),
) -> BulkCreateResponse:
    """Book accepted slots, skipping any already at the staff limit.

    The capacity re-check is a read before write, not a lock: two concurrent
    requests can still both pass it.
    """
    for s in body.slots:
        if time_to_minutes(s.end_time) <= time_to_minutes(s.start_time):
            raise ValidationError("INVALID_TIME_RANGE", f"{s.start_time}-{s.end_time} on {s.date} ends before it starts")

    existing = await booking_store.count_active_by_date_time(
        sorted({s.date for s in body.slots}), sorted({s.start_time for s in body.slots})
    )
    occupied = {(row.date, row.time): row.count for row in existing}
    limit = (await limit_provider.get_slot_limits()).staff

    created: list[int] = []
    skipped: list[ConflictInfo] = []
    for s in body.slots:
        key = (s.date, s.start_time)
        count = occupied.get(key, 0)
        if count >= limit:
            skipped.append(ConflictInfo(date=format_date_key(s.date), time=s.start_time, count=count, available=0))
            continue
        appointment = await booking_store.create(
            GeneratedSlot(
                date=s.date,
                start_time=s.start_time,
                end_time=s.end_time,
                day_of_week=day_of_week(s.date),
                preference_index=0,
            ),
            source=BookingSource.STAFF,
        )
        occupied[key] = count + 1
        created.append(appointment.id)

    logger.info("Bulk booking: created %d, skipped %d full slot(s)", len(created), len(skipped))
    return BulkCreateResponse(created=len(created), appointment_ids=created, conflicts=skipped)
