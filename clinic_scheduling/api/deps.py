from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduling.core.config import settings
from clinic_scheduling.core.db import get_session
from clinic_scheduling.services.availability_service import AvailabilityCalculator
from clinic_scheduling.services.bulk_scheduling_service import BulkScheduleGenerator
from clinic_scheduling.services.business_hours import BusinessHours
from clinic_scheduling.services.conflict_service import ConflictDetector
from clinic_scheduling.services.slot_limit_service import SlotLimitProvider
from clinic_scheduling.services.stores import SqlBookingStore, SqlClosedDateStore, SqlConfigStore


def get_config_store(session: AsyncSession = Depends(get_session)) -> SqlConfigStore:
    return SqlConfigStore(session)


def get_booking_store(session: AsyncSession = Depends(get_session)) -> SqlBookingStore:
    return SqlBookingStore(session)


def get_closed_date_store(session: AsyncSession = Depends(get_session)) -> SqlClosedDateStore:
    return SqlClosedDateStore(session)


def get_business_hours() -> BusinessHours:
    return BusinessHours.from_settings(settings)


def get_slot_limit_provider(config_store: SqlConfigStore = Depends(get_config_store)) -> SlotLimitProvider:
    return SlotLimitProvider(
        config_store,
        default_staff=settings.default_max_slots_staff,
        default_portal=settings.default_max_slots_portal,
    )


def get_conflict_detector(
    booking_store: SqlBookingStore = Depends(get_booking_store),
    limit_provider: SlotLimitProvider = Depends(get_slot_limit_provider),
) -> ConflictDetector:
    return ConflictDetector(booking_store, limit_provider)


def get_availability_calculator(
    booking_store: SqlBookingStore = Depends(get_booking_store),
    closed_date_store: SqlClosedDateStore = Depends(get_closed_date_store),
    limit_provider: SlotLimitProvider = Depends(get_slot_limit_provider),
    business_hours: BusinessHours = Depends(get_business_hours),
) -> AvailabilityCalculator:
    return AvailabilityCalculator(booking_store, closed_date_store, limit_provider, business_hours)


def get_bulk_generator(
    conflict_detector: ConflictDetector = Depends(get_conflict_detector),
) -> BulkScheduleGenerator:
    return BulkScheduleGenerator(conflict_detector, max_scan_days=settings.bulk_max_scan_days)
