from clinic_scheduling.models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus, BookingSource
from clinic_scheduling.models.closed_date import ClosedDate
from clinic_scheduling.models.system_settings import SystemSettings

__all__ = [
    "ACTIVE_STATUSES",
    "Appointment",
    "AppointmentStatus",
    "BookingSource",
    "ClosedDate",
    "SystemSettings",
]
