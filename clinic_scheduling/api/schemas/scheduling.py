from datetime import date

from pydantic import BaseModel, Field

from clinic_scheduling.models.scheduling import ConflictInfo, GeneratedSlot
from clinic_scheduling.services.bulk_scheduling_service import ScheduleSpan


class ConflictsResponse(BaseModel):
    conflicts: list[ConflictInfo]


class BulkPreviewResponse(BaseModel):
    slots: list[GeneratedSlot]
    span: ScheduleSpan


class BulkSlotRequest(BaseModel):
    date: date
    start_time: str
    end_time: str


class BulkCreateRequest(BaseModel):
    slots: list[BulkSlotRequest] = Field(min_length=1)


class BulkCreateResponse(BaseModel):
    created: int
    appointment_ids: list[int]
    conflicts: list[ConflictInfo]  # slots skipped because they were full


class SlotLimitsUpdate(BaseModel):
    staff: int | None = Field(default=None, ge=1)
    portal: int | None = Field(default=None, ge=1)
