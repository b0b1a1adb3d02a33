from datetime import UTC, datetime

from sqlmodel import Field, SQLModel

DEFAULT_SETTINGS_ID = "default"


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class SystemSettings(SQLModel, table=True):
    __tablename__ = "system_settings"
    id: str = Field(default=DEFAULT_SETTINGS_ID, primary_key=True)
    max_slots_staff: int | None = None
    max_slots_portal: int | None = None
    updated_at: datetime = Field(default_factory=_utc_naive_now)
