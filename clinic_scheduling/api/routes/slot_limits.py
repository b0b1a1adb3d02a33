from fastapi import APIRouter, Depends

from clinic_scheduling.api.deps import get_config_store, get_slot_limit_provider
from clinic_scheduling.api.schemas.scheduling import SlotLimitsUpdate
from clinic_scheduling.models.scheduling import SlotLimits
from clinic_scheduling.services.slot_limit_service import SlotLimitProvider
from clinic_scheduling.services.stores import SqlConfigStore

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/slot-limits", response_model=SlotLimits)
async def read_slot_limits(provider: SlotLimitProvider = Depends(get_slot_limit_provider)) -> SlotLimits:
    """Effective limits: stored overrides, else defaults."""
    return await provider.get_slot_limits()


@router.put("/slot-limits", response_model=SlotLimits)
async def update_slot_limits(
    body: SlotLimitsUpdate,
    config_store: SqlConfigStore = Depends(get_config_store),
    provider: SlotLimitProvider = Depends(get_slot_limit_provider),
) -> SlotLimits:
    """Store overrides. A null value clears the override so the default applies."""
    await config_store.update_slot_limits(staff=body.staff, portal=body.portal)
    return await provider.get_slot_limits()
