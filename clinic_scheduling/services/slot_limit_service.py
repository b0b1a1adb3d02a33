import logging

from clinic_scheduling.models.scheduling import SlotLimits
from clinic_scheduling.services.stores import ConfigStore

logger = logging.getLogger(__name__)


class SlotLimitProvider:
    """Capacity ceilings per slot, with configured overrides over built-in defaults."""

    def __init__(self, config_store: ConfigStore, default_staff: int, default_portal: int) -> None:
        self.config_store = config_store
        self.default_staff = default_staff
        self.default_portal = default_portal

    async def get_slot_limits(self) -> SlotLimits:
        stored = await self.config_store.get_slot_limits()
        if stored is None:
            logger.debug("No slot limits configured, using defaults staff=%d portal=%d", self.default_staff, self.default_portal)
            return SlotLimits(staff=self.default_staff, portal=self.default_portal)
        return SlotLimits(
            staff=stored.staff if stored.staff is not None else self.default_staff,
            portal=stored.portal if stored.portal is not None else self.default_portal,
        )
