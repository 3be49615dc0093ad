from __future__ import annotations

import logging

from libs.core.application.contracts import DeviceRepository

logger = logging.getLogger(__name__)


class DeviceDirectory:
    """Resolves a device to the accounts entitled to its alerts."""

    def __init__(self, repository: DeviceRepository | None) -> None:
        self._repository = repository

    def resolve_recipients(self, device_id: str) -> list[str]:
        if self._repository is None:
            logger.warning(
                "Device store not initialized, cannot resolve users for %s",
                device_id,
            )
            return []

        device = self._repository.get_device(device_id)
        if device is None:
            logger.warning("Device not found: %s", device_id)
            return []
        if not device.owner_user_id:
            logger.warning("Device has no owner: %s", device_id)
            return []

        logger.debug("Device %s owner: %s", device_id, device.owner_user_id)
        # Single-owner model; shared access would extend this list.
        return [device.owner_user_id]
