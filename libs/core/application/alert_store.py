from __future__ import annotations

import logging
from datetime import datetime, timezone

from libs.core.application.block_registry import BlockRegistry
from libs.core.application.contracts import AlertRecordRepository
from libs.core.application.device_directory import DeviceDirectory
from libs.core.application.fan_out import FanOutPolicy, fan_out
from libs.core.domain.entities import Alert, StoredAlertRecord

logger = logging.getLogger(__name__)


class AlertStore:
    """Persists one alert record per eligible recipient of a device."""

    def __init__(
        self,
        device_directory: DeviceDirectory,
        block_registry: BlockRegistry,
        record_repository: AlertRecordRepository | None,
        policy: FanOutPolicy | None = None,
    ) -> None:
        self._devices = device_directory
        self._blocks = block_registry
        self._records = record_repository
        self._policy = policy or FanOutPolicy()

    def persist(self, device_id: str, alert: Alert) -> list[str]:
        """Store the alert for every non-blocked recipient.

        Returns the ids of the records that were written. Per-recipient
        failures are logged and skipped; only recipient resolution errors
        propagate.
        """
        records = self._records
        if records is None:
            logger.warning("Alert store not initialized, skipping persistence")
            return []

        user_ids = self._devices.resolve_recipients(device_id)
        if not user_ids:
            logger.warning("No users found for device: %s", device_id)
            return []

        logger.info("Storing alert for %d user(s)", len(user_ids))
        results = fan_out(
            user_ids,
            lambda user_id: self._persist_for_user(records, device_id, alert, user_id),
            self._policy,
        )

        stored_ids: list[str] = []
        for result in results:
            if not result.ok:
                logger.error(
                    "Error storing alert for user %s: %s", result.item, result.error
                )
                continue
            if result.value is not None:
                stored_ids.append(result.value)
        return stored_ids

    def _persist_for_user(
        self,
        records: AlertRecordRepository,
        device_id: str,
        alert: Alert,
        user_id: str,
    ) -> str | None:
        block_status = self._blocks.check_blocked(user_id)
        if block_status.blocked:
            logger.info(
                "Skipping alert storage for blocked user %s: %s",
                user_id,
                block_status.reason,
            )
            return None

        record_id = records.append(
            user_id, build_record(device_id=device_id, user_id=user_id, alert=alert)
        )
        logger.info("Alert stored for user %s: %s", user_id, record_id)
        return record_id


def build_record(device_id: str, user_id: str, alert: Alert) -> StoredAlertRecord:
    return StoredAlertRecord(
        device_id=device_id,
        device_identifier=alert.device_identifier,
        user_id=user_id,
        notification_type=alert.notification_type,
        detected_objects=list(alert.detected_objects),
        risk_label=alert.risk_label,
        predicted_risk=alert.predicted_risk,
        description=list(alert.description),
        screenshots=list(alert.screenshots),
        model_version=alert.model_version,
        confidence_score=alert.confidence_score,
        stored_at=datetime.now(timezone.utc),
        alert_generated_at=alert.timestamp,
        additional_data=dict(alert.additional_data),
    )
