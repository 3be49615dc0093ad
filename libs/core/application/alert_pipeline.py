from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from libs.core.application.alert_store import AlertStore
from libs.core.application.block_registry import BlockRegistry
from libs.core.application.device_directory import DeviceDirectory
from libs.core.application.errors import (
    AlertProcessingError,
    AlertValidationError,
    SenderBlockedError,
)
from libs.core.application.notification_composer import compose
from libs.core.application.push_dispatcher import PushDispatcher
from libs.core.domain.entities import Alert, PushOutcome

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Aggregated outcome of an accepted alert."""

    alert_ids: list[str]
    users_notified: int
    push_results: list[PushOutcome]
    timestamp: str


class AlertIngestionPipeline:
    """Application service for inbound device alerts."""

    def __init__(
        self,
        block_registry: BlockRegistry,
        device_directory: DeviceDirectory,
        alert_store: AlertStore,
        push_dispatcher: PushDispatcher,
    ) -> None:
        self._blocks = block_registry
        self._devices = device_directory
        self._store = alert_store
        self._dispatcher = push_dispatcher

    def ingest(
        self,
        user_id: str | None,
        device_id: str | None,
        alert: Alert | None,
    ) -> IngestResult:
        if not user_id or not device_id or alert is None:
            raise AlertValidationError(
                "Missing required fields: userId, deviceId, alert"
            )
        if not alert.detected_objects or not alert.risk_label:
            raise AlertValidationError(
                "Invalid alert data: missing detected_objects or risk_label"
            )

        sender_status = self._blocks.check_blocked(user_id)
        if sender_status.blocked:
            logger.warning(
                "Rejected alert from blocked user %s: %s",
                user_id,
                sender_status.reason,
            )
            raise SenderBlockedError(user_id, sender_status.reason)

        logger.info(
            "Received alert user=%s device=%s type=%s risk=%s objects=%s",
            user_id,
            device_id,
            alert.notification_type,
            alert.risk_label,
            ", ".join(alert.detected_objects),
        )

        try:
            return self._fan_out(device_id=device_id, alert=alert)
        except Exception as error:
            logger.exception("Error processing alert for device %s", device_id)
            raise AlertProcessingError(str(error)) from error

    def _fan_out(self, device_id: str, alert: Alert) -> IngestResult:
        content = compose(alert)
        alert_ids = self._store.persist(device_id, alert)

        # Persistence resolves its own recipients; dispatch resolves again.
        user_ids = self._devices.resolve_recipients(device_id)
        push_results = self._dispatcher.dispatch(alert, content, user_ids)

        return IngestResult(
            alert_ids=alert_ids,
            users_notified=len(user_ids),
            push_results=push_results,
            timestamp=_utc_now_iso(),
        )


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
