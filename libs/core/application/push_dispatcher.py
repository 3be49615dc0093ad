from __future__ import annotations

import logging
from uuid import uuid4

from libs.core.application.block_registry import BlockRegistry
from libs.core.application.contracts import PushGateway, PushTokenRepository
from libs.core.application.fan_out import FanOutPolicy, fan_out
from libs.core.domain.entities import (
    Alert,
    NotificationContent,
    PushMessage,
    PushOutcome,
)

logger = logging.getLogger(__name__)

PUSH_DATA_TYPE = "mlAlert"


class PushDispatcher:
    """Sends alert notifications to each recipient's registered device."""

    def __init__(
        self,
        token_repository: PushTokenRepository | None,
        gateway: PushGateway,
        block_registry: BlockRegistry,
        policy: FanOutPolicy | None = None,
    ) -> None:
        self._tokens = token_repository
        self._gateway = gateway
        self._blocks = block_registry
        self._policy = policy or FanOutPolicy()

    @property
    def enabled(self) -> bool:
        return self._tokens is not None

    def dispatch(
        self,
        alert: Alert,
        content: NotificationContent,
        recipients: list[str],
    ) -> list[PushOutcome]:
        tokens = self._tokens
        if tokens is None:
            logger.warning("Notification backend not initialized, skipping push")
            return []

        results = fan_out(
            recipients,
            lambda user_id: self._dispatch_to_user(tokens, alert, content, user_id),
            self._policy,
        )

        outcomes: list[PushOutcome] = []
        for result in results:
            if result.ok and result.value is not None:
                outcomes.append(result.value)
                continue
            logger.error(
                "Error sending push notification to user %s: %s",
                result.item,
                result.error,
            )
            outcomes.append(PushOutcome.failed(result.item, str(result.error)))
        return outcomes

    def _dispatch_to_user(
        self,
        tokens: PushTokenRepository,
        alert: Alert,
        content: NotificationContent,
        user_id: str,
    ) -> PushOutcome:
        block_status = self._blocks.check_blocked(user_id)
        if block_status.blocked:
            logger.info(
                "Skipping notification for blocked user %s: %s",
                user_id,
                block_status.reason,
            )
            return PushOutcome.blocked_by(user_id, block_status.reason)

        token = tokens.get_push_token(user_id)
        if not token:
            logger.warning("No push token found for user: %s", user_id)
            return PushOutcome.no_token(user_id)

        result = self._gateway.send(build_message(alert, content, token))
        logger.info("Push notification sent to user %s: %s", user_id, result)
        return PushOutcome.delivered(user_id, result)


def build_message(
    alert: Alert,
    content: NotificationContent,
    token: str,
) -> PushMessage:
    alert_id = alert.additional_data.get("alert_id") or str(uuid4())
    timestamp = "" if alert.timestamp is None else str(alert.timestamp)
    return PushMessage(
        to=token,
        title=content.title,
        body=content.body,
        data={
            "type": PUSH_DATA_TYPE,
            "deviceId": alert.device_identifier,
            "alertId": str(alert_id),
            "riskLabel": alert.risk_label,
            "detectedObjects": ", ".join(alert.detected_objects),
            "timestamp": timestamp,
        },
    )
