from typing import Any, Protocol

from libs.core.domain.entities import (
    BlockRecord,
    Device,
    PushMessage,
    StoredAlertRecord,
)


class BlockRepository(Protocol):
    """Account block list contract."""

    def find_active_block(self, user_id: str) -> BlockRecord | None: ...


class DeviceRepository(Protocol):
    """Device document lookup contract."""

    def get_device(self, device_id: str) -> Device | None: ...


class PushTokenRepository(Protocol):
    """User profile lookup of registered push tokens."""

    def get_push_token(self, user_id: str) -> str | None: ...


class AlertRecordRepository(Protocol):
    """Per-recipient alert feed persistence contract."""

    def append(self, user_id: str, record: StoredAlertRecord) -> str: ...


class PushGateway(Protocol):
    """External push delivery service."""

    def send(self, message: PushMessage) -> dict[str, Any]: ...
