"""In-memory storage for local runs and tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from libs.core.application.contracts import (
    AlertRecordRepository,
    BlockRepository,
    DeviceRepository,
    PushGateway,
    PushTokenRepository,
)
from libs.core.domain.entities import (
    BlockRecord,
    Device,
    PushMessage,
    StoredAlertRecord,
)


@dataclass
class InMemoryDatabase:
    """Shared in-memory tables."""

    devices: dict[str, Device] = field(default_factory=dict)
    push_tokens: dict[str, str] = field(default_factory=dict)
    blocks: dict[str, BlockRecord] = field(default_factory=dict)
    alerts: dict[str, list[StoredAlertRecord]] = field(default_factory=dict)
    outbox: list[PushMessage] = field(default_factory=list)

    def clear(self) -> None:
        self.devices.clear()
        self.push_tokens.clear()
        self.blocks.clear()
        self.alerts.clear()
        self.outbox.clear()

    def register_device(self, device_id: str, owner_user_id: str | None) -> None:
        self.devices[device_id] = Device(
            device_id=device_id, owner_user_id=owner_user_id
        )

    def block_user(
        self,
        user_id: str,
        reason: str,
        blocked_by: str | None = "admin",
        is_active: bool = True,
    ) -> None:
        self.blocks[user_id] = BlockRecord(
            user_id=user_id,
            reason=reason,
            blocked_by=blocked_by,
            blocked_at=datetime.now(timezone.utc),
            is_active=is_active,
        )


class InMemoryBlockRepository(BlockRepository):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def find_active_block(self, user_id: str) -> BlockRecord | None:
        record = self._db.blocks.get(user_id)
        if record is None or not record.is_active:
            return None
        return record


class InMemoryDeviceRepository(DeviceRepository):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def get_device(self, device_id: str) -> Device | None:
        return self._db.devices.get(device_id)


class InMemoryPushTokenRepository(PushTokenRepository):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def get_push_token(self, user_id: str) -> str | None:
        return self._db.push_tokens.get(user_id)


class InMemoryAlertRecordRepository(AlertRecordRepository):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def append(self, user_id: str, record: StoredAlertRecord) -> str:
        record_id = str(uuid4())
        self._db.alerts.setdefault(user_id, []).append(
            replace(record, record_id=record_id)
        )
        return record_id


class InMemoryPushGateway(PushGateway):
    """Collects messages in the outbox and acknowledges them like Expo."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def send(self, message: PushMessage) -> dict[str, Any]:
        self._db.outbox.append(message)
        return {"data": {"status": "ok", "id": str(uuid4())}}
