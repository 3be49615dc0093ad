from __future__ import annotations

from typing import Any

from google.cloud import firestore

from libs.core.application.contracts import (
    AlertRecordRepository,
    DeviceRepository,
    PushTokenRepository,
)
from libs.core.domain.entities import Device, StoredAlertRecord

DEVICES_COLLECTION = "devices"
USERS_COLLECTION = "users"
ALERTS_SUBCOLLECTION = "mlAlerts"

DEFAULT_TIMEOUT_SEC = 10.0


class FirestoreDeviceRepository(DeviceRepository):
    """Reads ``devices/{deviceId}`` documents."""

    def __init__(
        self,
        client: firestore.Client,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self._client = client
        self._timeout = timeout_sec

    def get_device(self, device_id: str) -> Device | None:
        snapshot = (
            self._client.collection(DEVICES_COLLECTION)
            .document(device_id)
            .get(timeout=self._timeout)
        )
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return Device(device_id=device_id, owner_user_id=data.get("userId"))


class FirestorePushTokenRepository(PushTokenRepository):
    """Reads the Expo push token from ``users/{userId}``."""

    def __init__(
        self,
        client: firestore.Client,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self._client = client
        self._timeout = timeout_sec

    def get_push_token(self, user_id: str) -> str | None:
        snapshot = (
            self._client.collection(USERS_COLLECTION)
            .document(user_id)
            .get(timeout=self._timeout)
        )
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return data.get("expoPushToken")


class FirestoreAlertRecordRepository(AlertRecordRepository):
    """Appends records to ``users/{userId}/mlAlerts``."""

    def __init__(
        self,
        client: firestore.Client,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self._client = client
        self._timeout = timeout_sec

    def append(self, user_id: str, record: StoredAlertRecord) -> str:
        _, reference = (
            self._client.collection(USERS_COLLECTION)
            .document(user_id)
            .collection(ALERTS_SUBCOLLECTION)
            .add(record_to_document(record), timeout=self._timeout)
        )
        return reference.id


def record_to_document(record: StoredAlertRecord) -> dict[str, Any]:
    return {
        "deviceId": record.device_id,
        "deviceIdentifier": record.device_identifier,
        "userId": record.user_id,
        "notificationType": record.notification_type,
        "detectedObjects": record.detected_objects,
        "riskLabel": record.risk_label,
        "predictedRisk": record.predicted_risk,
        "description": record.description,
        "screenshots": record.screenshots,
        "timestamp": firestore.SERVER_TIMESTAMP,
        "alertGeneratedAt": record.alert_generated_at,
        "modelVersion": record.model_version,
        "confidenceScore": record.confidence_score,
        "acknowledged": record.acknowledged,
        "rating": record.rating,
        "ratingAccuracy": record.rating_accuracy,
        "additionalData": record.additional_data,
    }
