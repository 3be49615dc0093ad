from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Alert:
    """Alert payload emitted by a field device."""

    detected_objects: list[str]
    risk_label: str
    notification_type: str = ""
    predicted_risk: str = ""
    description: list[str] = field(default_factory=list)
    device_identifier: str = ""
    timestamp: Optional[int] = None
    model_version: str = ""
    confidence_score: float = 0.0
    screenshots: list[str] = field(default_factory=list)
    additional_data: dict[str, Any] = field(default_factory=dict)


@dataclass
class Device:
    """Device document with its single owner."""

    device_id: str
    owner_user_id: str | None


@dataclass
class BlockRecord:
    """Row of the account block list."""

    user_id: str
    reason: str
    blocked_by: str | None
    blocked_at: datetime | None
    is_active: bool = True


@dataclass
class BlockStatus:
    """Result of a block-status lookup."""

    blocked: bool
    reason: Optional[str] = None
    blocked_by: Optional[str] = None
    blocked_at: Optional[datetime] = None


@dataclass
class NotificationContent:
    """Human-readable push notification text."""

    title: str
    body: str
    severity_glyph: str


@dataclass
class StoredAlertRecord:
    """Per-recipient copy of an alert kept in the recipient's alert feed."""

    device_id: str
    device_identifier: str
    user_id: str
    notification_type: str
    detected_objects: list[str]
    risk_label: str
    predicted_risk: str
    description: list[str]
    screenshots: list[str]
    model_version: str
    confidence_score: float
    stored_at: datetime
    alert_generated_at: int | None
    additional_data: dict[str, Any] = field(default_factory=dict)
    acknowledged: bool = False
    rating: Optional[int] = None
    rating_accuracy: Optional[str] = None
    record_id: Optional[str] = None


@dataclass
class PushMessage:
    """Message handed to the push gateway."""

    to: str
    title: str
    body: str
    data: dict[str, str]
    badge: int = 1
    sound: str = "default"


@dataclass
class PushOutcome:
    """Per-recipient result of a push attempt.

    Exactly one of ``blocked``, ``skipped``, ``result`` or ``error`` is set.
    """

    user_id: str
    success: bool
    blocked: bool = False
    skipped: bool = False
    reason: Optional[str] = None
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def delivered(cls, user_id: str, result: dict[str, Any]) -> "PushOutcome":
        return cls(user_id=user_id, success=True, result=result)

    @classmethod
    def blocked_by(cls, user_id: str, reason: str | None) -> "PushOutcome":
        return cls(user_id=user_id, success=False, blocked=True, reason=reason)

    @classmethod
    def no_token(cls, user_id: str) -> "PushOutcome":
        return cls(
            user_id=user_id,
            success=False,
            skipped=True,
            reason="no_push_token",
        )

    @classmethod
    def failed(cls, user_id: str, error: str) -> "PushOutcome":
        return cls(user_id=user_id, success=False, error=error)
