import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from libs.core.application.alert_pipeline import IngestResult
from libs.core.domain.entities import Alert, PushOutcome
from services.api_gateway.config import get_settings
from services.api_gateway.dependencies import get_alert_pipeline, get_backends

router = APIRouter()

_STARTED_AT = time.monotonic()


class AlertBody(BaseModel):
    notification_type: str = ""
    detected_objects: list[str] | None = None
    risk_label: str | None = None
    predicted_risk: str = ""
    description: list[str] = Field(default_factory=list)
    device_identifier: str = ""
    timestamp: int | None = None
    model_version: str = ""
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    screenshots: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("screenshots", "screenshot"),
    )
    additional_data: dict[str, Any] = Field(default_factory=dict)


class AlertIngestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    device_id: str | None = Field(default=None, alias="deviceId")
    alert: AlertBody | None = None


@router.get("/")
def service_info() -> dict[str, object]:
    settings = get_settings()
    return {
        "service": settings.APP_NAME,
        "status": "healthy",
        "timestamp": _utc_now_iso(),
        **_backend_flags(),
        "version": settings.APP_VERSION,
    }


@router.get("/health")
def health() -> dict[str, object]:
    return {"status": "healthy", "timestamp": _utc_now_iso(), **_backend_flags()}


@router.get("/ready")
def ready() -> dict[str, str]:
    return {"status": "ready"}


@router.get("/version")
def version() -> dict[str, str]:
    return {"version": get_settings().APP_VERSION}


@router.get("/api/stats")
def stats() -> dict[str, object]:
    settings = get_settings()
    return {
        "server": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        **_backend_flags(),
        "environment": settings.ENVIRONMENT,
        "timestamp": _utc_now_iso(),
    }


@router.post("/api/alerts")
def ingest_alert(payload: AlertIngestRequest) -> dict[str, object]:
    pipeline = get_alert_pipeline()
    result = pipeline.ingest(
        user_id=payload.user_id,
        device_id=payload.device_id,
        alert=_to_alert(payload.alert) if payload.alert is not None else None,
    )
    return _ingest_result_to_dict(result)


def _to_alert(body: AlertBody) -> Alert:
    return Alert(
        notification_type=body.notification_type,
        detected_objects=body.detected_objects or [],
        risk_label=body.risk_label or "",
        predicted_risk=body.predicted_risk,
        description=body.description,
        device_identifier=body.device_identifier,
        timestamp=body.timestamp,
        model_version=body.model_version,
        confidence_score=body.confidence_score,
        screenshots=body.screenshots,
        additional_data=body.additional_data,
    )


def _ingest_result_to_dict(result: IngestResult) -> dict[str, object]:
    return {
        "success": True,
        "message": "Alert processed successfully",
        "alertIds": result.alert_ids,
        "usersNotified": result.users_notified,
        "pushResults": [_push_outcome_to_dict(item) for item in result.push_results],
        "timestamp": result.timestamp,
    }


def _push_outcome_to_dict(outcome: PushOutcome) -> dict[str, object]:
    payload: dict[str, object] = {
        "userId": outcome.user_id,
        "success": outcome.success,
    }
    if outcome.blocked:
        payload["blocked"] = True
        payload["reason"] = outcome.reason
    elif outcome.skipped:
        payload["skipped"] = True
        payload["reason"] = outcome.reason
    elif outcome.error is not None:
        payload["error"] = outcome.error
    else:
        payload["result"] = outcome.result
    return payload


def _backend_flags() -> dict[str, object]:
    backends = get_backends()
    return {
        "notifications": backends.notifications_enabled,
        "blockList": backends.block_list_enabled,
        "storage": get_settings().STORAGE_BACKEND,
    }


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
