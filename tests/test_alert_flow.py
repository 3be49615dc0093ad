"""Alert ingestion API tests."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from services.api_gateway.app import app
from services.api_gateway.dependencies import db, reset_state
from services.api_gateway.infrastructure.memory_store import InMemoryDeviceRepository

client = TestClient(app)


def setup_function() -> None:
    reset_state()


def _alert(**overrides: Any) -> dict[str, Any]:
    alert: dict[str, Any] = {
        "notification_type": "ml_detection",
        "detected_objects": ["person"],
        "risk_label": "Critical",
        "predicted_risk": "intrusion",
        "description": ["x"],
        "device_identifier": "d1",
        "timestamp": 1000,
        "model_version": "v1",
        "confidence_score": 0.9,
    }
    alert.update(overrides)
    return alert


def _post_alert(
    user_id: str | None = "u1",
    device_id: str | None = "d1",
    alert: dict[str, Any] | None = None,
) -> Any:
    body: dict[str, Any] = {}
    if user_id is not None:
        body["userId"] = user_id
    if device_id is not None:
        body["deviceId"] = device_id
    if alert is not None:
        body["alert"] = alert
    return client.post("/api/alerts", json=body)


def _assert_no_side_effects() -> None:
    assert db.alerts == {}
    assert db.outbox == []


def test_alert_stored_and_pushed_to_device_owner() -> None:
    db.register_device("d1", owner_user_id="u2")
    db.push_tokens["u2"] = "TOK"

    response = _post_alert(alert=_alert())

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["usersNotified"] == 1
    assert len(payload["alertIds"]) == 1

    stored = db.alerts["u2"]
    assert len(stored) == 1
    assert stored[0].record_id == payload["alertIds"][0]
    assert stored[0].alert_generated_at == 1000
    assert stored[0].acknowledged is False
    assert stored[0].rating is None

    assert len(payload["pushResults"]) == 1
    push_result = payload["pushResults"][0]
    assert push_result["userId"] == "u2"
    assert push_result["success"] is True
    assert push_result["result"]["data"]["status"] == "ok"
    assert "blocked" not in push_result
    assert "error" not in push_result

    message = db.outbox[0]
    assert message.to == "TOK"
    assert message.title == "\U0001F534 Critical Alert - d1"
    assert message.body == "person: x"
    assert message.data["type"] == "mlAlert"
    assert message.data["timestamp"] == "1000"
    assert message.data["detectedObjects"] == "person"


def test_blocked_recipient_gets_no_record_and_blocked_outcome() -> None:
    db.register_device("d1", owner_user_id="u2")
    db.push_tokens["u2"] = "TOK"
    db.block_user("u2", reason="abuse")

    response = _post_alert(alert=_alert())

    assert response.status_code == 200
    payload = response.json()
    assert payload["alertIds"] == []
    assert payload["usersNotified"] == 1
    assert payload["pushResults"] == [
        {"userId": "u2", "success": False, "blocked": True, "reason": "abuse"}
    ]
    _assert_no_side_effects()


def test_blocked_sender_rejected_without_side_effects() -> None:
    db.register_device("d1", owner_user_id="u2")
    db.push_tokens["u2"] = "TOK"
    db.block_user("u1", reason="spam")

    response = _post_alert(alert=_alert())

    assert response.status_code == 403
    assert response.json() == {
        "error": "User is blocked and cannot send alerts",
        "reason": "spam",
    }
    _assert_no_side_effects()


def test_inactive_block_does_not_reject_sender() -> None:
    db.register_device("d1", owner_user_id="u2")
    db.block_user("u1", reason="expired", is_active=False)

    response = _post_alert(alert=_alert())

    assert response.status_code == 200


@pytest.mark.parametrize(
    ("user_id", "device_id", "alert"),
    [
        (None, "d1", {"detected_objects": ["person"], "risk_label": "High"}),
        ("u1", None, {"detected_objects": ["person"], "risk_label": "High"}),
        ("u1", "d1", None),
    ],
)
def test_missing_required_fields_returns_400(
    user_id: str | None,
    device_id: str | None,
    alert: dict[str, Any] | None,
) -> None:
    db.register_device("d1", owner_user_id="u2")
    db.push_tokens["u2"] = "TOK"

    response = _post_alert(user_id=user_id, device_id=device_id, alert=alert)

    assert response.status_code == 400
    assert response.json() == {
        "error": "Missing required fields: userId, deviceId, alert"
    }
    _assert_no_side_effects()


@pytest.mark.parametrize(
    "alert",
    [
        {"risk_label": "High"},
        {"detected_objects": ["person"]},
        {"detected_objects": [], "risk_label": "High"},
        {"detected_objects": ["person"], "risk_label": ""},
    ],
)
def test_invalid_alert_data_returns_400(alert: dict[str, Any]) -> None:
    db.register_device("d1", owner_user_id="u2")
    db.push_tokens["u2"] = "TOK"

    response = _post_alert(alert=alert)

    assert response.status_code == 400
    assert response.json() == {
        "error": "Invalid alert data: missing detected_objects or risk_label"
    }
    _assert_no_side_effects()


def test_malformed_confidence_returns_400() -> None:
    db.register_device("d1", owner_user_id="u2")

    response = _post_alert(alert=_alert(confidence_score=1.5))

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "Invalid alert data"
    assert "confidence_score" in payload["reason"]
    _assert_no_side_effects()


def test_device_without_owner_accepted_with_no_recipients() -> None:
    db.register_device("d1", owner_user_id=None)

    response = _post_alert(alert=_alert())

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["usersNotified"] == 0
    assert payload["alertIds"] == []
    assert payload["pushResults"] == []


def test_unknown_device_accepted_with_no_recipients() -> None:
    response = _post_alert(device_id="missing", alert=_alert())

    assert response.status_code == 200
    assert response.json()["usersNotified"] == 0


def test_recipient_without_token_is_reported_as_skipped() -> None:
    db.register_device("d1", owner_user_id="u2")

    response = _post_alert(alert=_alert())

    assert response.status_code == 200
    payload = response.json()
    assert len(payload["alertIds"]) == 1
    assert payload["pushResults"] == [
        {
            "userId": "u2",
            "success": False,
            "skipped": True,
            "reason": "no_push_token",
        }
    ]
    assert db.outbox == []


def test_client_alert_id_is_used_for_correlation() -> None:
    db.register_device("d1", owner_user_id="u2")
    db.push_tokens["u2"] = "TOK"

    response = _post_alert(
        alert=_alert(additional_data={"alert_id": "client-42", "zone": "porch"})
    )

    assert response.status_code == 200
    assert db.outbox[0].data["alertId"] == "client-42"
    assert db.alerts["u2"][0].additional_data == {
        "alert_id": "client-42",
        "zone": "porch",
    }


def test_legacy_screenshot_field_is_stored() -> None:
    db.register_device("d1", owner_user_id="u2")

    response = _post_alert(alert=_alert(screenshot=["gs://shots/1.jpg"]))

    assert response.status_code == 200
    assert db.alerts["u2"][0].screenshots == ["gs://shots/1.jpg"]


def test_directory_failure_returns_internal_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _raise(self: InMemoryDeviceRepository, device_id: str) -> None:
        raise RuntimeError("directory offline")

    monkeypatch.setattr(InMemoryDeviceRepository, "get_device", _raise)

    response = _post_alert(alert=_alert())

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error",
        "message": "directory offline",
    }
    _assert_no_side_effects()
