from libs.core.domain.entities import Alert, NotificationContent

RISK_GLYPHS = {
    "critical": "\U0001F534",
    "high": "\U0001F7E0",
    "medium": "\U0001F7E1",
    "low": "\U0001F7E2",
}
FALLBACK_GLYPH = "\U0001F535"
OBJECT_SEPARATOR = ", "
FALLBACK_DESCRIPTION = "Alert detected"


def compose(alert: Alert) -> NotificationContent:
    """Build push notification text for an alert."""
    glyph = RISK_GLYPHS.get(alert.risk_label.lower(), FALLBACK_GLYPH)
    title = f"{glyph} {alert.risk_label} Alert - {alert.device_identifier}"

    summary = alert.description[0] if alert.description else ""
    body = (
        f"{OBJECT_SEPARATOR.join(alert.detected_objects)}: "
        f"{summary or FALLBACK_DESCRIPTION}"
    )
    return NotificationContent(title=title, body=body, severity_glyph=glyph)
