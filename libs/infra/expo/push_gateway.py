"""Expo push notification HTTP gateway."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any
from urllib import request

from libs.core.application.contracts import PushGateway
from libs.core.domain.entities import PushMessage

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"


class ExpoPushGateway(PushGateway):
    """Posts messages to the Expo push API."""

    def __init__(self, url: str = EXPO_PUSH_URL, timeout_sec: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout_sec

    def send(self, message: PushMessage) -> dict[str, Any]:
        req = request.Request(
            url=self._url,
            data=json.dumps(asdict(message)).encode("utf-8"),
            headers={
                "Accept": "application/json",
                "Accept-Encoding": "identity",
                "Content-Type": "application/json",
            },
            method="POST",
        )
        with request.urlopen(req, timeout=self._timeout) as response:
            return json.loads(response.read().decode("utf-8"))
