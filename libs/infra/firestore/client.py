"""Firestore client construction from service account credentials."""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, TypedDict

from google.cloud import firestore

logger = logging.getLogger(__name__)

_GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
_GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
_GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v1/certs"


class FirebaseCredentialOptions(TypedDict):
    """Credential sources, individual fields take precedence over base64."""

    project_id: str
    private_key: str | None
    private_key_id: str | None
    client_email: str | None
    client_id: str | None
    client_cert_url: str | None
    service_account_base64: str | None


def load_service_account_info(options: FirebaseCredentialOptions) -> dict[str, Any]:
    """Build service account info or raise ``ValueError`` if none is configured."""
    private_key = options["private_key"]
    client_email = options["client_email"]
    if private_key and client_email:
        logger.info("Using individual Firebase credential variables")
        return {
            "type": "service_account",
            "project_id": options["project_id"],
            "private_key_id": options["private_key_id"],
            "private_key": _unescape_newlines(private_key),
            "client_email": client_email,
            "client_id": options["client_id"],
            "auth_uri": _GOOGLE_AUTH_URI,
            "token_uri": _GOOGLE_TOKEN_URI,
            "auth_provider_x509_cert_url": _GOOGLE_CERTS_URL,
            "client_x509_cert_url": options["client_cert_url"],
        }

    encoded = options["service_account_base64"]
    if encoded:
        logger.info("Using base64 encoded service account")
        info = json.loads(base64.b64decode(encoded).decode("utf-8"))
        if isinstance(info.get("private_key"), str):
            info["private_key"] = _unescape_newlines(info["private_key"])
        return info

    raise ValueError(
        "No Firebase credentials provided. Set either FIREBASE_PRIVATE_KEY "
        "or FIREBASE_SERVICE_ACCOUNT_BASE64"
    )


def create_firestore_client(options: FirebaseCredentialOptions) -> firestore.Client:
    info = load_service_account_info(options)
    return firestore.Client.from_service_account_info(
        info, project=info.get("project_id") or options["project_id"]
    )


def _unescape_newlines(value: str) -> str:
    return value.replace("\\n", "\n")
