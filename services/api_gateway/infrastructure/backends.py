"""Process-wide backend handles, initialized once with degraded fallbacks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Engine

from libs.core.application.contracts import (
    AlertRecordRepository,
    BlockRepository,
    DeviceRepository,
    PushGateway,
    PushTokenRepository,
)
from libs.infra.expo.push_gateway import ExpoPushGateway
from libs.infra.firestore.client import create_firestore_client
from libs.infra.firestore.repositories import (
    FirestoreAlertRecordRepository,
    FirestoreDeviceRepository,
    FirestorePushTokenRepository,
)
from libs.infra.postgres.repositories import PostgresBlockRepository, build_engine
from services.api_gateway.config import Settings
from services.api_gateway.infrastructure.memory_store import (
    InMemoryAlertRecordRepository,
    InMemoryBlockRepository,
    InMemoryDatabase,
    InMemoryDeviceRepository,
    InMemoryPushGateway,
    InMemoryPushTokenRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class Backends:
    """Repositories and gateways shared by all requests.

    A ``None`` repository marks a subsystem that failed to initialize.
    """

    block_repository: BlockRepository | None
    device_repository: DeviceRepository | None
    record_repository: AlertRecordRepository | None
    token_repository: PushTokenRepository | None
    push_gateway: PushGateway
    engine: Engine | None = None

    @property
    def notifications_enabled(self) -> bool:
        return self.token_repository is not None

    @property
    def block_list_enabled(self) -> bool:
        return self.block_repository is not None

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Block list connection pool closed")


def initialize_backends(settings: Settings, db: InMemoryDatabase) -> Backends:
    block_repository, engine = _init_block_list(settings, db)

    device_repository: DeviceRepository | None = None
    record_repository: AlertRecordRepository | None = None
    token_repository: PushTokenRepository | None = None

    if settings.STORAGE_BACKEND == "memory":
        device_repository = InMemoryDeviceRepository(db)
        record_repository = InMemoryAlertRecordRepository(db)
        token_repository = InMemoryPushTokenRepository(db)
    else:
        try:
            client = create_firestore_client(
                {
                    "project_id": settings.FIREBASE_PROJECT_ID,
                    "private_key": settings.FIREBASE_PRIVATE_KEY,
                    "private_key_id": settings.FIREBASE_PRIVATE_KEY_ID,
                    "client_email": settings.FIREBASE_CLIENT_EMAIL,
                    "client_id": settings.FIREBASE_CLIENT_ID,
                    "client_cert_url": settings.FIREBASE_CLIENT_CERT_URL,
                    "service_account_base64": settings.FIREBASE_SERVICE_ACCOUNT_BASE64,
                }
            )
        except Exception as error:
            logger.error("Firestore initialization failed: %s", error)
            logger.warning("Continuing without Firestore (notifications disabled)")
        else:
            timeout = settings.FIRESTORE_TIMEOUT_SEC
            device_repository = FirestoreDeviceRepository(client, timeout)
            record_repository = FirestoreAlertRecordRepository(client, timeout)
            token_repository = FirestorePushTokenRepository(client, timeout)
            logger.info("Firestore client initialized")

    push_gateway: PushGateway
    if settings.PUSH_GATEWAY == "memory":
        push_gateway = InMemoryPushGateway(db)
    else:
        push_gateway = ExpoPushGateway(
            url=settings.EXPO_PUSH_URL, timeout_sec=settings.PUSH_TIMEOUT_SEC
        )

    return Backends(
        block_repository=block_repository,
        device_repository=device_repository,
        record_repository=record_repository,
        token_repository=token_repository,
        push_gateway=push_gateway,
        engine=engine,
    )


def _init_block_list(
    settings: Settings,
    db: InMemoryDatabase,
) -> tuple[BlockRepository | None, Engine | None]:
    if not settings.DATABASE_URL:
        logger.info("DATABASE_URL not set, using in-memory block list")
        return InMemoryBlockRepository(db), None

    try:
        engine = build_engine(
            settings.DATABASE_URL,
            pool_size=settings.DATABASE_POOL_SIZE,
            connect_timeout_sec=settings.DATABASE_CONNECT_TIMEOUT_SEC,
            statement_timeout_ms=settings.DATABASE_STATEMENT_TIMEOUT_MS,
            require_ssl=settings.is_production,
        )
    except Exception as error:
        logger.error("Block list connection pool initialization failed: %s", error)
        return None, None

    logger.info("PostgreSQL connection initialized for user blocking checks")
    return PostgresBlockRepository(engine), engine
