from libs.core.application.alert_pipeline import AlertIngestionPipeline
from libs.core.application.alert_store import AlertStore
from libs.core.application.block_registry import BlockRegistry
from libs.core.application.device_directory import DeviceDirectory
from libs.core.application.fan_out import FanOutPolicy
from libs.core.application.push_dispatcher import PushDispatcher
from services.api_gateway.config import Settings, get_settings
from services.api_gateway.infrastructure.backends import Backends, initialize_backends
from services.api_gateway.infrastructure.memory_store import InMemoryDatabase

settings = get_settings()
db = InMemoryDatabase()
backends = initialize_backends(settings, db)


def build_alert_pipeline(
    backends: Backends,
    settings: Settings,
) -> AlertIngestionPipeline:
    policy = FanOutPolicy(
        max_workers=settings.FANOUT_MAX_WORKERS,
        task_timeout_sec=settings.RECIPIENT_TIMEOUT_SEC,
    )
    block_registry = BlockRegistry(backends.block_repository)
    device_directory = DeviceDirectory(backends.device_repository)
    return AlertIngestionPipeline(
        block_registry=block_registry,
        device_directory=device_directory,
        alert_store=AlertStore(
            device_directory=device_directory,
            block_registry=block_registry,
            record_repository=backends.record_repository,
            policy=policy,
        ),
        push_dispatcher=PushDispatcher(
            token_repository=backends.token_repository,
            gateway=backends.push_gateway,
            block_registry=block_registry,
            policy=policy,
        ),
    )


alert_pipeline = build_alert_pipeline(backends, settings)


def get_alert_pipeline() -> AlertIngestionPipeline:
    return alert_pipeline


def get_backends() -> Backends:
    return backends


def reset_state() -> None:
    db.clear()
