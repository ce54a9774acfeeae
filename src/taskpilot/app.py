"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from taskpilot.auth import AccessPolicy, AuthService
from taskpilot.config import AppConfig
from taskpilot.enrichment import EnrichmentClient
from taskpilot.services import TaskService
from taskpilot.storage.base import TaskStore
from taskpilot.storage.sqlite_store import SqliteStore
from taskpilot.tokens import TokenService


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for TaskPilot.

    Importance: Simplifies passing dependencies to the API or CLI layers.
    Alternatives: Use a dependency injection container.
    """

    tokens: TokenService
    auth: AuthService
    policy: AccessPolicy
    tasks: TaskService
    store: TaskStore


def build_services(config: AppConfig) -> AppServices:
    """Summary: Build core services from configuration.

    Importance: The token signing key is created here, once per process.
    Alternatives: Instantiate services directly within each entrypoint.
    """

    store = SqliteStore(config.db_path)
    store.initialize()
    enrichment = EnrichmentClient(config.enrichment_url, timeout=config.enrichment_timeout_seconds)
    tokens = TokenService()
    return AppServices(
        tokens=tokens,
        auth=AuthService(tokens=tokens),
        policy=AccessPolicy(),
        tasks=TaskService(store=store, enrichment=enrichment),
        store=store,
    )
