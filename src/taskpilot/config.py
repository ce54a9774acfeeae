"""Summary: Application configuration for TaskPilot.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import math
import os
from pathlib import Path
from dataclasses import dataclass


DEFAULTS_PATH = Path("config") / "defaults.json"


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for the API, storage, and enrichment.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    api_host: str
    api_port: int
    cors_origins: list[str]
    enrichment_url: str
    enrichment_timeout_seconds: float
    log_level: str = "INFO"

    @staticmethod
    def from_env(defaults_path: Path = DEFAULTS_PATH) -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(defaults_path)
        load_dotenv(Path(".env"))
        timeout = float(
            os.getenv("TASKPILOT_ENRICHMENT_TIMEOUT_SECONDS", defaults["enrichment_timeout_seconds"])
        )
        if not math.isfinite(timeout) or timeout <= 0:
            raise ValueError("TASKPILOT_ENRICHMENT_TIMEOUT_SECONDS must be a positive, finite number")
        return AppConfig(
            db_path=os.getenv("TASKPILOT_DB_PATH", defaults["db_path"]),
            api_host=os.getenv("TASKPILOT_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("TASKPILOT_API_PORT", defaults["api_port"])),
            cors_origins=split_csv(os.getenv("TASKPILOT_CORS_ORIGINS", defaults["cors_origins"])),
            enrichment_url=os.getenv("TASKPILOT_ENRICHMENT_URL", defaults["enrichment_url"]),
            enrichment_timeout_seconds=timeout,
            log_level=os.getenv("TASKPILOT_LOG_LEVEL", defaults.get("log_level", "INFO")),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps local overrides out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def split_csv(value: str) -> list[str]:
    """Summary: Split a comma-separated setting into trimmed items.

    Importance: Lets list settings like CORS origins live in flat env variables.
    Alternatives: Store lists as JSON arrays in the environment.
    """

    return [item.strip() for item in value.split(",") if item.strip()]
