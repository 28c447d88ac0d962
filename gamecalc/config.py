import os
from dataclasses import dataclass
from typing import List


def _get_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


def _get_list(name: str, default: str = "") -> List[str]:
    return tuple(v.strip() for v in os.getenv(name, default).split(",") if v.strip())


@dataclass
class Settings:
    # Server identity reported on initialize
    server_name: str = os.getenv("SERVER_NAME", "game-analytics-mcp")
    server_version: str = os.getenv("SERVER_VERSION", "1.0.0")

    # RAWG catalog
    rawg_api_key: str = os.getenv("RAWG_API_KEY", "")
    rawg_base_url: str = os.getenv("RAWG_BASE_URL", "https://api.rawg.io/api")
    http_timeout_sec: int = int(os.getenv("HTTP_TIMEOUT_SEC", "12"))

    # Logging
    logs_dir: str = os.getenv("LOGS_DIR", "logs")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_to_file: bool = _get_bool("LOG_TO_FILE", "true")

    # Tools enablement
    enabled_tools: List[str] = _get_list("ENABLED_TOOLS", "*")


settings = Settings()


def tool_enabled(name: str) -> bool:
    enabled = settings.enabled_tools
    if not enabled or enabled == ("*",):
        return True
    return name in enabled
