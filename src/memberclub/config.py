"""
Runtime configuration, read from the environment.
"""

from dataclasses import dataclass, field
from typing import List
import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClubConfig:
    """Configuration for a club session and its API."""
    api_key: str = "dev-key-change-in-production"
    operator_username: str = "admin"
    operator_password: str = "admin"
    operator_name: str = "Club Operator"
    load_sample_data: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 8000
    debug: bool = False

    @classmethod
    def from_env(cls) -> "ClubConfig":
        defaults = cls()
        return cls(
            api_key=os.environ.get("API_KEY", defaults.api_key),
            operator_username=os.environ.get("OPERATOR_USERNAME", defaults.operator_username),
            operator_password=os.environ.get("OPERATOR_PASSWORD", defaults.operator_password),
            operator_name=os.environ.get("OPERATOR_NAME", defaults.operator_name),
            load_sample_data=_env_bool("LOAD_SAMPLE_DATA", defaults.load_sample_data),
            cors_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
            port=int(os.environ.get("PORT", defaults.port)),
            debug=_env_bool("DEBUG", defaults.debug),
        )
