# === NAVMAP v1 ===
# {
#   "module": "DeployTrack.RobloxDeployment.settings",
#   "purpose": "Environment-driven configuration for deploy lookups",
#   "sections": [
#     {
#       "id": "deploymentsettings",
#       "name": "DeploymentSettings",
#       "anchor": "class-deploymentsettings",
#       "kind": "class"
#     },
#     {
#       "id": "get-settings",
#       "name": "get_settings",
#       "anchor": "function-get-settings",
#       "kind": "function"
#     },
#     {
#       "id": "reset-settings",
#       "name": "reset_settings",
#       "anchor": "function-reset-settings",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Environment-driven configuration for deploy lookups.

Values are read from ``RBXDEPLOY_*`` environment variables on first access and
memoised for the process lifetime. List-valued settings accept JSON arrays,
for example::

    RBXDEPLOY_MIRROR_ORIGINS='["https://setup.rbxcdn.com"]'
"""

from __future__ import annotations

import threading
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHANNEL = "LIVE"

DEFAULT_MIRROR_ORIGINS = (
    "https://setup.rbxcdn.com",
    "https://setup-ak.rbxcdn.com",
    "https://s3.amazonaws.com/setup.roblox.com",
)

DEFAULT_METADATA_ENDPOINTS = (
    "https://clientsettingscdn.roblox.com",
    "https://clientsettings.roblox.com",
)


class DeploymentSettings(BaseSettings):
    """Configuration consumed by mirror selection and deploy lookups."""

    model_config = SettingsConfigDict(
        env_prefix="RBXDEPLOY_", case_sensitive=False, extra="ignore"
    )

    channel: str = Field(
        default=DEFAULT_CHANNEL,
        description="Channel used when a location is built without an explicit channel",
    )
    binary_type: str = Field(default="WindowsPlayer", description="Client binary type")
    mirror_origins: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MIRROR_ORIGINS),
        description="Deploy mirrors, probed in order",
    )
    metadata_endpoints: List[str] = Field(
        default_factory=lambda: list(DEFAULT_METADATA_ENDPOINTS),
        description="Primary and fallback client-version endpoints",
    )
    probe_resource: str = Field(default="/version", description="Mirror health-check path")

    connect_timeout_s: float = Field(default=5.0, gt=0, description="Connect timeout (seconds)")
    read_timeout_s: float = Field(default=30.0, gt=0, description="Read timeout (seconds)")
    user_agent: str = Field(default="DeployTrack/RobloxDeployment", description="User-Agent")

    log_level: str = Field(default="INFO", description="Logging level name")
    log_json: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("mirror_origins", "metadata_endpoints")
    @classmethod
    def validate_base_urls(cls, v: List[str]) -> List[str]:
        cleaned = [item.strip().rstrip("/") for item in v if item and item.strip()]
        if not cleaned:
            raise ValueError("At least one base URL is required")
        for item in cleaned:
            if not item.startswith(("https://", "http://")):
                raise ValueError(f"Base URL must be absolute http(s): {item}")
        return cleaned

    @field_validator("metadata_endpoints")
    @classmethod
    def validate_endpoint_pair(cls, v: List[str]) -> List[str]:
        if len(v) > 2:
            raise ValueError("metadata_endpoints holds a primary and at most one fallback")
        return v

    @field_validator("probe_resource")
    @classmethod
    def validate_resource(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("probe_resource must start with '/'")
        return v

    @field_validator("channel", "binary_type")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v


_SETTINGS_CACHE: Optional[DeploymentSettings] = None
_SETTINGS_LOCK = threading.Lock()


def get_settings() -> DeploymentSettings:
    """Return the memoised :class:`DeploymentSettings` built from the environment."""

    global _SETTINGS_CACHE  # noqa: PLW0603

    with _SETTINGS_LOCK:
        if _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = DeploymentSettings()
        return _SETTINGS_CACHE


def reset_settings() -> None:
    """Drop the memoised settings so the next access re-reads the environment."""

    global _SETTINGS_CACHE  # noqa: PLW0603

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


__all__ = [
    "DEFAULT_CHANNEL",
    "DEFAULT_METADATA_ENDPOINTS",
    "DEFAULT_MIRROR_ORIGINS",
    "DeploymentSettings",
    "get_settings",
    "reset_settings",
]
