"""Pydantic model describing resolved deploy information for one channel."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ClientVersion(BaseModel):
    """Deploy information published for a channel.

    Built from the client-version endpoint payload. After construction the
    resolver only ever sets ``is_behind_default_channel`` and ``timestamp``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore", populate_by_name=True)

    version: str = Field(description="Client version string, e.g. 0.612.0.6120532")
    version_guid: str = Field(
        validation_alias=AliasChoices("clientVersionUpload", "versionGuid", "version_guid"),
        serialization_alias="versionGuid",
        description="Build identifier used to address deploy files",
    )
    bootstrapper_version: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("bootstrapperVersion", "bootstrapper_version"),
        serialization_alias="bootstrapperVersion",
    )
    timestamp: Optional[datetime] = Field(
        default=None, description="Approximate release time in local time"
    )
    is_behind_default_channel: bool = Field(
        default=False,
        validation_alias=AliasChoices("isBehindDefaultChannel", "is_behind_default_channel"),
        serialization_alias="isBehindDefaultChannel",
    )


__all__ = ["ClientVersion"]
