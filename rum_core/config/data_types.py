from typing import Any

from pydantic import Field
from pydantic import field_validator

from rum_core.common.models import FrozenModel
from rum_core.primitives import ApplicationId
from rum_core.primitives import FeatureName
from rum_core.primitives import LogLevel

V2_FORMAT_FEATURE: FeatureName = FeatureName("v2_format")


class RumConfiguration(FrozenModel):
    """Settings of one collector instance."""

    application_id: ApplicationId = Field(description="Identifier of the monitored application")
    track_interactions: bool = Field(
        default=False,
        description="Whether automatic user actions are turned into raw events",
    )
    enable_experimental_features: tuple[FeatureName, ...] = Field(
        default=(),
        description="Names of the experimental features turned on for this collector",
    )
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Minimum level of emitted log lines")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    def is_enabled(self, feature: str) -> bool:
        """Whether the named experimental feature is turned on."""
        return feature in self.enable_experimental_features
