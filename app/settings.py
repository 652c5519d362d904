import logging
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "n", "no", "off"}


class FeatureFlags(BaseModel):
    """Per report kind switches controlling whether findings are mapped and exported."""

    model_config = ConfigDict(frozen=True)

    config_audit: bool = True
    infra_assessment: bool = True
    cluster_compliance: bool = True
    vulnerability: bool = True


class Settings(BaseSettings):
    """Application configuration loaded from environment variables and .env files."""

    region: str = "us-east-1"
    log_level: str = "INFO"
    batch_size: int = Field(default=100, ge=1, le=100)
    infra_assessment_enable: bool = True
    config_audit_enable: bool = True
    cluster_compliance_enable: bool = True
    vulnerability_enable: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator(
        "infra_assessment_enable",
        "config_audit_enable",
        "cluster_compliance_enable",
        "vulnerability_enable",
        mode="before",
    )
    @classmethod
    def _lenient_bool(cls, value: Any, info) -> Any:
        if isinstance(value, bool) or value is None:
            return True if value is None else value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        default = cls.model_fields[info.field_name].default
        logger.warning("Invalid boolean for %s: %s, using default: %s", info.field_name.upper(), value, default)
        return default

    def feature_flags(self) -> FeatureFlags:
        return FeatureFlags(
            config_audit=self.config_audit_enable,
            infra_assessment=self.infra_assessment_enable,
            cluster_compliance=self.cluster_compliance_enable,
            vulnerability=self.vulnerability_enable,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
