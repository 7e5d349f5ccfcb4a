"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Deployment settings shared by both FleetWise stacks."""

    # Vehicle / network
    thing_name: str = "fwdemo-rpi"
    interface_id: str = "1"
    can_interface_name: str = "can0"
    association_behavior: str = "ValidateIotThingExists"

    # Timestream
    timestream_database: str = "fleetwisedb"
    timestream_table: str = "campaign"
    memory_store_retention_hours: int = Field(default=24, ge=1)
    magnetic_store_retention_days: int = Field(default=7, ge=1)

    # IAM
    execution_role_name: str = "TimestreamExecutionRole"

    # Campaign
    campaign_name: str = "TimeBasedCampaign001"
    collection_period_ms: int = Field(default=10000, ge=10000, le=86_400_000)
    spooling_mode: str = "TO_DISK"
    diagnostics_mode: str = "SEND_ACTIVE_DTCS"

    # S3 destination (disabled: campaigns write to Timestream only)
    enable_s3_destination: bool = False
    s3_data_format: str = "JSON"
    s3_prefix: str = "TimeBasedCampaign"

    # Pre-existing resources referenced by the OBD stack
    external_signal_catalog: str = "DefaultSignalCatalog"
    external_model_manifest: str = "OBD_II"
    external_decoder_manifest: str = "DefaultDecoderManifest"

    # Dashboard (Grafana) read-only access
    grafana_user_name: str = "grafana-user"
    grafana_secret_name: str = "grafana-user-credential"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="FLEETWISE_",
    )


# Global settings instance
settings = Settings()
