"""Vehicle -> sink -> role -> campaign -> bucket policy wiring shared by both stacks."""

import logging
from typing import Sequence

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from .access_policy import ExecutionRole, attach_campaign_bucket_policy
from .campaign import CampaignDefiner
from .config import Settings
from .data_sink import DataSink
from .models import (
    CampaignSpec,
    RetentionSpec,
    S3Destination,
    TimestreamDestination,
    VehicleSpec,
)
from .vehicle import VehicleRegistrar

logger = logging.getLogger(__name__)


def campaign_spec(settings: Settings, signals: Sequence[str]) -> CampaignSpec:
    """Build the campaign declaration from settings."""
    destinations = [TimestreamDestination()]
    if settings.enable_s3_destination:
        destinations.append(
            S3Destination(data_format=settings.s3_data_format, prefix=settings.s3_prefix)
        )
    return CampaignSpec(
        name=settings.campaign_name,
        period_ms=settings.collection_period_ms,
        signals=list(signals),
        spooling_mode=settings.spooling_mode,
        diagnostics_mode=settings.diagnostics_mode,
        destinations=destinations,
    )


class TelemetryPipeline(Construct):
    """
    Registers the vehicle and everything its campaign needs.

    Args:
        signal_catalog_arn: Catalog the campaign's signals come from
        model_manifest_arn: Model manifest bound to the vehicle
        decoder_manifest_arn: Decoder manifest bound to the vehicle
        signals: Fully-qualified signal names to collect
        settings: Deployment settings
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        signal_catalog_arn: str,
        model_manifest_arn: str,
        decoder_manifest_arn: str,
        signals: Sequence[str],
        settings: Settings,
    ) -> None:
        super().__init__(scope, construct_id)

        self.vehicle = VehicleRegistrar(
            self,
            "Vehicle",
            vehicle=VehicleSpec(
                name=settings.thing_name,
                association_behavior=settings.association_behavior,
            ),
            decoder_manifest_arn=decoder_manifest_arn,
            model_manifest_arn=model_manifest_arn,
        )

        self.sink = DataSink(
            self,
            "DataSink",
            database_name=settings.timestream_database,
            table_name=settings.timestream_table,
            retention=RetentionSpec(
                memory_store_hours=settings.memory_store_retention_hours,
                magnetic_store_days=settings.magnetic_store_retention_days,
            ),
        )

        self.execution_role = ExecutionRole(
            self,
            "TimestreamExecutionRole",
            role_name=settings.execution_role_name,
            bucket=self.sink.bucket,
            table_arn=self.sink.table_arn,
        )

        self.campaign = CampaignDefiner(
            self,
            "Campaign",
            campaign=campaign_spec(settings, signals),
            target_arn=self.vehicle.vehicle_arn,
            signal_catalog_arn=signal_catalog_arn,
            execution_role_arn=self.execution_role.role_arn,
            timestream_table_arn=self.sink.table_arn,
            bucket_arn=self.sink.bucket_arn,
            target=self.vehicle.vehicle,
        )

        # Second pass: the bucket policy names the campaign
        attach_campaign_bucket_policy(
            self.sink.bucket, self.campaign.campaign_name, self.campaign.campaign
        )

    def add_outputs(self) -> None:
        """Export the identifiers an operator needs after deploy."""
        stack = Stack.of(self)
        CfnOutput(
            stack,
            "VehicleArn",
            value=self.vehicle.vehicle_arn,
            description="FleetWise vehicle ARN",
        )
        CfnOutput(
            stack,
            "CampaignName",
            value=self.campaign.campaign_name,
            description="FleetWise campaign name",
        )
        CfnOutput(
            stack,
            "BucketName",
            value=self.sink.bucket.bucket_name,
            description="S3 bucket for campaign data",
        )
        CfnOutput(
            stack,
            "TimestreamDatabase",
            value=self.sink.database_name,
            description="Timestream database name",
        )
        CfnOutput(
            stack,
            "TimestreamTable",
            value=self.sink.table_name,
            description="Timestream table name",
        )
        logger.debug("Added pipeline outputs to %s", stack.stack_name)
