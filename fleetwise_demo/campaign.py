"""Data collection campaign declaration."""

import logging
from typing import Optional

from aws_cdk import aws_iotfleetwise as iotfleetwise
from constructs import Construct, IDependable

from .models import CampaignSpec

logger = logging.getLogger(__name__)


class CampaignDefiner(Construct):
    """
    Declares a time-based campaign targeting one vehicle.

    The campaign is declared with ``action=APPROVE`` so it moves to active as
    soon as CloudFormation creates it.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        campaign: CampaignSpec,
        target_arn: str,
        signal_catalog_arn: str,
        execution_role_arn: str,
        timestream_table_arn: Optional[str] = None,
        bucket_arn: Optional[str] = None,
        target: Optional[IDependable] = None,
    ) -> None:
        super().__init__(scope, construct_id)

        self.spec = campaign
        destination_configs = []
        for destination in campaign.destinations:
            if destination.kind == "timestream":
                if timestream_table_arn is None:
                    raise ValueError(
                        f"Campaign {campaign.name} writes to Timestream but no table was given"
                    )
                destination_configs.append(
                    iotfleetwise.CfnCampaign.DataDestinationConfigProperty(
                        timestream_config=iotfleetwise.CfnCampaign.TimestreamConfigProperty(
                            timestream_table_arn=timestream_table_arn,
                            execution_role_arn=execution_role_arn,
                        )
                    )
                )
            else:
                if bucket_arn is None:
                    raise ValueError(
                        f"Campaign {campaign.name} writes to S3 but no bucket was given"
                    )
                destination_configs.append(
                    iotfleetwise.CfnCampaign.DataDestinationConfigProperty(
                        s3_config=iotfleetwise.CfnCampaign.S3ConfigProperty(
                            bucket_arn=bucket_arn,
                            data_format=destination.data_format,
                            prefix=destination.prefix,
                            storage_compression_format=destination.storage_compression_format,
                        )
                    )
                )

        self.campaign = iotfleetwise.CfnCampaign(
            self,
            "Campaign",
            name=campaign.name,
            description=campaign.description,
            action=campaign.action,
            priority=campaign.priority,
            target_arn=target_arn,
            collection_scheme=iotfleetwise.CfnCampaign.CollectionSchemeProperty(
                time_based_collection_scheme=iotfleetwise.CfnCampaign.TimeBasedCollectionSchemeProperty(
                    period_ms=campaign.period_ms,
                ),
            ),
            signal_catalog_arn=signal_catalog_arn,
            signals_to_collect=[
                iotfleetwise.CfnCampaign.SignalInformationProperty(name=name)
                for name in campaign.signals
            ],
            spooling_mode=campaign.spooling_mode,
            diagnostics_mode=campaign.diagnostics_mode,
            data_destination_configs=destination_configs,
        )
        if target is not None:
            self.campaign.node.add_dependency(target)

        logger.info(
            "Declared campaign %s: period=%dms signals=%d destinations=%s",
            campaign.name,
            campaign.period_ms,
            len(campaign.signals),
            ",".join(d.kind for d in campaign.destinations),
        )

    @property
    def campaign_name(self) -> str:
        return self.spec.name

    @property
    def campaign_arn(self) -> str:
        return self.campaign.attr_arn
