"""FleetWise stack for the LEGO car: full signal model plus campaign."""

from typing import Optional

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from ..config import Settings, settings as default_settings
from ..decoder import DecoderBinder
from ..definitions import LEGO_CATALOG, LEGO_MODEL_MANIFEST, lego_decoder_manifest
from ..pipeline import TelemetryPipeline
from ..signal_model import SignalModel


class FleetwiseDemoStack(Stack):
    """Signal catalog, manifests, vehicle, sinks, IAM and campaign."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[Settings] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        settings = settings or default_settings

        # =======================
        # SIGNAL MODEL
        # =======================

        self.signal_model = SignalModel(
            self,
            "SignalModel",
            catalog=LEGO_CATALOG,
            model_manifest=LEGO_MODEL_MANIFEST,
        )

        self.decoder = DecoderBinder(
            self,
            "Decoder",
            decoder_manifest=lego_decoder_manifest(
                interface_id=settings.interface_id,
                can_interface=settings.can_interface_name,
            ),
            model_manifest=LEGO_MODEL_MANIFEST,
            model_manifest_arn=self.signal_model.model_manifest_arn,
        )

        # =======================
        # VEHICLE, SINKS, IAM, CAMPAIGN
        # =======================

        campaign_signals = list(LEGO_MODEL_MANIFEST.nodes)
        self.pipeline = TelemetryPipeline(
            self,
            "Telemetry",
            signal_catalog_arn=self.signal_model.signal_catalog_arn,
            model_manifest_arn=self.signal_model.model_manifest_arn,
            decoder_manifest_arn=self.decoder.decoder_manifest_arn,
            signals=campaign_signals,
            settings=settings,
        )
        self.pipeline.campaign.spec.validate_against(LEGO_CATALOG.leaf_names())

        # =======================
        # OUTPUTS
        # =======================

        CfnOutput(
            self,
            "SignalCatalogArn",
            value=self.signal_model.signal_catalog_arn,
            description="FleetWise signal catalog ARN",
        )
        self.pipeline.add_outputs()
