"""FleetWise stack for an OBD-II vehicle using a console-created signal model."""

from typing import Optional

from aws_cdk import Stack
from constructs import Construct

from ..config import Settings, settings as default_settings
from ..dashboard_access import DashboardCredentials
from ..definitions import OBD_SIGNALS
from ..pipeline import TelemetryPipeline
from ..signal_model import ExternalSignalModel


class FleetwiseObdDemoStack(Stack):
    """Vehicle, sinks, IAM and campaign against an existing OBD_II model."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[Settings] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        settings = settings or default_settings

        # Catalog and manifests were created in the console
        self.signal_model = ExternalSignalModel.from_names(
            signal_catalog=settings.external_signal_catalog,
            model_manifest=settings.external_model_manifest,
            decoder_manifest=settings.external_decoder_manifest,
        )

        self.pipeline = TelemetryPipeline(
            self,
            "Telemetry",
            signal_catalog_arn=self.signal_model.signal_catalog_arn,
            model_manifest_arn=self.signal_model.model_manifest_arn,
            decoder_manifest_arn=self.signal_model.decoder_manifest_arn,
            signals=OBD_SIGNALS,
            settings=settings,
        )

        # Grafana reads the Timestream table with these credentials
        self.dashboard = DashboardCredentials(
            self,
            "Dashboard",
            user_name=settings.grafana_user_name,
            secret_name=settings.grafana_secret_name,
        )

        self.pipeline.add_outputs()
