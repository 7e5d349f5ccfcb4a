"""Vehicle registration."""

import logging

from aws_cdk import aws_iotfleetwise as iotfleetwise
from constructs import Construct

from .models import VehicleSpec

logger = logging.getLogger(__name__)


class VehicleRegistrar(Construct):
    """
    Binds a vehicle name to a decoder manifest and a model manifest.

    With ``ValidateIotThingExists`` the deploy fails unless an IoT thing of the
    same name already exists; that thing is provisioned outside this app.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        vehicle: VehicleSpec,
        decoder_manifest_arn: str,
        model_manifest_arn: str,
    ) -> None:
        super().__init__(scope, construct_id)

        self.spec = vehicle
        self.vehicle = iotfleetwise.CfnVehicle(
            self,
            "Vehicle",
            name=vehicle.name,
            decoder_manifest_arn=decoder_manifest_arn,
            model_manifest_arn=model_manifest_arn,
            association_behavior=vehicle.association_behavior,
            attributes=dict(vehicle.attributes) or None,
        )

        logger.info(
            "Declared vehicle %s (association=%s)",
            vehicle.name,
            vehicle.association_behavior,
        )

    @property
    def vehicle_arn(self) -> str:
        return self.vehicle.attr_arn
