"""Decoder manifest declaration: CAN frames to catalog signals."""

import logging

from aws_cdk import aws_iotfleetwise as iotfleetwise
from constructs import Construct

from .models import DecoderManifestSpec, ModelManifestSpec

logger = logging.getLogger(__name__)

CAN_INTERFACE = "CAN_INTERFACE"
CAN_SIGNAL = "CAN_SIGNAL"


class DecoderBinder(Construct):
    """Declares a decoder manifest bound to one model manifest."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        decoder_manifest: DecoderManifestSpec,
        model_manifest: ModelManifestSpec,
        model_manifest_arn: str,
    ) -> None:
        super().__init__(scope, construct_id)

        decoder_manifest.validate_against(model_manifest)
        self.spec = decoder_manifest

        network_interfaces = [
            iotfleetwise.CfnDecoderManifest.NetworkInterfacesItemsProperty(
                interface_id=interface.interface_id,
                type=CAN_INTERFACE,
                can_interface=iotfleetwise.CfnDecoderManifest.CanInterfaceProperty(
                    name=interface.name,
                    protocol_name=interface.protocol_name,
                    protocol_version=interface.protocol_version,
                ),
            )
            for interface in decoder_manifest.network_interfaces
        ]

        signal_decoders = [
            iotfleetwise.CfnDecoderManifest.SignalDecodersItemsProperty(
                interface_id=decoder.interface_id,
                type=CAN_SIGNAL,
                fully_qualified_name=decoder.fully_qualified_name,
                can_signal=iotfleetwise.CfnDecoderManifest.CanSignalProperty(
                    name=decoder.can_signal.name,
                    **decoder.can_signal.as_parameters(),
                ),
            )
            for decoder in decoder_manifest.signal_decoders
        ]

        self.decoder_manifest = iotfleetwise.CfnDecoderManifest(
            self,
            "DecoderManifest",
            name=decoder_manifest.name,
            description=decoder_manifest.description,
            status=decoder_manifest.status,
            model_manifest_arn=model_manifest_arn,
            network_interfaces=network_interfaces,
            signal_decoders=signal_decoders,
        )

        for decoder in decoder_manifest.signal_decoders:
            logger.debug(
                "Decoder %s: interface=%s message_id=%d start_bit=%d length=%d",
                decoder.fully_qualified_name,
                decoder.interface_id,
                decoder.can_signal.message_id,
                decoder.can_signal.start_bit,
                decoder.can_signal.length,
            )
        logger.info(
            "Declared decoder manifest %s (%d signal decoders)",
            decoder_manifest.name,
            len(signal_decoders),
        )

    @property
    def decoder_manifest_arn(self) -> str:
        return self.decoder_manifest.attr_arn
