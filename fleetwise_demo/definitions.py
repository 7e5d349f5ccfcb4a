"""Signal definitions for the demo vehicles."""

from .models import (
    ActuatorNode,
    BranchNode,
    CanInterfaceSpec,
    CanSignalRule,
    DecoderManifestSpec,
    ModelManifestSpec,
    SensorNode,
    SignalCatalogSpec,
    SignalDecoderSpec,
)

LOW_BEAM_IS_ON = "Vehicle.Body.Lights.Beam.Low.IsOn"
LIGHT_INTENSITY = "Vehicle.Exterior.LightIntensity"

# Arduino board on the LEGO car sends one CAN frame per signal
LIGHT_INTENSITY_MESSAGE_ID = 1
LOW_BEAM_MESSAGE_ID = 2

LEGO_CATALOG = SignalCatalogSpec(
    name="catalog",
    description="LEGO Car Signal Catalog",
    nodes=[
        BranchNode(fully_qualified_name="Vehicle"),
        BranchNode(fully_qualified_name="Vehicle.Body"),
        BranchNode(fully_qualified_name="Vehicle.Body.Lights"),
        BranchNode(fully_qualified_name="Vehicle.Body.Lights.Beam"),
        BranchNode(fully_qualified_name="Vehicle.Body.Lights.Beam.Low"),
        ActuatorNode(fully_qualified_name=LOW_BEAM_IS_ON, data_type="BOOLEAN"),
        BranchNode(fully_qualified_name="Vehicle.Exterior"),
        SensorNode(
            fully_qualified_name=LIGHT_INTENSITY,
            data_type="FLOAT",
            unit="percent",
            min=0,
            max=100,
            description="Light intensity as a percent. 0 = No light detected, 100 = Fully lit.",
        ),
    ],
)

LEGO_MODEL_MANIFEST = ModelManifestSpec(
    name="model-manifest",
    status="ACTIVE",
    nodes=[LOW_BEAM_IS_ON, LIGHT_INTENSITY],
)


def lego_decoder_manifest(interface_id: str = "1", can_interface: str = "can0") -> DecoderManifestSpec:
    """Decoder manifest for the LEGO car's single CAN bus."""
    return DecoderManifestSpec(
        name="decoder-manifest-001",
        status="ACTIVE",
        network_interfaces=[
            CanInterfaceSpec(interface_id=interface_id, name=can_interface, protocol_name="CAN"),
        ],
        signal_decoders=[
            # 0.00-100.00 % sent as an unsigned 16-bit integer (x100)
            SignalDecoderSpec(
                interface_id=interface_id,
                fully_qualified_name=LIGHT_INTENSITY,
                can_signal=CanSignalRule(
                    name="Light_Intensity",
                    message_id=LIGHT_INTENSITY_MESSAGE_ID,
                    start_bit=0,
                    length=16,
                    factor=0.01,
                    offset=0,
                ),
            ),
            SignalDecoderSpec(
                interface_id=interface_id,
                fully_qualified_name=LOW_BEAM_IS_ON,
                can_signal=CanSignalRule(
                    name="Light_Low_IsOn",
                    message_id=LOW_BEAM_MESSAGE_ID,
                    start_bit=0,
                    length=1,
                    factor=1,
                    offset=0,
                ),
            ),
        ],
    )


# Signals from the console-created OBD_II model manifest
OBD_SIGNALS = [
    "OBD.Speed",
    "OBD.EngineSpeed",
    "OBD.CoolantTemperature",
]
