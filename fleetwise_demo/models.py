"""Pydantic models for FleetWise resource declarations."""

from decimal import Decimal
from typing import Annotated, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Dotted path such as "Vehicle.Body.Lights"
FQN_PATTERN = r"^[A-Za-z0-9_]+(\.[A-Za-z0-9_]+)*$"
# FleetWise resource names (catalog, manifests, campaign)
NAME_PATTERN = r"^[a-zA-Z\d\-_:]+$"

DataType = Literal[
    "INT8",
    "UINT8",
    "INT16",
    "UINT16",
    "INT32",
    "UINT32",
    "INT64",
    "UINT64",
    "BOOLEAN",
    "FLOAT",
    "DOUBLE",
    "STRING",
    "UNIX_TIMESTAMP",
]


class DeclarationError(ValueError):
    """A declaration references something the bound declaration lacks."""


def ancestors(fully_qualified_name: str) -> List[str]:
    """
    Return every ancestor path of a dotted name, root first.

    >>> ancestors("Vehicle.Body.Lights")
    ['Vehicle', 'Vehicle.Body']
    """
    parts = fully_qualified_name.split(".")
    return [".".join(parts[:i]) for i in range(1, len(parts))]


class _Declaration(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# =======================
# SIGNAL CATALOG
# =======================


class BranchNode(_Declaration):
    """Interior node of the signal tree."""

    kind: Literal["branch"] = "branch"
    fully_qualified_name: str = Field(..., pattern=FQN_PATTERN)
    description: Optional[str] = None


class _SignalNode(_Declaration):
    fully_qualified_name: str = Field(..., pattern=FQN_PATTERN)
    data_type: DataType
    unit: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(
                f"{self.fully_qualified_name}: min {self.min} exceeds max {self.max}"
            )
        return self


class SensorNode(_SignalNode):
    """Leaf signal read from the vehicle."""

    kind: Literal["sensor"] = "sensor"


class ActuatorNode(_SignalNode):
    """Leaf signal that reflects a commanded vehicle state."""

    kind: Literal["actuator"] = "actuator"


CatalogNode = Annotated[
    Union[BranchNode, SensorNode, ActuatorNode], Field(discriminator="kind")
]


class SignalCatalogSpec(_Declaration):
    """
    A tree of branch/sensor/actuator nodes.

    Every node's ancestors must be declared, and must be branches.
    """

    name: str = Field(..., pattern=NAME_PATTERN)
    description: Optional[str] = None
    nodes: List[CatalogNode] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_tree(self):
        kinds: Dict[str, str] = {}
        for node in self.nodes:
            if node.fully_qualified_name in kinds:
                raise ValueError(f"Duplicate catalog node: {node.fully_qualified_name}")
            kinds[node.fully_qualified_name] = node.kind

        for name in kinds:
            for ancestor in ancestors(name):
                kind = kinds.get(ancestor)
                if kind is None:
                    raise ValueError(f"{name} references undeclared branch {ancestor}")
                if kind != "branch":
                    raise ValueError(f"{name} is nested under {kind} {ancestor}")
        return self

    def leaf_names(self) -> List[str]:
        """Sensor and actuator names in declaration order."""
        return [n.fully_qualified_name for n in self.nodes if n.kind != "branch"]


# =======================
# MODEL MANIFEST
# =======================


class ModelManifestSpec(_Declaration):
    """A named subset of catalog leaves for one vehicle model."""

    name: str = Field(..., pattern=NAME_PATTERN)
    description: Optional[str] = None
    nodes: List[str] = Field(..., min_length=1)
    status: Literal["DRAFT", "ACTIVE"] = "ACTIVE"

    @model_validator(mode="after")
    def _check_unique(self):
        if len(set(self.nodes)) != len(self.nodes):
            raise ValueError(f"Model manifest {self.name} selects a signal twice")
        return self

    def validate_against(self, catalog: SignalCatalogSpec) -> None:
        """Raise DeclarationError if a selected leaf is missing from the catalog."""
        leaves = set(catalog.leaf_names())
        missing = [name for name in self.nodes if name not in leaves]
        if missing:
            raise DeclarationError(
                f"Model manifest {self.name} selects signals not in catalog "
                f"{catalog.name}: {', '.join(missing)}"
            )


# =======================
# DECODER MANIFEST
# =======================


def _plain_number(value: float) -> str:
    """Shortest exact decimal form of a float, without exponent or trailing zeros."""
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class CanSignalRule(_Declaration):
    """
    How one signal is laid out inside a CAN frame.

    The numeric fields are passed to the service untouched; scaling
    (raw * factor + offset) happens in the ingestion service.
    """

    message_id: int = Field(..., ge=0, le=0x1FFFFFFF)
    start_bit: int = Field(..., ge=0)
    length: int = Field(..., ge=1)
    is_big_endian: bool = False
    is_signed: bool = False
    factor: float = 1.0
    offset: float = 0.0
    name: Optional[str] = None

    def as_parameters(self) -> Dict[str, str]:
        """Render the rule as the string parameters the service expects."""
        return {
            "message_id": str(self.message_id),
            "start_bit": str(self.start_bit),
            "length": str(self.length),
            "is_big_endian": str(self.is_big_endian).lower(),
            "is_signed": str(self.is_signed).lower(),
            "factor": _plain_number(self.factor),
            "offset": _plain_number(self.offset),
        }


class CanInterfaceSpec(_Declaration):
    """A CAN network interface on the vehicle's edge device."""

    interface_id: str = Field(..., min_length=1)
    name: str = "can0"
    protocol_name: str = "CAN"
    protocol_version: Optional[str] = None


class SignalDecoderSpec(_Declaration):
    interface_id: str = Field(..., min_length=1)
    fully_qualified_name: str = Field(..., pattern=FQN_PATTERN)
    can_signal: CanSignalRule


class DecoderManifestSpec(_Declaration):
    """Maps model manifest signals onto CAN frames."""

    name: str = Field(..., pattern=NAME_PATTERN)
    description: Optional[str] = None
    status: Literal["DRAFT", "ACTIVE"] = "ACTIVE"
    network_interfaces: List[CanInterfaceSpec] = Field(..., min_length=1)
    signal_decoders: List[SignalDecoderSpec] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_decoders(self):
        interface_ids = [i.interface_id for i in self.network_interfaces]
        if len(set(interface_ids)) != len(interface_ids):
            raise ValueError(f"Decoder manifest {self.name} declares an interface twice")

        seen = set()
        for decoder in self.signal_decoders:
            key = (decoder.interface_id, decoder.fully_qualified_name)
            if decoder.interface_id not in interface_ids:
                raise ValueError(
                    f"{decoder.fully_qualified_name} uses undeclared interface "
                    f"{decoder.interface_id}"
                )
            if key in seen:
                raise ValueError(
                    f"Duplicate decoder for {decoder.fully_qualified_name} on "
                    f"interface {decoder.interface_id}"
                )
            seen.add(key)
        return self

    def signal_names(self) -> List[str]:
        return [d.fully_qualified_name for d in self.signal_decoders]

    def validate_against(self, model_manifest: ModelManifestSpec) -> None:
        """Raise DeclarationError if a decoded signal is not in the model manifest."""
        selected = set(model_manifest.nodes)
        missing = [name for name in self.signal_names() if name not in selected]
        if missing:
            raise DeclarationError(
                f"Decoder manifest {self.name} decodes signals not in model manifest "
                f"{model_manifest.name}: {', '.join(missing)}"
            )


# =======================
# VEHICLE
# =======================


class VehicleSpec(_Declaration):
    name: str = Field(..., pattern=r"^[a-zA-Z\d\-_:]+$", max_length=100)
    association_behavior: Literal["CreateIotThing", "ValidateIotThingExists"] = (
        "ValidateIotThingExists"
    )
    attributes: Dict[str, str] = Field(default_factory=dict)


# =======================
# DATA SINK
# =======================


class RetentionSpec(_Declaration):
    """Two-tier Timestream retention."""

    memory_store_hours: int = Field(default=24, ge=1, le=8766)
    magnetic_store_days: int = Field(default=7, ge=1, le=73000)


# =======================
# CAMPAIGN
# =======================


class TimestreamDestination(_Declaration):
    """Write collected signals to the provisioned Timestream table."""

    kind: Literal["timestream"] = "timestream"


class S3Destination(_Declaration):
    """Write collected signals to the provisioned bucket."""

    kind: Literal["s3"] = "s3"
    data_format: Literal["JSON", "PARQUET"] = "JSON"
    prefix: Optional[str] = None
    storage_compression_format: Literal["NONE", "GZIP"] = "NONE"


Destination = Annotated[
    Union[TimestreamDestination, S3Destination], Field(discriminator="kind")
]


class CampaignSpec(_Declaration):
    """A time-based data collection campaign."""

    name: str = Field(..., pattern=NAME_PATTERN)
    description: Optional[str] = None
    period_ms: int = Field(default=10000, ge=10000, le=86_400_000)
    signals: List[str] = Field(..., min_length=1)
    spooling_mode: Literal["OFF", "TO_DISK"] = "TO_DISK"
    diagnostics_mode: Literal["OFF", "SEND_ACTIVE_DTCS"] = "SEND_ACTIVE_DTCS"
    action: Literal["APPROVE", "SUSPEND", "RESUME", "UPDATE"] = "APPROVE"
    priority: int = Field(default=0, ge=0)
    destinations: List[Destination] = Field(
        default_factory=lambda: [TimestreamDestination()], min_length=1
    )

    @model_validator(mode="after")
    def _check_signals(self):
        if len(set(self.signals)) != len(self.signals):
            raise ValueError(f"Campaign {self.name} collects a signal twice")
        kinds = [d.kind for d in self.destinations]
        if len(set(kinds)) != len(kinds):
            raise ValueError(f"Campaign {self.name} repeats a destination type")
        return self

    def validate_against(self, available: Iterable[str]) -> None:
        """Raise DeclarationError if a collected signal is not available."""
        available = set(available)
        missing = [name for name in self.signals if name not in available]
        if missing:
            raise DeclarationError(
                f"Campaign {self.name} collects unknown signals: {', '.join(missing)}"
            )
