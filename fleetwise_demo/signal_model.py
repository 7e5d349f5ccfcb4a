"""Signal catalog and model manifest declarations."""

import logging
from dataclasses import dataclass

from aws_cdk import aws_iotfleetwise as iotfleetwise
from constructs import Construct

from . import arns
from .models import ModelManifestSpec, SignalCatalogSpec

logger = logging.getLogger(__name__)


def _node_property(node) -> iotfleetwise.CfnSignalCatalog.NodeProperty:
    """Convert a catalog node declaration into its CloudFormation property."""
    if node.kind == "branch":
        return iotfleetwise.CfnSignalCatalog.NodeProperty(
            branch=iotfleetwise.CfnSignalCatalog.BranchProperty(
                fully_qualified_name=node.fully_qualified_name,
                description=node.description,
            )
        )

    fields = dict(
        fully_qualified_name=node.fully_qualified_name,
        data_type=node.data_type,
        unit=node.unit,
        min=node.min,
        max=node.max,
        description=node.description,
    )
    if node.kind == "sensor":
        return iotfleetwise.CfnSignalCatalog.NodeProperty(
            sensor=iotfleetwise.CfnSignalCatalog.SensorProperty(**fields)
        )
    return iotfleetwise.CfnSignalCatalog.NodeProperty(
        actuator=iotfleetwise.CfnSignalCatalog.ActuatorProperty(**fields)
    )


class SignalModel(Construct):
    """Signal catalog plus the model manifest selecting a subset of it."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        catalog: SignalCatalogSpec,
        model_manifest: ModelManifestSpec,
    ) -> None:
        super().__init__(scope, construct_id)

        model_manifest.validate_against(catalog)
        self.catalog_spec = catalog
        self.model_manifest_spec = model_manifest

        self.signal_catalog = iotfleetwise.CfnSignalCatalog(
            self,
            "SignalCatalog",
            name=catalog.name,
            description=catalog.description,
            nodes=[_node_property(node) for node in catalog.nodes],
        )

        self.model_manifest = iotfleetwise.CfnModelManifest(
            self,
            "ModelManifest",
            name=model_manifest.name,
            description=model_manifest.description,
            status=model_manifest.status,
            nodes=list(model_manifest.nodes),
            signal_catalog_arn=self.signal_catalog.attr_arn,
        )

        logger.info(
            "Declared signal catalog %s (%d nodes) and model manifest %s (%d signals)",
            catalog.name,
            len(catalog.nodes),
            model_manifest.name,
            len(model_manifest.nodes),
        )

    @property
    def signal_catalog_arn(self) -> str:
        return self.signal_catalog.attr_arn

    @property
    def model_manifest_arn(self) -> str:
        return self.model_manifest.attr_arn


@dataclass(frozen=True)
class ExternalSignalModel:
    """Catalog and manifests created outside CDK, referenced by ARN only."""

    signal_catalog_arn: str
    model_manifest_arn: str
    decoder_manifest_arn: str

    @classmethod
    def from_names(
        cls, signal_catalog: str, model_manifest: str, decoder_manifest: str
    ) -> "ExternalSignalModel":
        logger.info(
            "Referencing existing signal catalog %s, model manifest %s, "
            "decoder manifest %s",
            signal_catalog,
            model_manifest,
            decoder_manifest,
        )
        return cls(
            signal_catalog_arn=arns.signal_catalog_arn(signal_catalog),
            model_manifest_arn=arns.model_manifest_arn(model_manifest),
            decoder_manifest_arn=arns.decoder_manifest_arn(decoder_manifest),
        )
