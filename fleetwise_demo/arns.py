"""ARN builders for FleetWise resources.

Partition, region and account are CloudFormation pseudo parameters, so the
strings returned here are resolved by CloudFormation at deploy time.
"""

from aws_cdk import Aws

# FleetWise resource types as they appear in ARNs
SIGNAL_CATALOG = "signal-catalog"
MODEL_MANIFEST = "model-manifest"
DECODER_MANIFEST = "decoder-manifest"
CAMPAIGN = "campaign"

FLEETWISE_SERVICE_PRINCIPAL = "iotfleetwise.amazonaws.com"


def fleetwise_arn(resource_type: str, name: str) -> str:
    """ARN of a FleetWise resource in the deploying account and region."""
    return (
        f"arn:{Aws.PARTITION}:iotfleetwise:{Aws.REGION}:{Aws.ACCOUNT_ID}:"
        f"{resource_type}/{name}"
    )


def signal_catalog_arn(name: str) -> str:
    return fleetwise_arn(SIGNAL_CATALOG, name)


def model_manifest_arn(name: str) -> str:
    return fleetwise_arn(MODEL_MANIFEST, name)


def decoder_manifest_arn(name: str) -> str:
    return fleetwise_arn(DECODER_MANIFEST, name)


def campaign_arn(name: str) -> str:
    return fleetwise_arn(CAMPAIGN, name)
