"""IAM for the FleetWise ingestion service.

Two passes: the execution role is composed from the sink ARNs before the
campaign exists; the bucket policy statement that names the campaign is
attached afterwards (see ``attach_campaign_bucket_policy``).
"""

import logging
from typing import Iterable, List

from aws_cdk import Aws, aws_iam as iam, aws_s3 as s3
from constructs import Construct, IDependable

from . import arns

logger = logging.getLogger(__name__)

# Actions that have no resource-level ARN and therefore need "*"
UNSCOPED_ACTIONS = frozenset(
    {
        "timestream:DescribeEndpoints",
        "iotfleetwise:PutLoggingOptions",
        "iotfleetwise:GetLoggingOptions",
        "logs:CreateLogDelivery",
        "logs:GetLogDelivery",
        "logs:UpdateLogDelivery",
        "logs:DeleteLogDelivery",
        "logs:ListLogDeliveries",
        "logs:PutResourcePolicy",
        "logs:DescribeResourcePolicies",
        "logs:DescribeLogGroups",
    }
)

TIMESTREAM_TABLE_ACTIONS = [
    "timestream:WriteRecords",
    "timestream:Select",
    "timestream:DescribeTable",
]
LOG_DELIVERY_ACTIONS = [
    "logs:CreateLogDelivery",
    "logs:GetLogDelivery",
    "logs:UpdateLogDelivery",
    "logs:DeleteLogDelivery",
    "logs:ListLogDeliveries",
    "logs:PutResourcePolicy",
    "logs:DescribeResourcePolicies",
    "logs:DescribeLogGroups",
]


def assert_scoped(statements: Iterable[iam.PolicyStatement]) -> None:
    """
    Reject statements that pair a wildcard resource with a scopable action.

    Raises:
        ValueError: if any action outside UNSCOPED_ACTIONS is granted on "*"
    """
    for statement in statements:
        if "*" not in statement.resources:
            continue
        broad = sorted(set(statement.actions) - UNSCOPED_ACTIONS)
        if broad:
            raise ValueError(
                f"Wildcard resource granted for scopable actions: {', '.join(broad)}"
            )


def timestream_statements(table_arn: str) -> List[iam.PolicyStatement]:
    return [
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=TIMESTREAM_TABLE_ACTIONS,
            resources=[table_arn],
        ),
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["timestream:DescribeEndpoints"],
            resources=["*"],
        ),
    ]


def bucket_statements(bucket: s3.IBucket) -> List[iam.PolicyStatement]:
    return [
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["s3:ListBucket"],
            resources=[bucket.bucket_arn],
        ),
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["s3:GetObject", "s3:PutObject"],
            resources=[bucket.arn_for_objects("*")],
        ),
    ]


def logging_statements() -> List[iam.PolicyStatement]:
    return [
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["iotfleetwise:PutLoggingOptions", "iotfleetwise:GetLoggingOptions"],
            resources=["*"],
        ),
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=LOG_DELIVERY_ACTIONS,
            resources=["*"],
        ),
    ]


class ExecutionRole(Construct):
    """Role the ingestion service assumes to write campaign data."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        role_name: str,
        bucket: s3.IBucket,
        table_arn: str,
    ) -> None:
        super().__init__(scope, construct_id)

        policies = {
            "TimestreamTrustPolicy": timestream_statements(table_arn),
            "S3BucketTrustPolicy": bucket_statements(bucket),
            "LogTrustPolicy": logging_statements(),
        }
        for statements in policies.values():
            assert_scoped(statements)

        self.role = iam.Role(
            self,
            "Role",
            role_name=role_name,
            description="Timestream Execution Role",
            assumed_by=iam.ServicePrincipal(arns.FLEETWISE_SERVICE_PRINCIPAL),
            inline_policies={
                name: iam.PolicyDocument(statements=statements)
                for name, statements in policies.items()
            },
        )

        logger.info(
            "Declared execution role %s with policies %s",
            role_name,
            ", ".join(policies),
        )

    @property
    def role_arn(self) -> str:
        return self.role.role_arn


def attach_campaign_bucket_policy(
    bucket: s3.Bucket, campaign_name: str, campaign: IDependable
) -> None:
    """
    Let the ingestion service use the bucket on behalf of one campaign.

    Object writes are only allowed when the request originates from this
    campaign in the deploying account. The bucket policy is ordered after the
    campaign so it is applied once the campaign ARN exists.
    """
    principal = iam.ServicePrincipal(arns.FLEETWISE_SERVICE_PRINCIPAL)

    bucket.add_to_resource_policy(
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            principals=[principal],
            actions=["s3:ListBucket"],
            resources=[bucket.bucket_arn],
        )
    )
    bucket.add_to_resource_policy(
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            principals=[principal],
            actions=["s3:GetObject", "s3:PutObject"],
            resources=[bucket.arn_for_objects("*")],
            conditions={
                "StringEquals": {
                    "aws:SourceArn": arns.campaign_arn(campaign_name),
                    "aws:SourceAccount": Aws.ACCOUNT_ID,
                },
            },
        )
    )
    bucket.policy.node.add_dependency(campaign)

    logger.info("Attached bucket policy for campaign %s", campaign_name)
