"""Read-only Timestream credentials for an external Grafana dashboard."""

import logging

from aws_cdk import (
    CfnOutput,
    SecretValue,
    aws_iam as iam,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct

logger = logging.getLogger(__name__)


class DashboardCredentials(Construct):
    """IAM user + access key stored in Secrets Manager, ARN exported as an output."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        user_name: str,
        secret_name: str,
    ) -> None:
        super().__init__(scope, construct_id)

        self.user = iam.User(
            self,
            "TimestreamReadOnlyUser",
            user_name=user_name,
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "AmazonTimestreamReadOnlyAccess"
                )
            ],
        )
        access_key = iam.AccessKey(self, "AccessKey", user=self.user)

        self.secret = secretsmanager.Secret(
            self,
            "Credential",
            secret_name=secret_name,
            secret_object_value={
                "accessKeyId": SecretValue.unsafe_plain_text(access_key.access_key_id),
                "secretAccessKey": access_key.secret_access_key,
            },
        )

        CfnOutput(
            scope,
            "GrafanaCredentialSecret",
            key="GrafanaCredentialSecret",
            value=self.secret.secret_arn,
            description="Secrets Manager ARN of the Grafana read-only credentials",
        )

        logger.info("Declared read-only dashboard user %s", user_name)

    @property
    def secret_arn(self) -> str:
        return self.secret.secret_arn
