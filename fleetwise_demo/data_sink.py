"""Campaign data sinks: S3 bucket and Timestream database/table."""

import logging

from aws_cdk import (
    RemovalPolicy,
    aws_s3 as s3,
    aws_timestream as timestream,
)
from constructs import Construct

from .models import RetentionSpec

logger = logging.getLogger(__name__)


class DataSink(Construct):
    """Bucket and Timestream table the campaign writes into."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        database_name: str,
        table_name: str,
        retention: RetentionSpec,
    ) -> None:
        super().__init__(scope, construct_id)

        self.database_name = database_name
        self.table_name = table_name

        # Emptied and removed with the stack
        self.bucket = s3.Bucket(
            self,
            "Bucket",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            auto_delete_objects=True,
            removal_policy=RemovalPolicy.DESTROY,
        )

        self.database = timestream.CfnDatabase(
            self,
            "TimestreamDb",
            database_name=database_name,
        )

        self.table = timestream.CfnTable(
            self,
            "TimestreamTable",
            database_name=database_name,
            table_name=table_name,
            retention_properties=timestream.CfnTable.RetentionPropertiesProperty(
                memory_store_retention_period_in_hours=str(retention.memory_store_hours),
                magnetic_store_retention_period_in_days=str(retention.magnetic_store_days),
            ),
        )
        # The table only names the database, so CloudFormation cannot infer the edge
        self.table.add_dependency(self.database)

        logger.info(
            "Declared Timestream table %s.%s (memory=%dh, magnetic=%dd)",
            database_name,
            table_name,
            retention.memory_store_hours,
            retention.magnetic_store_days,
        )

    @property
    def table_arn(self) -> str:
        return self.table.attr_arn

    @property
    def bucket_arn(self) -> str:
        return self.bucket.bucket_arn
