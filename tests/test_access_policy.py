"""Tests for execution role composition and least-privilege checks."""

import aws_cdk as cdk
import pytest
from aws_cdk import aws_iam as iam, aws_s3 as s3
from aws_cdk.assertions import Template

from fleetwise_demo.access_policy import (
    ExecutionRole,
    assert_scoped,
    bucket_statements,
    logging_statements,
    timestream_statements,
)

TABLE_ARN = "arn:aws:timestream:us-east-1:111122223333:database/fleetwisedb/table/campaign"


def test_unscopable_actions_may_use_wildcard():
    """Test endpoint discovery and logging options pass with "*"."""
    assert_scoped(timestream_statements(TABLE_ARN))
    assert_scoped(logging_statements())


def test_wildcard_on_table_action_is_rejected():
    """Test a table action on "*" is rejected."""
    statement = iam.PolicyStatement(
        actions=["timestream:WriteRecords", "timestream:DescribeEndpoints"],
        resources=["*"],
    )

    with pytest.raises(ValueError, match="timestream:WriteRecords"):
        assert_scoped([statement])


def test_wildcard_on_bucket_action_is_rejected():
    """Test an object action on "*" is rejected."""
    with pytest.raises(ValueError, match="s3:PutObject"):
        assert_scoped([iam.PolicyStatement(actions=["s3:PutObject"], resources=["*"])])


def test_scoped_statement_passes():
    """Test a statement naming a resource ARN passes."""
    assert_scoped([iam.PolicyStatement(actions=["s3:PutObject"], resources=["arn:aws:s3:::b/*"])])


def test_bucket_statements_are_scoped_to_bucket():
    """Test bucket statements never use a wildcard resource."""
    stack = cdk.Stack(cdk.App(), "BucketStack")
    bucket = s3.Bucket(stack, "Bucket")

    statements = bucket_statements(bucket)

    assert [s.actions for s in statements] == [["s3:ListBucket"], ["s3:GetObject", "s3:PutObject"]]
    for statement in statements:
        assert "*" not in statement.resources


def test_execution_role_has_three_inline_policies():
    """Test the role is assumable by FleetWise and carries three policies."""
    stack = cdk.Stack(cdk.App(), "RoleStack")
    bucket = s3.Bucket(stack, "Bucket")

    role = ExecutionRole(
        stack, "ExecutionRole", role_name="TestExecutionRole", bucket=bucket, table_arn=TABLE_ARN
    )
    template = Template.from_stack(stack)

    assert role.role_arn is not None
    roles = template.find_resources("AWS::IAM::Role", {"Properties": {"RoleName": "TestExecutionRole"}})
    properties = next(iter(roles.values()))["Properties"]
    assert [p["PolicyName"] for p in properties["Policies"]] == [
        "TimestreamTrustPolicy",
        "S3BucketTrustPolicy",
        "LogTrustPolicy",
    ]
    assert properties["AssumeRolePolicyDocument"]["Statement"][0]["Principal"] == {
        "Service": "iotfleetwise.amazonaws.com"
    }
