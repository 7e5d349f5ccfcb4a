"""Tests for post-deploy verification with mocked AWS."""

import os
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from fleetwise_demo.verify import CheckFailed, check_resource, main, verify_stack

OUTPUTS = {
    "BucketName": "fleetwise-demo-bucket",
    "TimestreamDatabase": "fleetwisedb",
    "TimestreamTable": "campaign",
    "VehicleArn": "arn:aws:iotfleetwise:us-east-1:123456789012:vehicle/fwdemo-rpi",
    "CampaignName": "TimeBasedCampaign001",
}


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


def _client_error(operation, code="ResourceNotFoundException"):
    return ClientError({"Error": {"Code": code, "Message": "not found"}}, operation)


def _stack(status="CREATE_COMPLETE", outputs=None):
    outputs = OUTPUTS if outputs is None else outputs
    return {
        "Stacks": [
            {
                "StackName": "FleetwiseDemoStack",
                "StackStatus": status,
                "Outputs": [{"OutputKey": k, "OutputValue": v} for k, v in outputs.items()],
            }
        ]
    }


def _session(clients):
    session = MagicMock()
    session.client.side_effect = lambda name: clients[name]
    return session


@pytest.fixture
def clients():
    """Healthy mocked clients for every service the check touches."""
    cloudformation = MagicMock()
    cloudformation.describe_stacks.return_value = _stack()
    s3 = MagicMock()
    timestream = MagicMock()
    timestream.describe_table.return_value = {"Table": {"TableStatus": "ACTIVE"}}
    fleetwise = MagicMock()
    fleetwise.get_vehicle.return_value = {
        "decoderManifestArn": "arn:aws:iotfleetwise:us-east-1:123456789012:decoder-manifest/decoder-manifest-001"
    }
    fleetwise.get_campaign.return_value = {"status": "RUNNING"}
    return {
        "cloudformation": cloudformation,
        "s3": s3,
        "timestream-write": timestream,
        "iotfleetwise": fleetwise,
        "secretsmanager": MagicMock(),
    }


def test_check_resource_reports_client_error():
    """Test AWS errors are captured in the result."""
    def failing():
        raise _client_error("HeadBucket", "404")

    result = check_resource("S3", "missing-bucket", failing)

    assert not result.ok
    assert "404" in result.detail


def test_check_resource_reports_bad_state():
    """Test CheckFailed marks the check as failed."""
    def pending():
        raise CheckFailed("status=WAITING_FOR_APPROVAL")

    result = check_resource("FleetWise campaign", "c", pending)

    assert not result.ok
    assert result.detail == "status=WAITING_FOR_APPROVAL"


def test_verify_healthy_stack(clients):
    """Test every resource named in the outputs is checked."""
    results = verify_stack("FleetwiseDemoStack", session=_session(clients))

    assert [r.service for r in results] == [
        "CloudFormation",
        "S3",
        "Timestream",
        "FleetWise vehicle",
        "FleetWise campaign",
    ]
    assert all(r.ok for r in results)
    clients["timestream-write"].describe_table.assert_called_once_with(
        DatabaseName="fleetwisedb", TableName="campaign"
    )
    clients["iotfleetwise"].get_vehicle.assert_called_once_with(vehicleName="fwdemo-rpi")
    clients["iotfleetwise"].get_campaign.assert_called_once_with(name="TimeBasedCampaign001")


def test_verify_missing_stack(clients):
    """Test a missing stack short-circuits with one failed result."""
    clients["cloudformation"].describe_stacks.side_effect = _client_error(
        "DescribeStacks", "ValidationError"
    )

    results = verify_stack("FleetwiseDemoStack", session=_session(clients))

    assert len(results) == 1
    assert not results[0].ok


def test_verify_rolled_back_stack(clients):
    """Test a rolled back stack is reported as failed."""
    clients["cloudformation"].describe_stacks.return_value = _stack(status="UPDATE_ROLLBACK_COMPLETE")

    results = verify_stack("FleetwiseDemoStack", session=_session(clients))

    assert not results[0].ok
    assert results[0].detail == "UPDATE_ROLLBACK_COMPLETE"


def test_verify_campaign_not_running(clients):
    """Test a campaign that is not running fails the check."""
    clients["iotfleetwise"].get_campaign.return_value = {"status": "SUSPENDED"}

    results = verify_stack("FleetwiseDemoStack", session=_session(clients))
    campaign = [r for r in results if r.service == "FleetWise campaign"][0]

    assert not campaign.ok
    assert campaign.detail == "status=SUSPENDED"


def test_verify_checks_grafana_secret(clients):
    """Test the OBD stack's credential secret is checked when exported."""
    secret_arn = "arn:aws:secretsmanager:us-east-1:123456789012:secret:grafana-user-credential-AbCdEf"
    clients["cloudformation"].describe_stacks.return_value = _stack(
        outputs={**OUTPUTS, "GrafanaCredentialSecret": secret_arn}
    )
    clients["secretsmanager"].describe_secret.return_value = {"Name": "grafana-user-credential"}

    results = verify_stack("FleetwiseObdDemoStack", session=_session(clients))

    assert results[-1].service == "Secrets Manager"
    assert results[-1].detail == "grafana-user-credential"


def test_verify_bucket_with_moto(aws_credentials, clients):
    """Test bucket existence against a mocked S3."""
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket="fleetwise-demo-bucket")
        clients["s3"] = s3

        results = verify_stack("FleetwiseDemoStack", session=_session(clients))
        assert results[1].ok

        clients["cloudformation"].describe_stacks.return_value = _stack(
            outputs={"BucketName": "deleted-bucket"}
        )
        results = verify_stack("FleetwiseDemoStack", session=_session(clients))
        assert results[1].service == "S3"
        assert not results[1].ok


def test_main_exits_non_zero_on_failure(monkeypatch, clients):
    """Test the CLI exits with status 1 when a check fails."""
    clients["iotfleetwise"].get_campaign.return_value = {"status": "SUSPENDED"}
    monkeypatch.setattr(
        "fleetwise_demo.verify.boto3.session.Session", lambda **kwargs: _session(clients)
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["--stack", "FleetwiseDemoStack"])

    assert excinfo.value.code == 1


def test_main_passes(monkeypatch, clients):
    """Test the CLI returns normally when every check passes."""
    monkeypatch.setattr(
        "fleetwise_demo.verify.boto3.session.Session", lambda **kwargs: _session(clients)
    )

    main(["--stack", "FleetwiseDemoStack", "--region", "us-east-1"])
