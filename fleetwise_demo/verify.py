"""Verify a deployed FleetWise stack against the live AWS account.

Usage:
    python -m fleetwise_demo.verify --stack FleetwiseDemoStack
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_STACKS = ["FleetwiseDemoStack", "FleetwiseObdDemoStack"]


class CheckFailed(Exception):
    """A resource exists but is not in the expected state."""


@dataclass
class CheckResult:
    service: str
    resource: str
    ok: bool
    detail: str = ""


def check_resource(
    service: str, resource: str, check_func: Callable[[], Optional[str]]
) -> CheckResult:
    """Run one check; AWS errors are reported in the result, not raised."""
    try:
        detail = check_func() or ""
    except (ClientError, CheckFailed) as e:
        logger.error("%s: %s - %s", service, resource, e)
        return CheckResult(service, resource, False, str(e))

    logger.info("%s: %s %s", service, resource, detail)
    return CheckResult(service, resource, True, detail)


def _name_from_arn(arn: str) -> str:
    return arn.rsplit("/", 1)[-1]


def verify_stack(stack_name: str, session=None) -> List[CheckResult]:
    """
    Check the stack and the resources named in its outputs.

    Args:
        stack_name: CloudFormation stack name
        session: boto3 session (defaults to a new one)

    Returns:
        One CheckResult per checked resource, stack first
    """
    session = session or boto3.session.Session()
    cloudformation = session.client("cloudformation")

    try:
        stack = cloudformation.describe_stacks(StackName=stack_name)["Stacks"][0]
    except ClientError as e:
        logger.error("CloudFormation: %s not found - %s", stack_name, e)
        return [CheckResult("CloudFormation", stack_name, False, str(e))]

    status = stack["StackStatus"]
    stack_ok = status.endswith("_COMPLETE") and "ROLLBACK" not in status
    results = [CheckResult("CloudFormation", stack_name, stack_ok, status)]
    if not stack_ok:
        logger.error("CloudFormation: %s is %s", stack_name, status)

    outputs: Dict[str, str] = {
        o["OutputKey"]: o["OutputValue"] for o in stack.get("Outputs", [])
    }

    bucket = outputs.get("BucketName")
    if bucket:
        s3 = session.client("s3")

        def _bucket() -> str:
            s3.head_bucket(Bucket=bucket)
            return "exists"

        results.append(check_resource("S3", bucket, _bucket))

    database = outputs.get("TimestreamDatabase")
    table = outputs.get("TimestreamTable")
    if database and table:
        timestream = session.client("timestream-write")

        def _table() -> str:
            response = timestream.describe_table(DatabaseName=database, TableName=table)
            return f"status={response['Table']['TableStatus']}"

        results.append(check_resource("Timestream", f"{database}.{table}", _table))

    fleetwise = session.client("iotfleetwise")

    vehicle_arn = outputs.get("VehicleArn")
    if vehicle_arn:
        vehicle_name = _name_from_arn(vehicle_arn)

        def _vehicle() -> str:
            response = fleetwise.get_vehicle(vehicleName=vehicle_name)
            return f"decoder={_name_from_arn(response['decoderManifestArn'])}"

        results.append(check_resource("FleetWise vehicle", vehicle_name, _vehicle))

    campaign = outputs.get("CampaignName")
    if campaign:

        def _campaign() -> str:
            campaign_status = fleetwise.get_campaign(name=campaign)["status"]
            if campaign_status != "RUNNING":
                raise CheckFailed(f"status={campaign_status}")
            return f"status={campaign_status}"

        results.append(check_resource("FleetWise campaign", campaign, _campaign))

    secret_arn = outputs.get("GrafanaCredentialSecret")
    if secret_arn:
        secrets = session.client("secretsmanager")
        results.append(
            check_resource(
                "Secrets Manager",
                secret_arn,
                lambda: secrets.describe_secret(SecretId=secret_arn)["Name"],
            )
        )

    return results


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, verify each stack and exit non-zero on any failure."""
    parser = argparse.ArgumentParser(description="Verify deployed FleetWise demo stacks")
    parser.add_argument(
        "--stack",
        action="append",
        dest="stacks",
        help="Stack name to verify (repeatable; default: both demo stacks)",
    )
    parser.add_argument("--region", help="AWS region (default: from AWS config)")
    parser.add_argument("--profile", help="AWS profile name")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    session = boto3.session.Session(profile_name=args.profile, region_name=args.region)

    failed = 0
    for stack_name in args.stacks or DEFAULT_STACKS:
        results = verify_stack(stack_name, session=session)
        failed += sum(1 for r in results if not r.ok)

    if failed:
        logger.error("%d check(s) failed", failed)
        sys.exit(1)
    logger.info("All checks passed")


if __name__ == "__main__":
    main()
