#!/usr/bin/env python3
"""AWS CDK app for the IoT FleetWise demo."""

import logging
import os
import sys

import aws_cdk as cdk

from fleetwise_demo.config import settings
from fleetwise_demo.graph import creation_order, dangling_references
from fleetwise_demo.logging_setup import setup_logging
from fleetwise_demo.stacks import FleetwiseDemoStack, FleetwiseObdDemoStack

setup_logging(settings.log_level)
logger = logging.getLogger("app")

app = cdk.App()

# Set CDK_DEFAULT_ACCOUNT and CDK_DEFAULT_REGION in your shell,
# or let the CDK CLI resolve them from your AWS profile.
env = cdk.Environment(
    account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
    region=os.environ.get("CDK_DEFAULT_REGION", "us-east-1"),
)

# Both stacks register the same vehicle; deploy one of them per account
stacks = [
    FleetwiseDemoStack(
        app,
        "FleetwiseDemoStack",
        env=env,
        description="IoT FleetWise demo - LEGO car signal model, campaign and sinks",
    ),
    FleetwiseObdDemoStack(
        app,
        "FleetwiseObdDemoStack",
        env=env,
        description="IoT FleetWise demo - OBD-II campaign on an existing signal model",
    ),
]

assembly = app.synth()

for stack in stacks:
    template = assembly.get_stack_by_name(stack.stack_name).template
    dangling = dangling_references(template)
    if dangling:
        for source, missing in sorted(dangling.items()):
            logger.error("%s: %s references undeclared %s", stack.stack_name, source, sorted(missing))
        sys.exit(1)
    order = creation_order(template)
    logger.info("Synthesized %s: %d resources", stack.stack_name, len(order))
