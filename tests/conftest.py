"""Shared fixtures for stack and declaration tests."""

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from fleetwise_demo.config import Settings
from fleetwise_demo.stacks import FleetwiseDemoStack, FleetwiseObdDemoStack


def logical_id(template: Template, resource_type: str) -> str:
    """Return the logical id of the only resource of the given type."""
    resources = template.find_resources(resource_type)
    assert len(resources) == 1, f"expected one {resource_type}, found {len(resources)}"
    return next(iter(resources))


def only_resource(template: Template, resource_type: str) -> dict:
    """Return the JSON of the only resource of the given type."""
    return template.find_resources(resource_type)[logical_id(template, resource_type)]


def as_list(value):
    """IAM renders single actions/resources as scalars."""
    return value if isinstance(value, list) else [value]


@pytest.fixture
def settings():
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture(scope="module")
def demo_template():
    """Synthesized template of the LEGO car stack."""
    app = cdk.App()
    stack = FleetwiseDemoStack(app, "FleetwiseDemoStack", settings=Settings(_env_file=None))
    return Template.from_stack(stack)


@pytest.fixture(scope="module")
def obd_template():
    """Synthesized template of the OBD-II stack."""
    app = cdk.App()
    stack = FleetwiseObdDemoStack(app, "FleetwiseObdDemoStack", settings=Settings(_env_file=None))
    return Template.from_stack(stack)
