"""Tests for the OBD-II stack that reuses a console-created signal model."""

import json

from aws_cdk.assertions import Match

from conftest import as_list, logical_id, only_resource
from fleetwise_demo.definitions import OBD_SIGNALS
from fleetwise_demo.graph import creation_order, dangling_references


def test_no_signal_model_is_declared(obd_template):
    """Test the catalog and manifests are referenced, not created."""
    obd_template.resource_count_is("AWS::IoTFleetWise::SignalCatalog", 0)
    obd_template.resource_count_is("AWS::IoTFleetWise::ModelManifest", 0)
    obd_template.resource_count_is("AWS::IoTFleetWise::DecoderManifest", 0)


def test_vehicle_references_external_manifests(obd_template):
    """Test the vehicle is bound to the OBD_II and default decoder manifests by ARN."""
    vehicle = only_resource(obd_template, "AWS::IoTFleetWise::Vehicle")["Properties"]

    assert vehicle["Name"] == "fwdemo-rpi"
    assert vehicle["AssociationBehavior"] == "ValidateIotThingExists"
    assert "model-manifest/OBD_II" in json.dumps(vehicle["ModelManifestArn"])
    assert "decoder-manifest/DefaultDecoderManifest" in json.dumps(vehicle["DecoderManifestArn"])


def test_campaign_collects_obd_signals(obd_template):
    """Test the campaign collects the OBD signals from the default catalog."""
    campaign = only_resource(obd_template, "AWS::IoTFleetWise::Campaign")["Properties"]

    assert campaign["SignalsToCollect"] == [{"Name": name} for name in OBD_SIGNALS]
    assert "signal-catalog/DefaultSignalCatalog" in json.dumps(campaign["SignalCatalogArn"])
    assert campaign["CollectionScheme"] == {"TimeBasedCollectionScheme": {"PeriodMs": 10000}}
    assert "TimestreamConfig" in campaign["DataDestinationConfigs"][0]


def test_shared_sink_and_policies(obd_template):
    """Test the OBD stack gets the same sink, role and bucket policy shape."""
    obd_template.resource_count_is("AWS::Timestream::Database", 1)
    obd_template.resource_count_is("AWS::Timestream::Table", 1)
    obd_template.has_resource_properties(
        "AWS::IAM::Role",
        {
            "RoleName": "TimestreamExecutionRole",
            "Policies": Match.array_with(
                [Match.object_like({"PolicyName": "TimestreamTrustPolicy"})]
            ),
        },
    )

    campaign_id = logical_id(obd_template, "AWS::IoTFleetWise::Campaign")
    policy = only_resource(obd_template, "AWS::S3::BucketPolicy")
    assert campaign_id in as_list(policy["DependsOn"])


def test_grafana_credentials(obd_template):
    """Test a read-only user's access key is stored in a secret and exported."""
    obd_template.has_resource_properties(
        "AWS::IAM::User",
        {
            "UserName": "grafana-user",
            "ManagedPolicyArns": [
                Match.object_like(
                    {"Fn::Join": ["", Match.array_with([":iam::aws:policy/AmazonTimestreamReadOnlyAccess"])]}
                )
            ],
        },
    )
    obd_template.resource_count_is("AWS::IAM::AccessKey", 1)
    obd_template.has_resource_properties(
        "AWS::SecretsManager::Secret",
        {"Name": "grafana-user-credential"},
    )

    secret_id = logical_id(obd_template, "AWS::SecretsManager::Secret")
    obd_template.has_output("GrafanaCredentialSecret", {"Value": {"Ref": secret_id}})


def test_graph_is_fully_resolved(obd_template):
    """Test the OBD template resolves with external identifiers only."""
    template = obd_template.to_json()

    assert dangling_references(template) == {}
    assert len(creation_order(template)) == len(template["Resources"])
