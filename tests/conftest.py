"""
Pytest configuration and fixtures for AMI housekeeper tests.
Provides AWS mocking plus EC2 and SSM fixtures backed by moto.
"""

import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import boto3
import pytest
from moto import mock_aws

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "AmiHousekeeperTests")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "ami-housekeeper-tests")


def iso_days_ago(days: float) -> str:
    """CreationDate string as EC2 reports it, ``days`` days in the past."""
    moment = datetime.now(timezone.utc) - timedelta(days=days)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")


@pytest.fixture(autouse=True)
def clear_cleanup_options(monkeypatch):
    """Each test starts without AMI_CLEANUP_OPTIONS unless it sets one."""
    monkeypatch.delenv("AMI_CLEANUP_OPTIONS", raising=False)


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def ec2_client(aws_mock):
    return boto3.client("ec2", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def ssm_client(aws_mock):
    return boto3.client("ssm", region_name=os.getenv("AWS_REGION"))


@pytest.fixture
def base_ami_id(ec2_client) -> str:
    """An AMI from moto's public catalogue to launch instances from."""
    images = ec2_client.describe_images(Owners=["amazon"])["Images"]
    return images[0]["ImageId"]


@pytest.fixture
def create_owned_image(ec2_client, base_ami_id) -> Callable[[str], str]:
    """
    Helper to create an AMI owned by the mocked account.

    Usage:
        image_id = create_owned_image("runner-image-1")
    """

    def _create(name: str) -> str:
        reservation = ec2_client.run_instances(ImageId=base_ami_id, MinCount=1, MaxCount=1)
        instance_id = reservation["Instances"][0]["InstanceId"]
        response: dict[str, Any] = ec2_client.create_image(InstanceId=instance_id, Name=name)
        image_id: str = response["ImageId"]
        return image_id

    return _create


@pytest.fixture
def create_snapshot(ec2_client) -> Callable[[], str]:
    """
    Helper to create an EBS snapshot.

    Usage:
        snapshot_id = create_snapshot()
    """

    def _create() -> str:
        volume = ec2_client.create_volume(AvailabilityZone="us-east-1a", Size=8)
        snapshot = ec2_client.create_snapshot(VolumeId=volume["VolumeId"])
        snapshot_id: str = snapshot["SnapshotId"]
        return snapshot_id

    return _create


@pytest.fixture
def create_launch_template(ec2_client) -> Callable[[str, str | None], str]:
    """
    Helper to create a launch template whose default version uses an image.

    Usage:
        template_id = create_launch_template("runners", "ami-123")
    """

    def _create(name: str, image_id: str | None) -> str:
        data: dict[str, Any] = {"InstanceType": "t3.micro"}
        if image_id:
            data["ImageId"] = image_id

        response = ec2_client.create_launch_template(
            LaunchTemplateName=name,
            LaunchTemplateData=data,
        )
        template_id: str = response["LaunchTemplate"]["LaunchTemplateId"]
        return template_id

    return _create


@pytest.fixture
def put_ssm_parameter(ssm_client) -> Callable[[str, str], None]:
    """
    Helper to store a String parameter.

    Usage:
        put_ssm_parameter("/runners/ami-id", "ami-123")
    """

    def _put(name: str, value: str) -> None:
        ssm_client.put_parameter(Name=name, Value=value, Type="String", Overwrite=True)

    return _put


@pytest.fixture
def ec2_image_item() -> Callable[..., dict[str, Any]]:
    """
    Factory for raw DescribeImages items.

    Usage:
        item = ec2_image_item("ami-1", days_old=40, snapshot_ids=["snap-1"])
    """

    def _item(
        image_id: str,
        *,
        days_old: float | None = None,
        snapshot_ids: list[str] | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        item: dict[str, Any] = {"ImageId": image_id, "State": "available"}
        if name:
            item["Name"] = name
        if days_old is not None:
            item["CreationDate"] = iso_days_ago(days_old)
        if snapshot_ids:
            item["BlockDeviceMappings"] = [
                {"DeviceName": f"/dev/sd{chr(ord('a') + index)}", "Ebs": {"SnapshotId": snapshot_id}}
                for index, snapshot_id in enumerate(snapshot_ids)
            ]
        return item

    return _item
