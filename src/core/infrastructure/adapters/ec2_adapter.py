"""Thin adapter for interacting with the Amazon EC2 API."""

import os
from collections.abc import Sequence
from typing import Any, Protocol

import boto3

from core.utils.constants import ENV_AWS_ENDPOINT_URL, ENV_AWS_REGION


class Ec2AdapterProtocol(Protocol):
    """Minimal EC2 adapter protocol (repository-facing)."""

    def describe_images(
        self,
        *,
        owners: Sequence[str],
        filters: list[dict[str, Any]],
        max_results: int | None = None,
    ) -> list[dict[str, Any]]: ...

    def describe_launch_templates(
        self,
        *,
        names: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]: ...

    def describe_launch_template_versions(
        self,
        *,
        launch_template_id: str,
        versions: Sequence[str],
    ) -> list[dict[str, Any]]: ...

    def deregister_image(self, *, image_id: str) -> None: ...

    def delete_snapshot(self, *, snapshot_id: str) -> None: ...


class Ec2Adapter:
    """Low-level EC2 operations (mechanical, no error handling).

    This adapter:
    - Wraps the boto3 EC2 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors

    The underlying boto3 client is thread-safe, so one adapter can be
    shared by concurrent snapshot deletions.
    """

    def __init__(self, client: Any | None = None) -> None:
        """Create EC2 client from environment configuration."""
        self._client = client or boto3.client(
            "ec2",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )

    def describe_images(
        self,
        *,
        owners: Sequence[str],
        filters: list[dict[str, Any]],
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """List images in a single request.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"Owners": list(owners), "Filters": filters}

        if max_results:
            kwargs["MaxResults"] = max_results

        response = self._client.describe_images(**kwargs)
        return list(response.get("Images") or [])

    def describe_launch_templates(
        self,
        *,
        names: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        """List launch templates across all pages.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {}

        if names is not None:
            kwargs["LaunchTemplateNames"] = list(names)

        templates: list[dict[str, Any]] = []
        paginator = self._client.get_paginator("describe_launch_templates")
        for page in paginator.paginate(**kwargs):
            templates.extend(page.get("LaunchTemplates") or [])

        return templates

    def describe_launch_template_versions(
        self,
        *,
        launch_template_id: str,
        versions: Sequence[str],
    ) -> list[dict[str, Any]]:
        """Fetch the requested versions of one launch template.

        Raises boto3 exceptions - caught by domain implementation.
        """
        response = self._client.describe_launch_template_versions(
            LaunchTemplateId=launch_template_id,
            Versions=list(versions),
        )
        return list(response.get("LaunchTemplateVersions") or [])

    def deregister_image(self, *, image_id: str) -> None:
        """Deregister an AMI.

        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.deregister_image(ImageId=image_id)

    def delete_snapshot(self, *, snapshot_id: str) -> None:
        """Delete an EBS snapshot.

        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_snapshot(SnapshotId=snapshot_id)
