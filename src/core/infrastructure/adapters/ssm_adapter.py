"""Thin adapter for interacting with AWS Systems Manager Parameter Store."""

import os
from typing import Any, Protocol

import boto3

from core.utils.constants import ENV_AWS_ENDPOINT_URL, ENV_AWS_REGION


class SsmAdapterProtocol(Protocol):
    """Minimal SSM adapter protocol (repository-facing)."""

    def describe_parameters(
        self,
        *,
        parameter_filters: list[dict[str, Any]],
    ) -> list[dict[str, Any]]: ...

    def get_parameter(self, *, name: str) -> dict[str, Any]: ...


class SsmAdapter:
    """Low-level SSM operations (mechanical, no error handling).

    This adapter:
    - Wraps the boto3 SSM client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, client: Any | None = None) -> None:
        """Create SSM client from environment configuration."""
        self._client = client or boto3.client(
            "ssm",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )

    def describe_parameters(
        self,
        *,
        parameter_filters: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """List parameter metadata across all pages.

        Raises boto3 exceptions - caught by domain implementation.
        """
        parameters: list[dict[str, Any]] = []
        paginator = self._client.get_paginator("describe_parameters")
        for page in paginator.paginate(ParameterFilters=parameter_filters):
            parameters.extend(page.get("Parameters") or [])

        return parameters

    def get_parameter(self, *, name: str) -> dict[str, Any]:
        """Fetch one parameter including its current value.

        Raises boto3 exceptions - caught by domain implementation.
        """
        response = self._client.get_parameter(Name=name)
        return dict(response.get("Parameter") or {})
