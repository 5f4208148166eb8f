"""SSM Parameter Store source of in-use image references."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.ssm_adapter import SsmAdapter, SsmAdapterProtocol
from core.models.errors import ReferenceCollectionError
from core.models.options import CleanupOptions
from core.repositories.reference_repository import ImageReferenceSource
from core.utils.constants import (
    ERROR_CODE_SSM_PARAMETER_LIST_FAILED,
    SSM_PARAMETER_NAME_MARKER,
)

logger = Logger(UTC=True)


class SsmParameterReferences(ImageReferenceSource):
    """Image ids pinned in SSM parameters.

    Only parameters whose name contains the ``ami-id`` marker are
    resolved, and only when the options name SSM parameters at all.
    """

    source_name = "ssm"

    def __init__(self, adapter: SsmAdapterProtocol | None = None) -> None:
        """Initialize with SSM adapter."""
        self._ssm: SsmAdapterProtocol | None = adapter

    @property
    def ssm(self) -> SsmAdapterProtocol:
        # Created lazily so runs without SSM parameters never build a client.
        if self._ssm is None:
            self._ssm = SsmAdapter()
        return self._ssm

    def collect_references(self, options: CleanupOptions) -> set[str]:
        """Resolve the values of all marker-named parameters.

        Raises:
            ReferenceCollectionError: If DescribeParameters fails
        """
        if not options.uses_ssm_parameters:
            return set()

        parameter_filters = [
            {"Key": "Name", "Option": "Contains", "Values": [SSM_PARAMETER_NAME_MARKER]},
        ]

        try:
            parameters = self.ssm.describe_parameters(parameter_filters=parameter_filters)

        except ClientError as exc:
            logger.error("SSM describe_parameters failed")
            raise ReferenceCollectionError(
                message="Unable to list SSM parameters",
                error_code=ERROR_CODE_SSM_PARAMETER_LIST_FAILED,
                details={"marker": SSM_PARAMETER_NAME_MARKER},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing SSM parameters")
            raise ReferenceCollectionError(
                message="Unable to list SSM parameters",
                error_code=ERROR_CODE_SSM_PARAMETER_LIST_FAILED,
                details={"marker": SSM_PARAMETER_NAME_MARKER},
            ) from exc

        logger.debug(
            "Found the following SSM parameters",
            extra={"parameters": [parameter.get("Name") for parameter in parameters]},
        )

        references: set[str] = set()
        for parameter in parameters:
            value = self._resolve(parameter.get("Name"))
            if value:
                references.add(value)

        return references

    def _resolve(self, name: str | None) -> str | None:
        """Return a parameter's value, or None when it cannot be read."""
        if not name:
            return None

        try:
            return self.ssm.get_parameter(name=name).get("Value")

        except Exception as exc:
            logger.warning(
                "Cannot resolve SSM parameter, ignoring it",
                extra={"parameter": name, "error": str(exc), "error_type": type(exc).__name__},
            )
            return None
