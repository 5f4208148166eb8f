"""Launch template source of in-use image references."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.ec2_adapter import Ec2Adapter, Ec2AdapterProtocol
from core.models.errors import ReferenceCollectionError
from core.models.options import CleanupOptions
from core.repositories.reference_repository import ImageReferenceSource
from core.utils.constants import (
    ERROR_CODE_LAUNCH_TEMPLATE_LIST_FAILED,
    LAUNCH_TEMPLATE_DEFAULT_VERSION,
)

logger = Logger(UTC=True)


class LaunchTemplateReferences(ImageReferenceSource):
    """Image ids referenced by the default version of launch templates.

    Each template is looked up independently: a template whose version
    cannot be fetched contributes nothing, the others still count.
    """

    source_name = "launch_templates"

    def __init__(self, adapter: Ec2AdapterProtocol | None = None) -> None:
        """Initialize with EC2 adapter."""
        self._ec2: Ec2AdapterProtocol = adapter or Ec2Adapter()

    def collect_references(self, options: CleanupOptions) -> set[str]:
        """Collect ImageId from the default version of each template.

        Raises:
            ReferenceCollectionError: If DescribeLaunchTemplates fails
        """
        names = options.launch_template_names

        try:
            templates = self._ec2.describe_launch_templates(names=names)

        except ClientError as exc:
            logger.error(
                "EC2 describe_launch_templates failed",
                extra={"launch_template_names": names},
            )
            raise ReferenceCollectionError(
                message="Unable to list launch templates",
                error_code=ERROR_CODE_LAUNCH_TEMPLATE_LIST_FAILED,
                details={"launch_template_names": names},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing launch templates")
            raise ReferenceCollectionError(
                message="Unable to list launch templates",
                error_code=ERROR_CODE_LAUNCH_TEMPLATE_LIST_FAILED,
                details={"launch_template_names": names},
            ) from exc

        references: set[str] = set()
        for template in templates:
            references.update(self._default_version_images(template.get("LaunchTemplateId")))

        return references

    def _default_version_images(self, launch_template_id: str | None) -> set[str]:
        if not launch_template_id:
            return set()

        try:
            versions = self._ec2.describe_launch_template_versions(
                launch_template_id=launch_template_id,
                versions=[LAUNCH_TEMPLATE_DEFAULT_VERSION],
            )

        except Exception as exc:
            logger.warning(
                "Cannot read default version of launch template, ignoring it",
                extra={
                    "launch_template_id": launch_template_id,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            return set()

        image_ids = [(version.get("LaunchTemplateData") or {}).get("ImageId") for version in versions]
        return {image_id for image_id in image_ids if image_id}
