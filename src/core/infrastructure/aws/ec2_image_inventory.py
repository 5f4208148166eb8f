"""EC2-backed implementation of ImageRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.filters.creation_date_sort import CreationDateSort
from core.infrastructure.adapters.ec2_adapter import Ec2Adapter, Ec2AdapterProtocol
from core.models.errors import (
    DeregistrationError,
    ImageInventoryError,
    SnapshotDeletionError,
)
from core.models.image import MachineImage
from core.repositories.image_repository import ImageRepository
from core.utils.constants import IMAGE_OWNER_SELF

logger = Logger(UTC=True)


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


class Ec2ImageInventory(ImageRepository):
    """Owned AMIs and their snapshots, backed by EC2.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: Ec2AdapterProtocol | None = None) -> None:
        """Initialize with EC2 adapter."""
        self._ec2: Ec2AdapterProtocol = adapter or Ec2Adapter()

    def list_owned_images(
        self,
        *,
        filters: list[dict[str, Any]],
        max_results: int | None = None,
    ) -> list[MachineImage]:
        """List owned images sorted oldest first.

        NOTE:
        - A single DescribeImages request is issued.
        - max_results caps that request, so it narrows the pool before
          in-use images are excluded.

        Raises:
            ImageInventoryError: If the listing fails
        """
        logger.debug(
            "Listing owned images",
            extra={"filters": filters, "max_results": max_results},
        )

        try:
            items = self._ec2.describe_images(
                owners=[IMAGE_OWNER_SELF],
                filters=filters,
                max_results=max_results,
            )

        except ClientError as exc:
            logger.error(
                "EC2 describe_images failed",
                extra={"error_code": _error_code(exc)},
            )
            raise ImageInventoryError(
                message="Unable to list owned images",
                details={"filters": filters},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing images")
            raise ImageInventoryError(
                message="Unable to list owned images",
                details={"filters": filters},
            ) from exc

        images = CreationDateSort.apply([MachineImage.from_ec2(item) for item in items])
        logger.info(f"found #{len(images)} images in ec2")

        return images

    def deregister_image(self, *, image_id: str) -> None:
        """Deregister an image.

        Raises:
            DeregistrationError: If deregistration fails
        """
        try:
            self._ec2.deregister_image(image_id=image_id)

        except ClientError as exc:
            raise DeregistrationError(
                message=f"Cannot deregister ami {image_id}",
                details={"image_id": image_id, "aws_error_code": _error_code(exc)},
            ) from exc

        except Exception as exc:
            raise DeregistrationError(
                message=f"Cannot deregister ami {image_id}",
                details={"image_id": image_id},
            ) from exc

    def delete_snapshot(self, *, snapshot_id: str, image_id: str) -> None:
        """Delete a snapshot that backed the given image.

        Raises:
            SnapshotDeletionError: If deletion fails
        """
        try:
            self._ec2.delete_snapshot(snapshot_id=snapshot_id)

        except ClientError as exc:
            raise SnapshotDeletionError(
                message=f"Cannot delete snapshot {snapshot_id} for {image_id}",
                details={
                    "snapshot_id": snapshot_id,
                    "image_id": image_id,
                    "aws_error_code": _error_code(exc),
                },
            ) from exc

        except Exception as exc:
            raise SnapshotDeletionError(
                message=f"Cannot delete snapshot {snapshot_id} for {image_id}",
                details={"snapshot_id": snapshot_id, "image_id": image_id},
            ) from exc
