"""Business logic for cleaning up unused AMIs.

This module resolves which owned images are no longer referenced by
launch templates or SSM parameters and deletes the ones past the
retention threshold, together with their EBS snapshots. A failure on one
image or snapshot is logged and never stops the rest of the run.
"""

import time
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any

from aws_lambda_powertools import Logger

from core.filters.in_use_filter import InUseFilter
from core.infrastructure.adapters.ec2_adapter import Ec2Adapter
from core.infrastructure.aws.ec2_image_inventory import Ec2ImageInventory
from core.infrastructure.aws.launch_template_references import LaunchTemplateReferences
from core.infrastructure.aws.ssm_parameter_references import SsmParameterReferences
from core.models.errors import DeregistrationError, SnapshotDeletionError
from core.models.image import MachineImage
from core.models.options import CleanupOptions
from core.models.result import CleanupResult, DeletionStatus, ImageDeletionOutcome
from core.repositories.image_repository import ImageRepository
from core.repositories.reference_repository import ImageReferenceSource
from core.utils.config import parse_cleanup_options
from core.utils.constants import (
    DEADLINE_SAFETY_MARGIN_MS,
    DELETE_PACING_SECONDS,
    MAX_SNAPSHOT_WORKERS,
)
from core.utils.time import days_ago, utc_now

logger = Logger(UTC=True)


class HousekeeperService:
    """Application service responsible for AMI cleanup.

    This service orchestrates:
    - Collection of in-use image references from every reference source
    - Resolution of owned images that are not in use, oldest first
    - Age-gated deregistration of those images and deletion of their snapshots

    It does not perform low-level infrastructure operations directly.
    """

    def __init__(
        self,
        images: ImageRepository | None = None,
        reference_sources: Sequence[ImageReferenceSource] | None = None,
        *,
        pacing_seconds: float = DELETE_PACING_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the service with its infrastructure dependencies."""
        if images is None or reference_sources is None:
            ec2 = Ec2Adapter()
            images = images or Ec2ImageInventory(ec2)
            if reference_sources is None:
                reference_sources = [SsmParameterReferences(), LaunchTemplateReferences(ec2)]

        self.images = images
        self.reference_sources = list(reference_sources)
        self._pacing_seconds = pacing_seconds
        self._sleep = sleep
        self._clock = clock

    def collect_in_use_references(self, options: CleanupOptions) -> set[str]:
        """Union of the image ids referenced by every source.

        Raises:
            ReferenceCollectionError: If a source cannot be listed
        """
        in_use: set[str] = set()

        for source in self.reference_sources:
            references = source.collect_references(options)
            logger.info(
                f"found #{len(references)} images referenced in {source.source_name}",
                extra={"source": source.source_name, "image_ids": sorted(references)},
            )
            in_use |= references

        return in_use

    def resolve_unused(self, options: CleanupOptions) -> list[MachineImage]:
        """Owned images not referenced anywhere, oldest first.

        References are collected before the inventory is listed. The
        max_items cap applies to the inventory listing itself.

        Raises:
            ReferenceCollectionError: If a reference source cannot be listed
            ImageInventoryError: If the inventory cannot be listed
        """
        in_use = self.collect_in_use_references(options)

        images = self.images.list_owned_images(
            filters=options.boto_filters(),
            max_results=options.max_items,
        )

        not_in_use = InUseFilter.apply(images, in_use)
        logger.info(f"found #{len(not_in_use)} images in ec2 not in use.")

        return not_in_use

    def delete_image(
        self,
        image: MachineImage,
        minimum_days_old: int,
        *,
        dry_run: bool = False,
    ) -> ImageDeletionOutcome:
        """Deregister one image and delete its snapshots if it is old enough.

        Never raises: failures are logged and reported in the outcome.
        Snapshots are only deleted after a successful deregistration.
        """
        if image.creation_date is None:
            logger.warning(f"ami {image.image_id} has no creation date")
            return ImageDeletionOutcome(image_id=image.image_id, status=DeletionStatus.SKIPPED_NO_DATE)

        cutoff = days_ago(minimum_days_old, now=self._clock())
        if image.creation_date >= cutoff:
            logger.debug(
                f"ami {image.display_name} created on {image.creation_date.isoformat()} is not deleted, "
                f"not older than {minimum_days_old} days"
            )
            return ImageDeletionOutcome(image_id=image.image_id, status=DeletionStatus.SKIPPED_TOO_YOUNG)

        if dry_run:
            logger.info(
                f"dry run: would delete ami {image.image_id} created at {image.creation_date.isoformat()}",
                extra={"image_id": image.image_id, "snapshot_ids": image.snapshot_ids},
            )
            return ImageDeletionOutcome(image_id=image.image_id, status=DeletionStatus.DRY_RUN)

        logger.info(f"deleting ami {image.image_id} created at {image.creation_date.isoformat()}")

        try:
            self.images.deregister_image(image_id=image.image_id)
        except DeregistrationError as exc:
            logger.warning(
                f"Cannot delete ami {image.image_id}",
                extra={"image_id": image.image_id, "details": exc.details},
            )
            logger.debug(f"Cannot delete ami {image.image_id}", exc_info=exc)
            return ImageDeletionOutcome(image_id=image.image_id, status=DeletionStatus.DEREGISTER_FAILED)
        except Exception:
            logger.exception(f"Unexpected error deleting ami {image.image_id}", extra={"image_id": image.image_id})
            return ImageDeletionOutcome(image_id=image.image_id, status=DeletionStatus.DEREGISTER_FAILED)

        deleted, failed = self._delete_snapshots(image)

        return ImageDeletionOutcome(
            image_id=image.image_id,
            status=DeletionStatus.DELETED,
            deleted_snapshot_ids=deleted,
            failed_snapshot_ids=failed,
        )

    def _delete_snapshots(self, image: MachineImage) -> tuple[list[str], list[str]]:
        """Delete every snapshot of an image concurrently and wait for all of them."""
        if not image.snapshot_ids:
            return [], []

        workers = min(len(image.snapshot_ids), MAX_SNAPSHOT_WORKERS)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._delete_snapshot, image, snapshot_id)
                for snapshot_id in image.snapshot_ids
            ]
            succeeded = [future.result() for future in futures]

        deleted = [snapshot_id for snapshot_id, ok in zip(image.snapshot_ids, succeeded) if ok]
        failed = [snapshot_id for snapshot_id, ok in zip(image.snapshot_ids, succeeded) if not ok]

        return deleted, failed

    def _delete_snapshot(self, image: MachineImage, snapshot_id: str) -> bool:
        try:
            logger.info(f"deleting snapshot {snapshot_id} from ami {image.image_id}")
            self.images.delete_snapshot(snapshot_id=snapshot_id, image_id=image.image_id)
            return True

        except SnapshotDeletionError as exc:
            logger.error(
                f"Cannot delete snapshot {snapshot_id} for {image.image_id}",
                extra={"snapshot_id": snapshot_id, "image_id": image.image_id, "details": exc.details},
            )
            logger.debug(f"Cannot delete snapshot {snapshot_id} for {image.image_id}", exc_info=exc)
            return False

        except Exception:
            logger.exception(
                f"Unexpected error deleting snapshot {snapshot_id} for {image.image_id}",
                extra={"snapshot_id": snapshot_id, "image_id": image.image_id},
            )
            return False

    def run_cleanup(
        self,
        options: CleanupOptions | Mapping[str, Any] | None = None,
        *,
        remaining_time_ms: Callable[[], int] | None = None,
    ) -> CleanupResult:
        """Delete unused AMIs older than the configured threshold.

        Images are processed one at a time, oldest first, with a short pause
        before each deletion to limit the EC2 request rate. When
        ``remaining_time_ms`` is given, no new image is started once the
        invocation is about to time out.

        Raises:
            ConfigurationError: If raw options are invalid
            ReferenceCollectionError: If a reference source cannot be listed
            ImageInventoryError: If the inventory cannot be listed
        """
        if not isinstance(options, CleanupOptions):
            options = parse_cleanup_options(options)

        logger.info(f"Cleaning up non used AMIs older than {options.minimum_days_old} days")
        logger.debug("Using the following options", extra={"options": options.model_dump(by_alias=True)})

        candidates = self.resolve_unused(options)
        result = CleanupResult(not_in_use_count=len(candidates))

        for index, image in enumerate(candidates):
            if remaining_time_ms is not None and remaining_time_ms() < DEADLINE_SAFETY_MARGIN_MS:
                result.not_processed_count = len(candidates) - index
                logger.warning(
                    "Invocation deadline approaching, stopping cleanup",
                    extra={"not_processed": result.not_processed_count},
                )
                break

            self._sleep(self._pacing_seconds)
            result.outcomes.append(
                self.delete_image(image, options.minimum_days_old, dry_run=options.dry_run)
            )

        logger.info("AMI cleanup finished", extra=result.summary())

        return result
