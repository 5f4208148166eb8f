from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest

from core.models.errors import (
    DeregistrationError,
    ImageInventoryError,
    SnapshotDeletionError,
)
from core.models.image import MachineImage
from core.models.options import CleanupOptions
from core.repositories.image_repository import ImageRepository
from core.repositories.reference_repository import ImageReferenceSource


class StubImageRepository(ImageRepository):
    """In-memory ImageRepository recording every mutating call."""

    def __init__(self, images: list[MachineImage] | None = None) -> None:
        self.images = list(images or [])
        self.failing_deregistrations: set[str] = set()
        self.failing_snapshots: set[str] = set()
        self.list_error: Exception | None = None

        self.list_calls: list[dict[str, Any]] = []
        self.deregistered: list[str] = []
        self.deleted_snapshots: list[tuple[str, str]] = []

    def list_owned_images(
        self,
        *,
        filters: list[dict[str, Any]],
        max_results: int | None = None,
    ) -> list[MachineImage]:
        self.list_calls.append({"filters": filters, "max_results": max_results})
        if self.list_error:
            raise ImageInventoryError(message="Unable to list owned images") from self.list_error

        ordered = sorted(
            self.images,
            key=lambda image: image.creation_date or datetime.max.replace(tzinfo=timezone.utc),
        )
        return ordered[:max_results] if max_results else ordered

    def deregister_image(self, *, image_id: str) -> None:
        self.deregistered.append(image_id)
        if image_id in self.failing_deregistrations:
            raise DeregistrationError(message=f"Cannot deregister ami {image_id}")
        self.images = [image for image in self.images if image.image_id != image_id]

    def delete_snapshot(self, *, snapshot_id: str, image_id: str) -> None:
        self.deleted_snapshots.append((snapshot_id, image_id))
        if snapshot_id in self.failing_snapshots:
            raise SnapshotDeletionError(message=f"Cannot delete snapshot {snapshot_id} for {image_id}")


class StubReferenceSource(ImageReferenceSource):
    """Reference source returning a fixed set of ids."""

    def __init__(
        self,
        references: set[str] | None = None,
        *,
        source_name: str = "stub",
        error: Exception | None = None,
    ) -> None:
        self.references = set(references or set())
        self.source_name = source_name
        self.error = error
        self.calls: list[CleanupOptions] = []

    def collect_references(self, options: CleanupOptions) -> set[str]:
        self.calls.append(options)
        if self.error:
            raise self.error
        return set(self.references)


def make_image(
    image_id: str,
    *,
    days_old: float | None,
    snapshot_ids: list[str] | None = None,
) -> MachineImage:
    creation_date = None
    if days_old is not None:
        creation_date = datetime.now(timezone.utc) - timedelta(days=days_old)

    return MachineImage(
        image_id=image_id,
        creation_date=creation_date,
        snapshot_ids=snapshot_ids or [],
    )


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def image_repository() -> StubImageRepository:
    return StubImageRepository()


@pytest.fixture
def stub_reference_source():
    return StubReferenceSource


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
        get_remaining_time_in_millis=lambda: 300_000,
    )


@pytest.fixture
def scheduled_event() -> dict[str, Any]:
    return {
        "version": "0",
        "id": "53dc4d37-cffa-4f76-80c9-8b7d4a4d2eaa",
        "detail-type": "Scheduled Event",
        "source": "aws.events",
        "account": "123456789012",
        "time": "2024-01-01T00:00:00Z",
        "region": "us-east-1",
        "resources": ["arn:aws:events:us-east-1:123456789012:rule/ami-housekeeper"],
        "detail": {},
    }
