"""Abstract contract for machine image inventory and deletion."""

from abc import ABC, abstractmethod
from typing import Any

from core.models.image import MachineImage


class ImageRepository(ABC):
    """Contract for listing owned images and removing them.

    The service depends on this interface, not the EC2 implementation.
    """

    @abstractmethod
    def list_owned_images(
        self,
        *,
        filters: list[dict[str, Any]],
        max_results: int | None = None,
    ) -> list[MachineImage]:
        """List images owned by the running account.

        Args:
            filters: DescribeImages-style filters (Name/Values)
            max_results: Optional cap on the raw listing

        Returns:
            Images sorted oldest first

        Raises:
            ImageInventoryError: If the listing fails
        """

    @abstractmethod
    def deregister_image(self, *, image_id: str) -> None:
        """Deregister an image.

        Raises:
            DeregistrationError: If deregistration fails
        """

    @abstractmethod
    def delete_snapshot(self, *, snapshot_id: str, image_id: str) -> None:
        """Delete a snapshot that backed the given image.

        Raises:
            SnapshotDeletionError: If deletion fails
        """
