"""Abstract contract for sources of in-use image references."""

from abc import ABC, abstractmethod

from core.models.options import CleanupOptions


class ImageReferenceSource(ABC):
    """A source of image ids that must not be deleted.

    Implementations could be SSM parameters, launch templates,
    auto scaling groups, etc.
    """

    #: Short label used in logs.
    source_name: str = "unknown"

    @abstractmethod
    def collect_references(self, options: CleanupOptions) -> set[str]:
        """Return the image ids this source currently references.

        Unresolvable individual entries contribute nothing.

        Raises:
            ReferenceCollectionError: If the source itself cannot be listed
        """
