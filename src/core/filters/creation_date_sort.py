"""Oldest-first ordering for machine images."""

from operator import attrgetter

from core.models.image import MachineImage


class CreationDateSort:
    """Sort images ascending by creation date.

    Images without a creation date stay at the index the listing gave
    them; the dated images are sorted into the remaining slots. Undated
    images are never deleted, so their position only affects log ordering.
    """

    @staticmethod
    def apply(images: list[MachineImage]) -> list[MachineImage]:
        """Return a new list with dated images ordered oldest first."""
        dated = iter(
            sorted(
                (image for image in images if image.creation_date is not None),
                key=attrgetter("creation_date"),
            )
        )

        return [next(dated) if image.creation_date is not None else image for image in images]
